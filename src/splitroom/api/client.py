from __future__ import annotations

from typing import Any, Optional

import httpx

from pydantic import ValidationError

from splitroom.api.payloads import member_body, parse_receipt, parse_room_envelope, parse_tag_update
from splitroom.errors import (
    NotFound,
    ParseFailed,
    RoomInactive,
    RoomServiceError,
    TransportError,
    UnsupportedMediaType,
)
from splitroom.logging import get_logger, http_logger
from splitroom.models import Receipt, ReceiptItem, Room, TagAction
from splitroom.utils.parse import IMAGE_EXTENSIONS, detect_image_type

STATUS_ERRORS: dict[int, type[RoomServiceError]] = {
    403: RoomInactive,
    404: NotFound,
    409: RoomInactive,
    410: RoomInactive,
    415: UnsupportedMediaType,
    422: ParseFailed,
}


class RoomDirectoryClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._log = get_logger(__name__)

    async def connect(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
            self._log.info("http.client.created", base_url=self._base_url)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self._log.info("http.client.closed")

    async def __aenter__(self) -> RoomDirectoryClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def get_room(self, room_id: str) -> Room:
        data = await self._request("GET", f"/api/rooms/{room_id}")
        return self._room_from(data)

    async def create_room(self, room_name: str, display_name: str, payee_identifier: str) -> Room:
        body = {"roomName": room_name, **member_body(display_name, payee_identifier)}
        data = await self._request("POST", "/api/rooms/create", json=body)
        return self._room_from(data)

    async def join_room(self, room_id: str, display_name: str, payee_identifier: str) -> Room:
        data = await self._request(
            "POST",
            f"/api/rooms/join/{room_id}",
            json=member_body(display_name, payee_identifier),
        )
        return self._room_from(data)

    async def upload_receipt(self, room_id: str, image: bytes, filename: str | None = None) -> Receipt:
        media_type = detect_image_type(image)
        if media_type is None:
            raise UnsupportedMediaType()
        filename = filename or f"receipt.{IMAGE_EXTENSIONS[media_type]}"
        data = await self._request(
            "POST",
            f"/api/rooms/{room_id}/upload-receipt",
            files={"receipt": (filename, image, media_type)},
        )
        try:
            receipt = parse_receipt(data)
        except ValidationError as exc:
            raise ParseFailed() from exc
        if not receipt.items:
            raise ParseFailed()
        return receipt

    async def toggle_item_tag(
        self,
        room_id: str,
        item_index: int,
        participant_id: str,
        action: TagAction,
    ) -> tuple[bool, tuple[ReceiptItem, ...]]:
        data = await self._request(
            "POST",
            f"/api/rooms/{room_id}/items/{item_index}/tags",
            json={"userId": participant_id, "action": action.value},
        )
        try:
            success, items = parse_tag_update(data)
        except ValidationError as exc:
            raise TransportError("Invalid response from server") from exc
        if success and not 0 <= item_index < len(items):
            raise TransportError("Invalid response from server")
        return success, items

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        await self._ensure_client()
        assert self._client
        http_logger.info("http.request", method=method, path=path)
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise TransportError("The room service did not respond in time") from exc
        except httpx.HTTPError as exc:
            raise TransportError() from exc

        if response.is_error:
            raise self._error_for(response)
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError("Invalid response from server") from exc

    def _error_for(self, response: httpx.Response) -> RoomServiceError:
        message: str | None = None
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and isinstance(payload.get("message"), str):
            message = payload["message"]
        error_cls = STATUS_ERRORS.get(response.status_code, TransportError)
        self._log.warning(
            "http.error",
            status=response.status_code,
            path=response.request.url.path,
            error=error_cls.__name__,
        )
        return error_cls(message, status_code=response.status_code)

    def _room_from(self, data: Any) -> Room:
        try:
            return parse_room_envelope(data)
        except ValidationError as exc:
            raise TransportError("Invalid response format") from exc

    async def _ensure_client(self) -> None:
        if self._client is None:
            await self.connect()
