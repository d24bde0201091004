"""Room session: one viewer's cached view of one room.

The session holds the last snapshot confirmed by the room service and the share table
derived from it. Every call to the service either replaces both wholesale or leaves
both untouched.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Optional, Protocol

from splitroom.errors import RoomInactive, TransportError, UnknownParticipant
from splitroom.logging import get_logger
from splitroom.models import Participant, Receipt, ReceiptItem, Room, SharedCharges, TagAction
from splitroom.services.authz import assert_can_request_payment, assert_room_active, assert_room_participant
from splitroom.services.settlement import SettlementRequest, build_request
from splitroom.services.split import compute_shares
from splitroom.services.tags import TagRegistry


class RoomService(Protocol):
    async def get_room(self, room_id: str) -> Room: ...

    async def create_room(self, room_name: str, display_name: str, payee_identifier: str) -> Room: ...

    async def join_room(self, room_id: str, display_name: str, payee_identifier: str) -> Room: ...

    async def upload_receipt(self, room_id: str, image: bytes, filename: str | None = None) -> Receipt: ...

    async def toggle_item_tag(
        self,
        room_id: str,
        item_index: int,
        participant_id: str,
        action: TagAction,
    ) -> tuple[bool, tuple[ReceiptItem, ...]]: ...


class RoomSession:
    def __init__(
        self,
        service: RoomService,
        room: Room,
        viewer_id: str,
        currency: str = "INR",
        payment_scheme: str = "upi",
    ) -> None:
        self._service = service
        self._viewer_id = viewer_id
        self._currency = currency
        self._payment_scheme = payment_scheme
        self._item_locks: dict[int, asyncio.Lock] = {}
        self._log = get_logger(__name__).bind(room_id=room.id, viewer_id=viewer_id)
        self._registry = TagRegistry((), ())
        self._shares: dict[str, Decimal] = {}
        assert_room_participant(room, viewer_id)
        self._apply(room)

    @classmethod
    async def open(cls, service: RoomService, room_id: str, viewer_id: str, **options: str) -> RoomSession:
        room = await service.get_room(room_id)
        return cls(service, room, viewer_id, **options)

    @classmethod
    async def create(
        cls,
        service: RoomService,
        room_name: str,
        display_name: str,
        payee_identifier: str,
        **options: str,
    ) -> RoomSession:
        room = await service.create_room(room_name, display_name, payee_identifier)
        return cls(service, room, room.creator_id, **options)

    @classmethod
    async def join(
        cls,
        service: RoomService,
        room_id: str,
        display_name: str,
        payee_identifier: str,
        **options: str,
    ) -> RoomSession:
        room = await service.join_room(room_id, display_name, payee_identifier)
        joined = [
            p
            for p in room.participants
            if p.display_name == display_name and p.payee_identifier == payee_identifier
        ]
        if not joined:
            raise UnknownParticipant(display_name)
        return cls(service, room, joined[-1].id, **options)

    @property
    def room(self) -> Room:
        return self._room

    @property
    def receipt(self) -> Optional[Receipt]:
        return self._room.receipt

    @property
    def items(self) -> tuple[ReceiptItem, ...]:
        return self._registry.items

    @property
    def viewer(self) -> Participant:
        return assert_room_participant(self._room, self._viewer_id)

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def shares(self) -> dict[str, Decimal]:
        return dict(self._shares)

    def share_of(self, participant_id: str) -> Decimal:
        if participant_id not in self._shares:
            raise UnknownParticipant(participant_id)
        return self._shares[participant_id]

    def is_tagged(self, item_index: int) -> bool:
        return self._registry.is_tagged(item_index, self._viewer_id)

    async def refresh(self) -> Room:
        room = await self._service.get_room(self._room.id)
        self._apply(room)
        self._log.info("session.refreshed", participants=len(room.participants))
        return room

    async def upload_receipt(self, image: bytes, filename: str | None = None) -> Receipt:
        assert_room_active(self._room)
        receipt = await self._service.upload_receipt(self._room.id, image, filename)
        self._log.info("session.receipt.uploaded", items=len(receipt.items))
        await self.refresh()
        return self._room.receipt or receipt

    async def toggle_tag(self, item_index: int) -> Optional[TagAction]:
        """Submit the viewer's tag toggle for one item and adopt the confirmed tags.

        Toggles on the same item are serialized so each one decides its action from
        the outcome of the previous one. Returns ``None`` when the service declines.
        """
        lock = self._item_locks.setdefault(item_index, asyncio.Lock())
        async with lock:
            if not self._room.is_active:
                raise RoomInactive()
            action = self._registry.toggle(item_index, self._viewer_id)
            self._log.info("session.toggle.sent", item_index=item_index, action=action.value)

            success, items = await self._service.toggle_item_tag(
                self._room.id, item_index, self._viewer_id, action
            )
            if not success:
                self._log.warning("session.toggle.rejected", item_index=item_index, action=action.value)
                return None

            receipt = self._room.receipt
            if receipt is None or not 0 <= item_index < len(items):
                self._log.warning("session.toggle.invalid_response", item_index=item_index, items=len(items))
                raise TransportError("Invalid response from server")
            self._apply(self._room.with_receipt(receipt.with_items(items)))
            self._log.info("session.toggle.confirmed", item_index=item_index, action=action.value)
            return action

    def settlement_request(self, participant_id: str) -> Optional[SettlementRequest]:
        requester, participant = assert_can_request_payment(self._room, self._viewer_id, participant_id)
        return build_request(
            requester,
            participant,
            self.share_of(participant.id),
            self.items,
            self._currency,
        )

    def payment_link(self, participant_id: str) -> Optional[str]:
        request = self.settlement_request(participant_id)
        if request is None:
            return None
        return request.to_uri(self._payment_scheme)

    def payment_links(self) -> dict[str, str]:
        links = {}
        for participant in self._room.participants:
            if participant.id == self._viewer_id:
                continue
            link = self.payment_link(participant.id)
            if link:
                links[participant.id] = link
        return links

    def _apply(self, room: Room) -> None:
        receipt = room.receipt
        items = receipt.items if receipt else ()
        shared = receipt.shared_charges if receipt else SharedCharges()
        shares = compute_shares(items, room.participants, shared)

        self._room = room
        self._registry.replace(items, room.participant_ids)
        self._shares = shares
