from __future__ import annotations

import asyncio

from splitroom.api.client import RoomDirectoryClient
from splitroom.config import Settings, get_settings
from splitroom.logging import bind_room_context, configure_logging, get_logger
from splitroom.scheduler import setup_scheduler
from splitroom.services.rooms import format_room_card
from splitroom.session import RoomSession


def report(session: RoomSession, settings: Settings) -> None:
    print(format_room_card(session.room, session.shares, settings.zoneinfo, settings.currency))
    log = get_logger(__name__)
    for participant_id, link in session.payment_links().items():
        log.info("app.payment_link", participant_id=participant_id, link=link)


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, json=settings.log_json)
    if not settings.room_id or not settings.viewer_id:
        raise SystemExit("ROOM_ID and VIEWER_ID must be set")

    bind_room_context(settings.room_id, settings.viewer_id)
    log = get_logger(__name__)
    client = RoomDirectoryClient(settings.room_api_url, timeout=settings.request_timeout)
    await client.connect()
    try:
        session = await RoomSession.open(
            client,
            settings.room_id,
            settings.viewer_id,
            currency=settings.currency,
            payment_scheme=settings.payment_scheme,
        )
        report(session, settings)

        scheduler = await setup_scheduler(session, on_refresh=lambda s: report(s, settings))
        log.info("app.start")
        try:
            await asyncio.Event().wait()
        finally:
            scheduler.shutdown(wait=False)
    finally:
        await client.close()
        log.info("app.stop")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
