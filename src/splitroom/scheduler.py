from __future__ import annotations

from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from splitroom.config import get_settings
from splitroom.errors import RoomServiceError
from splitroom.logging import get_logger
from splitroom.session import RoomSession

RefreshCallback = Callable[[RoomSession], None]


async def setup_scheduler(
    session: RoomSession,
    interval: int | None = None,
    on_refresh: Optional[RefreshCallback] = None,
) -> AsyncIOScheduler:
    settings = get_settings()

    scheduler = AsyncIOScheduler(timezone=settings.tz)
    scheduler.add_job(
        _refresh_job,
        IntervalTrigger(seconds=interval or settings.refresh_interval),
        kwargs={"session": session, "on_refresh": on_refresh},
        id=f"refresh:{session.room.id}",
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    return scheduler


async def _refresh_job(session: RoomSession, on_refresh: Optional[RefreshCallback] = None) -> None:
    log = get_logger(__name__)
    try:
        await session.refresh()
    except RoomServiceError as exc:
        log.warning("refresh.failed", room_id=session.room.id, error=type(exc).__name__, message=exc.message)
        return
    if on_refresh is not None:
        on_refresh(session)
