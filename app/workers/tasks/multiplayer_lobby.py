from __future__ import annotations

from datetime import datetime, timezone

import structlog

from app.core.config import get_settings
from app.db.repo.multiplayer_games_repo import MultiplayerGamesRepo
from app.db.session import SessionLocal
from app.game.multiplayer.service import STATUS_IN_PROGRESS, MultiplayerService
from app.workers.asyncio_runner import run_async_job
from app.workers.celery_app import celery_app

logger = structlog.get_logger(__name__)
settings = get_settings()

LOBBY_BATCH_SIZE = max(1, int(settings.multiplayer_lobby_batch_size))
SCAN_INTERVAL_SECONDS = max(5, int(settings.multiplayer_lobby_scan_interval_seconds))


async def run_multiplayer_lobby_sweep_async(*, batch_size: int = LOBBY_BATCH_SIZE) -> dict[str, int]:
    now_utc = datetime.now(timezone.utc)
    resolved_batch_size = max(1, int(batch_size))

    games_scanned = 0
    games_started = 0
    bots_added_total = 0
    async with SessionLocal.begin() as session:
        due_games = await MultiplayerGamesRepo.list_waiting_due_for_update(
            session,
            now_utc=now_utc,
            limit=resolved_batch_size,
        )
        for game in due_games:
            games_scanned += 1
            bots_added_total += await MultiplayerService.fill_with_bots(
                session,
                game=game,
                now_utc=now_utc,
            )
            if game.status == STATUS_IN_PROGRESS:
                games_started += 1

    result = {
        "batch_size": resolved_batch_size,
        "games_scanned": games_scanned,
        "games_started": games_started,
        "bots_added_total": bots_added_total,
    }
    logger.info("multiplayer_lobby_sweep_finished", **result)
    return result


@celery_app.task(name="app.workers.tasks.multiplayer_lobby.run_multiplayer_lobby_sweep")
def run_multiplayer_lobby_sweep(batch_size: int = LOBBY_BATCH_SIZE) -> dict[str, int]:
    return run_async_job(run_multiplayer_lobby_sweep_async(batch_size=batch_size))


celery_app.conf.beat_schedule = celery_app.conf.beat_schedule or {}
celery_app.conf.beat_schedule.update(
    {
        "multiplayer-lobby-sweep": {
            "task": "app.workers.tasks.multiplayer_lobby.run_multiplayer_lobby_sweep",
            "schedule": float(SCAN_INTERVAL_SECONDS),
            "options": {"queue": "q_normal"},
        },
    }
)
