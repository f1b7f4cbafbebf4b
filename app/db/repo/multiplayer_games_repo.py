from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.multiplayer_games import BonusChestGame, MultiplayerGame, MultiplayerPlayer


class MultiplayerGamesRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, game_id: UUID) -> MultiplayerGame | None:
        return await session.get(MultiplayerGame, game_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, game_id: UUID) -> MultiplayerGame | None:
        stmt = select(MultiplayerGame).where(MultiplayerGame.id == game_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_room_code_for_update(
        session: AsyncSession,
        room_code: str,
    ) -> MultiplayerGame | None:
        stmt = (
            select(MultiplayerGame)
            .where(MultiplayerGame.room_code == room_code)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def room_code_exists(session: AsyncSession, room_code: str) -> bool:
        stmt = select(MultiplayerGame.id).where(MultiplayerGame.room_code == room_code)
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def get_open_public_for_update(
        session: AsyncSession,
        *,
        max_players: int,
    ) -> MultiplayerGame | None:
        seated = (
            select(func.count(MultiplayerPlayer.id))
            .where(MultiplayerPlayer.game_id == MultiplayerGame.id)
            .correlate(MultiplayerGame)
            .scalar_subquery()
        )
        stmt = (
            select(MultiplayerGame)
            .where(
                MultiplayerGame.is_public.is_(True),
                MultiplayerGame.status == "waiting",
                seated < max_players,
            )
            .order_by(MultiplayerGame.created_at.asc(), MultiplayerGame.id.asc())
            .limit(1)
            .with_for_update(skip_locked=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_waiting_due_for_update(
        session: AsyncSession,
        *,
        now_utc: datetime,
        limit: int,
    ) -> list[MultiplayerGame]:
        resolved_limit = max(1, int(limit))
        stmt = (
            select(MultiplayerGame)
            .where(
                MultiplayerGame.status == "waiting",
                MultiplayerGame.wait_timeout_at <= now_utc,
            )
            .order_by(MultiplayerGame.wait_timeout_at.asc())
            .limit(resolved_limit)
            .with_for_update(skip_locked=True)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(session: AsyncSession, *, game: MultiplayerGame) -> MultiplayerGame:
        session.add(game)
        await session.flush()
        return game

    @staticmethod
    async def add_player(
        session: AsyncSession,
        *,
        game: MultiplayerGame,
        player: MultiplayerPlayer,
    ) -> MultiplayerPlayer:
        game.players.append(player)
        await session.flush()
        return player

    @staticmethod
    async def create_chest_game(
        session: AsyncSession,
        *,
        game: MultiplayerGame,
        chest_game: BonusChestGame,
    ) -> BonusChestGame:
        game.chest_game = chest_game
        await session.flush()
        return chest_game
