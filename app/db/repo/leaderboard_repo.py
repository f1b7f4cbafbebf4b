from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.leaderboard_entries import LeaderboardEntry


class LeaderboardRepo:
    @staticmethod
    async def create(session: AsyncSession, *, entry: LeaderboardEntry) -> LeaderboardEntry:
        session.add(entry)
        await session.flush()
        return entry
