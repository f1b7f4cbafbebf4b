from app.db.models.achievement_awards import AchievementAward
from app.db.models.game_sessions import GameSession
from app.db.models.images import Image
from app.db.models.leaderboard_entries import LeaderboardEntry
from app.db.models.multiplayer_games import BonusChestGame, MultiplayerGame, MultiplayerPlayer

__all__ = [
    "AchievementAward",
    "BonusChestGame",
    "GameSession",
    "Image",
    "LeaderboardEntry",
    "MultiplayerGame",
    "MultiplayerPlayer",
]
