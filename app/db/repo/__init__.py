from app.db.repo.achievements_repo import AchievementsRepo
from app.db.repo.game_sessions_repo import GameSessionsRepo
from app.db.repo.images_repo import ImagesRepo
from app.db.repo.leaderboard_repo import LeaderboardRepo
from app.db.repo.multiplayer_games_repo import MultiplayerGamesRepo

__all__ = [
    "AchievementsRepo",
    "GameSessionsRepo",
    "ImagesRepo",
    "LeaderboardRepo",
    "MultiplayerGamesRepo",
]
