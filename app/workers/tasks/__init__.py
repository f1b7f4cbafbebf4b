from app.workers.tasks.multiplayer_lobby import run_multiplayer_lobby_sweep

__all__ = [
    "run_multiplayer_lobby_sweep",
]
