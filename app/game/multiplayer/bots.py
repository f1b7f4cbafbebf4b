from __future__ import annotations

import random
from collections.abc import Collection

BOT_CORRECT_PROBABILITY = 0.5

BOT_USERNAMES: tuple[str, ...] = (
    "PixelPhantomX",
    "ShadowByte77",
    "TurboGlitcher",
    "QuantumRogue",
    "NebulaHackz",
    "Zephyr",
    "Icarus",
    "Cassian",
    "Juno",
    "Elio",
)
BOT_ADJECTIVES: tuple[str, ...] = (
    "Swift",
    "Quick",
    "Rapid",
    "Smart",
    "Clever",
    "Wise",
    "Bright",
    "Brave",
    "Bold",
    "Mighty",
)
BOT_NOUNS: tuple[str, ...] = (
    "Player",
    "Gamer",
    "Challenger",
    "Contender",
    "Wizard",
    "Ninja",
    "Master",
    "Champion",
    "Warrior",
)

_system_rng = random.SystemRandom()


def generate_bot_name(*, taken: Collection[str] = (), rng: random.Random | None = None) -> str:
    resolved_rng = rng if rng is not None else _system_rng
    candidates = [name for name in BOT_USERNAMES if name not in taken]
    if candidates and resolved_rng.random() < 0.5:
        return resolved_rng.choice(candidates)
    for _ in range(20):
        name = f"{resolved_rng.choice(BOT_ADJECTIVES)}{resolved_rng.choice(BOT_NOUNS)}"
        if name not in taken:
            return name
    return f"{resolved_rng.choice(BOT_ADJECTIVES)}Bot{resolved_rng.randrange(100, 1000)}"


def simulate_bot_answer(*, rng: random.Random | None = None) -> bool:
    resolved_rng = rng if rng is not None else _system_rng
    return resolved_rng.random() < BOT_CORRECT_PROBABILITY
