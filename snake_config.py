# Snake — configuration block, difficulty presets and env overrides
# Values here are the defaults; .env / environment / CLI flags may override a few.

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# ---------------------------- Config ---------------------------------
CELL_SIZE     = 25               # pixels per cell
GRID_COLS     = 40               # grid columns
GRID_ROWS     = 25               # grid rows
STATS_HEIGHT  = 50               # score bar above the board (px)
FPS           = 60
START_LEN     = 3
FOOD_REWARD   = 5                # score per food eaten
COUNTDOWN_FROM = 3               # 3, 2, 1, GO!
COUNTDOWN_MS  = 1000             # one countdown step per second
MIN_DELAY_MS  = 40               # fastest tick interval
DELAY_STEP_MS = 5                # interval shaved off per level
POINTS_PER_LEVEL = 5             # score needed per level
LEVEL_CAP     = 30               # levels stop adding speed after this
MAX_PENDING_TURNS = 3            # queued direction presses kept between ticks
# ---------------------------------------------------------------------

# base tick interval (ms) per difficulty
DIFFICULTIES = {
    "easy":   240,
    "normal": 180,
    "hard":   120,
}
DEFAULT_DIFFICULTY = "normal"

WIDTH, HEIGHT = GRID_COLS * CELL_SIZE, GRID_ROWS * CELL_SIZE + STATS_HEIGHT

# Colors
BLACK=(0,0,0); DK=(64,64,64); LIT=(240,240,240)
SNAKE_EDGE=(0,150,0); SNAKE_BODY=(0,200,0); SNAKE_HEAD=(120,230,120)
FOOD=(178,34,34); FOOD_SHINE=(255,175,175); YEL=(255,255,0); RED=(180,30,30)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

logger = logging.getLogger(__name__)


def base_delay(difficulty: str) -> int:
    """Base tick interval in milliseconds for a difficulty name."""
    try:
        return DIFFICULTIES[difficulty.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown difficulty {difficulty!r}; expected one of {', '.join(DIFFICULTIES)}"
        ) from None


@dataclass
class Settings:
    difficulty: Optional[str] = None   # None = choose from the menu
    seed: Optional[int] = None
    mute: bool = False
    log_level: str = "INFO"


def _env_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def load_settings(args=None, dotenv_path=None) -> Settings:
    """
    Build Settings from the environment (.env supported) and parsed CLI args.

    CLI values win over environment values. `args` is an argparse.Namespace
    with difficulty / seed / mute / log_level attributes, any of which may be
    None (or False for mute) when the flag was not given.
    """
    load_dotenv(dotenv_path)

    settings = Settings(
        difficulty=os.getenv("SNAKE_DIFFICULTY") or None,
        mute=_env_bool(os.getenv("SNAKE_MUTE")),
        log_level=(os.getenv("SNAKE_LOG_LEVEL") or "INFO").upper(),
    )
    seed = os.getenv("SNAKE_SEED")
    if seed:
        try:
            settings.seed = int(seed)
        except ValueError:
            raise ValueError(f"SNAKE_SEED must be an integer, got {seed!r}") from None

    if args is not None:
        if getattr(args, "difficulty", None):
            settings.difficulty = args.difficulty
        if getattr(args, "seed", None) is not None:
            settings.seed = args.seed
        if getattr(args, "mute", False):
            settings.mute = True
        if getattr(args, "log_level", None):
            settings.log_level = args.log_level.upper()

    if settings.difficulty is not None:
        base_delay(settings.difficulty)  # validate early
        settings.difficulty = settings.difficulty.lower()
    if not isinstance(logging.getLevelName(settings.log_level), int):
        raise ValueError(f"Unknown log level {settings.log_level!r}")
    return settings


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.debug("Logging configured at %s", level)
