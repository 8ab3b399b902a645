"""
Core Snake rules: body model, collisions, food placement, tick state machine.

Nothing in here touches pygame, so the rules can be driven (and tested)
without a window. The renderer reads `Game.snapshot()` and feeds input in
through `Game.queue_direction()`.
"""

import logging
import random
from collections import deque
from typing import Deque, Iterable, List, NamedTuple, Optional, Tuple

import snake_config as cfg

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]

# Movement directions (dx, dy); y grows downwards like screen coordinates
UP: Cell = (0, -1)
DOWN: Cell = (0, 1)
LEFT: Cell = (-1, 0)
RIGHT: Cell = (1, 0)
DIRECTIONS = (UP, DOWN, LEFT, RIGHT)

# Game phases
COUNTDOWN = "countdown"
RUNNING = "running"
GAME_OVER = "game_over"

# Death reasons
WALL = "wall"
SELF = "self"
BOARD_FULL = "board_full"


class SnakeError(RuntimeError):
    """A broken game invariant. Never raised during normal play."""


class EmptyBodyError(SnakeError):
    pass


class BoardFullError(SnakeError):
    pass


class Body:
    """
    The snake's occupied cells.

    Attributes:
        cells: deque of (x, y) from head at index 0 to tail at the end
        grow_pending: when set, the next advance keeps the tail
    """

    def __init__(self, cells: Iterable[Cell] = ()):
        self.cells: Deque[Cell] = deque(cells)
        self.grow_pending = False

    @classmethod
    def initialize(cls, length: int, cols: int, rows: int) -> "Body":
        """Horizontal body with the head at the grid centre, tail to the left."""
        sx, sy = cols // 2, rows // 2
        if length < 1 or length > sx + 1 or rows < 1:
            raise ValueError(f"Cannot fit a body of length {length} on a {cols}x{rows} grid")
        return cls((sx - i, sy) for i in range(length))

    @property
    def head(self) -> Cell:
        if not self.cells:
            raise EmptyBodyError("snake body is empty")
        return self.cells[0]

    @property
    def neck(self) -> Optional[Cell]:
        """Second segment, or None for a one-segment body."""
        return self.cells[1] if len(self.cells) > 1 else None

    def request_growth(self) -> None:
        self.grow_pending = True

    def advance(self, direction: Cell) -> Cell:
        """Push a new head one cell along `direction`; drop the tail unless growing."""
        hx, hy = self.head
        dx, dy = direction
        new_head = (hx + dx, hy + dy)
        self.cells.appendleft(new_head)
        if self.grow_pending:
            self.grow_pending = False
        else:
            self.cells.pop()
        return new_head

    def hits_itself(self) -> bool:
        """True when the head overlaps any later segment."""
        head = self.head
        it = iter(self.cells)
        next(it)
        return any(cell == head for cell in it)

    def __contains__(self, cell) -> bool:
        return cell in self.cells

    def __iter__(self):
        return iter(self.cells)

    def __len__(self) -> int:
        return len(self.cells)

    def __repr__(self):
        return f"<Body len={len(self.cells)} head={self.cells[0] if self.cells else None}>"


def out_of_bounds(cell: Cell, cols: int, rows: int) -> bool:
    x, y = cell
    return x < 0 or y < 0 or x >= cols or y >= rows


def place_food(body: Body, cols: int, rows: int, rng: random.Random) -> Cell:
    """
    Pick a uniformly random free cell by rejection sampling.

    Raises BoardFullError when the body already covers the board; sampling
    would otherwise never terminate.
    """
    if len(body) >= cols * rows:
        raise BoardFullError(f"no free cell left on a {cols}x{rows} board")
    while True:
        p = (rng.randrange(cols), rng.randrange(rows))
        if p not in body:
            return p


def tick_interval(base_delay: int, score: int) -> int:
    """Tick interval (ms) for a score: faster every level, clamped at MIN_DELAY_MS."""
    level = min(cfg.LEVEL_CAP, score // cfg.POINTS_PER_LEVEL)
    return max(cfg.MIN_DELAY_MS, base_delay - level * cfg.DELAY_STEP_MS)


class StepResult(NamedTuple):
    moved: bool = False
    ate: bool = False
    collided: bool = False
    reason: Optional[str] = None


class Game:
    """
    One round of Snake, from countdown to game over.

    Attributes:
        cols, rows: board dimensions
        difficulty: preset name, selects the base tick interval
        body: the snake
        direction: current movement vector
        food: cell holding the food
        score: points collected this round
        phase: COUNTDOWN, RUNNING or GAME_OVER
        countdown: remaining countdown value; 0 means "GO!" is showing
        interval: current game tick interval in ms
        death_reason: WALL, SELF or BOARD_FULL once the round has ended
    """

    def __init__(
        self,
        cols: int = cfg.GRID_COLS,
        rows: int = cfg.GRID_ROWS,
        difficulty: str = cfg.DEFAULT_DIFFICULTY,
        start_len: int = cfg.START_LEN,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        if cols * rows <= start_len:
            raise ValueError("board must leave at least one free cell for food")
        self.cols = cols
        self.rows = rows
        self.difficulty = difficulty.lower()
        self.base_delay = cfg.base_delay(self.difficulty)
        self.start_len = start_len
        self.rng = rng or random.Random(seed)
        self.pending: Deque[Cell] = deque(maxlen=cfg.MAX_PENDING_TURNS)
        self.reset()

    def reset(self) -> None:
        """Fresh body, food and score; re-enter the countdown."""
        self.body = Body.initialize(self.start_len, self.cols, self.rows)
        self.direction = RIGHT
        self.pending.clear()
        self.food = place_food(self.body, self.cols, self.rows, self.rng)
        self.score = 0
        self.interval = tick_interval(self.base_delay, 0)
        self.phase = COUNTDOWN
        self.countdown = cfg.COUNTDOWN_FROM
        self.death_reason: Optional[str] = None
        logger.info("New %s game on %dx%d board", self.difficulty, self.cols, self.rows)

    # ------------------------------ input ------------------------------
    def change_direction(self, direction: Cell) -> bool:
        """Turn unless the move would point straight back into the neck."""
        if direction not in DIRECTIONS:
            raise ValueError(f"Invalid direction {direction!r}")
        neck = self.body.neck
        if neck is not None:
            hx, hy = self.body.head
            if (hx + direction[0], hy + direction[1]) == neck:
                return False
        self.direction = direction
        return True

    def queue_direction(self, direction: Cell) -> None:
        """Buffer a key press; one is consumed per tick. Full queue drops the press."""
        if direction not in DIRECTIONS:
            raise ValueError(f"Invalid direction {direction!r}")
        if len(self.pending) < self.pending.maxlen:
            self.pending.append(direction)

    # ------------------------------ clock ------------------------------
    def countdown_label(self) -> Optional[str]:
        if self.phase != COUNTDOWN:
            return None
        return "GO!" if self.countdown <= 0 else str(self.countdown)

    def countdown_tick(self) -> None:
        if self.phase != COUNTDOWN:
            return
        self.countdown -= 1
        if self.countdown < 0:
            self.phase = RUNNING
            logger.debug("Countdown finished, running at %d ms", self.interval)

    def step(self) -> StepResult:
        """Advance one tick. Collisions end the round and are reported, not raised."""
        if self.phase != RUNNING:
            return StepResult()

        if self.pending:
            self.change_direction(self.pending.popleft())

        head = self.body.advance(self.direction)

        if out_of_bounds(head, self.cols, self.rows):
            return self._end(WALL)
        if self.body.hits_itself():
            return self._end(SELF)

        if head != self.food:
            return StepResult(moved=True)

        self.body.request_growth()
        self.score += cfg.FOOD_REWARD
        interval = tick_interval(self.base_delay, self.score)
        if interval != self.interval:
            logger.debug("Speed up: %d ms -> %d ms", self.interval, interval)
            self.interval = interval

        if len(self.body) >= self.cols * self.rows:
            self.food = None
            return self._end(BOARD_FULL, ate=True)
        self.food = place_food(self.body, self.cols, self.rows, self.rng)
        logger.debug("Food eaten, score %d, new food at %s", self.score, self.food)
        return StepResult(moved=True, ate=True)

    def _end(self, reason: str, ate: bool = False) -> StepResult:
        self.phase = GAME_OVER
        self.death_reason = reason
        self.pending.clear()
        logger.info("Game over (%s) with score %d, length %d", reason, self.score, len(self.body))
        return StepResult(moved=True, ate=ate, collided=reason != BOARD_FULL, reason=reason)

    def snapshot(self) -> dict:
        """Everything a renderer needs for one frame."""
        return {
            "body": list(self.body),
            "food": self.food,
            "score": self.score,
            "phase": self.phase,
            "countdown": self.countdown_label(),
            "interval_ms": self.interval,
            "death_reason": self.death_reason,
        }

    def __repr__(self):
        return (
            f"<Game phase={self.phase}, score={self.score}, "
            f"len={len(self.body)}, food={self.food}>"
        )


class Ticker:
    """
    Fixed-interval tick source driven by frame deltas.

    The frame loop calls update(dt_ms) once per frame and runs the returned
    number of ticks. A stopped ticker never fires.
    """

    def __init__(self, interval_ms: int):
        if interval_ms <= 0:
            raise ValueError("interval must be positive")
        self.interval_ms = interval_ms
        self.accum = 0.0
        self.running = False

    def start(self) -> None:
        self.accum = 0.0
        self.running = True

    def stop(self) -> None:
        self.running = False
        self.accum = 0.0

    def set_interval(self, interval_ms: int) -> None:
        if interval_ms <= 0:
            raise ValueError("interval must be positive")
        self.interval_ms = interval_ms
        self.accum = min(self.accum, float(interval_ms))

    def update(self, dt_ms: float) -> int:
        if not self.running:
            return 0
        self.accum += dt_ms
        fired = int(self.accum // self.interval_ms)
        self.accum -= fired * self.interval_ms
        return fired


def run_ticks(game: Game, ticker: Ticker, dt_ms: float) -> List[StepResult]:
    """Feed a frame delta to the game clock and step the game for each tick fired."""
    results = []
    for _ in range(ticker.update(dt_ms)):
        result = game.step()
        results.append(result)
        if game.phase != RUNNING:
            ticker.stop()
            break
        if game.interval != ticker.interval_ms:
            ticker.set_interval(game.interval)
    return results
