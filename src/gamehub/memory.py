"""Memory Match: flip cards two at a time and pair up every symbol."""

from __future__ import annotations

from dataclasses import dataclass, field
import random
import time
import uuid
from typing import Callable, List, NamedTuple, Optional

from .engine import Difficulty, next_difficulty

SYMBOLS = (
    "🍎", "🚗", "⭐", "🐶", "🌙", "⚽", "🎵", "🍩", "🌼", "🧩",
    "🎲", "🍀", "🦄", "🍕", "🎈", "🐱", "🍉", "🚀", "🎮", "🧃",
)

MATCH = "match"
MISMATCH = "mismatch"


class GridConfig(NamedTuple):
    rows: int
    cols: int
    pair_count: int


GRID_CONFIGS = {
    Difficulty.EASY: GridConfig(rows=3, cols=4, pair_count=6),
    Difficulty.MEDIUM: GridConfig(rows=4, cols=4, pair_count=8),
    Difficulty.HARD: GridConfig(rows=4, cols=5, pair_count=10),
}


def grid_config(difficulty: Difficulty) -> GridConfig:
    return GRID_CONFIGS[Difficulty(difficulty)]


@dataclass
class Card:
    id: str
    symbol: str
    matched: bool = False


def make_deck(pair_count: int, rng: Optional[random.Random] = None) -> List[Card]:
    """Two cards for each of ``pair_count`` distinct random symbols, shuffled."""
    if not 1 <= pair_count <= len(SYMBOLS):
        raise ValueError(f"pair_count must be between 1 and {len(SYMBOLS)}")
    rng = rng or random
    picks = rng.sample(SYMBOLS, pair_count)
    deck = [
        Card(id=f"{symbol}:{side}:{uuid.uuid4().hex[:6]}", symbol=symbol)
        for symbol in picks
        for side in ("a", "b")
    ]
    rng.shuffle(deck)
    return deck


def format_time(seconds: float) -> str:
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"


@dataclass
class MemoryGame:
    difficulty: Difficulty = Difficulty.MEDIUM
    deck: List[Card] = field(default_factory=list)
    revealed: List[int] = field(default_factory=list)
    locked: bool = False
    moves: int = 0
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    rng: Optional[random.Random] = field(default=None, repr=False)
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    def __post_init__(self) -> None:
        self.difficulty = Difficulty(self.difficulty)
        if not self.deck:
            self.deck = make_deck(self.config.pair_count, self.rng)

    @property
    def config(self) -> GridConfig:
        return grid_config(self.difficulty)

    @property
    def all_matched(self) -> bool:
        return all(card.matched for card in self.deck)

    @property
    def elapsed_seconds(self) -> float:
        if self.started_at is None:
            return 0.0
        end = self.finished_at if self.finished_at is not None else self.clock()
        return max(0.0, end - self.started_at)

    @property
    def pending_outcome(self) -> Optional[str]:
        """Whether the two face-up cards pair up, or None if fewer are up."""
        if len(self.revealed) != 2:
            return None
        first, second = self.revealed
        if self.deck[first].symbol == self.deck[second].symbol:
            return MATCH
        return MISMATCH

    def is_face_up(self, index: int) -> bool:
        return self.deck[index].matched or index in self.revealed

    def flip(self, index: int) -> bool:
        """Turn a card face up. Returns False when the flip is ignored."""
        if not 0 <= index < len(self.deck):
            raise ValueError(f"Card index must be between 0 and {len(self.deck) - 1}")
        if self.locked or self.deck[index].matched:
            return False
        if self.started_at is None:
            self.started_at = self.clock()
        if index in self.revealed or len(self.revealed) >= 2:
            return False

        self.revealed.append(index)
        if len(self.revealed) == 2:
            self.moves += 1
            if self.pending_outcome == MISMATCH:
                self.locked = True
        return True

    def settle(self) -> Optional[str]:
        """Resolve the face-up pair: keep a match, turn a mismatch back down."""
        outcome = self.pending_outcome
        if outcome == MATCH:
            for i in self.revealed:
                self.deck[i].matched = True
            if self.all_matched:
                self.finished_at = self.clock()
        self.revealed = []
        self.locked = False
        return outcome

    def new_game(self, difficulty: Optional[Difficulty] = None) -> None:
        if difficulty is not None:
            self.difficulty = Difficulty(difficulty)
        self.deck = make_deck(self.config.pair_count, self.rng)
        self.revealed = []
        self.locked = False
        self.moves = 0
        self.started_at = None
        self.finished_at = None

    def cycle_difficulty(self) -> Difficulty:
        self.new_game(next_difficulty(self.difficulty))
        return self.difficulty
