"""
Deterministic random streams for crack and fragment generation.

A RandomStream is a Mulberry32 generator over unsigned 32-bit state. Every
consumer owns its own stream; streams for different purposes are split from
one root seed with derive_seed() so that draws on one path never shift the
sequence seen by another.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, Mapping, Optional, Sequence, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")

UINT32_MASK = 0xFFFFFFFF
UINT32_FACTOR = 1.0 / (UINT32_MASK + 1)

CRACK_SALT = "crack"
FRAGMENT_SALT = "fragment"

SeedLike = Union[int, str]


def hash_string(value: str) -> int:
    """31-multiplier string hash folded to an unsigned 32-bit integer."""
    h = 0
    for ch in value:
        h = ((h << 5) - h + ord(ch)) & UINT32_MASK
    return h


def normalize_seed(seed: SeedLike) -> int:
    """Map an int or string seed onto the unsigned 32-bit range."""
    if isinstance(seed, bool):
        raise TypeError("Unsupported seed type: bool")
    if isinstance(seed, int):
        return seed & UINT32_MASK
    if isinstance(seed, float):
        if not math.isfinite(seed):
            raise TypeError("Seed must be finite")
        return int(seed) & UINT32_MASK
    if isinstance(seed, str):
        return hash_string(seed)
    raise TypeError(f"Unsupported seed type: {type(seed).__name__}")


def _mix32(value: int) -> int:
    # murmur3 finalizer
    value &= UINT32_MASK
    value ^= value >> 16
    value = (value * 0x85EBCA6B) & UINT32_MASK
    value ^= value >> 13
    value = (value * 0xC2B2AE35) & UINT32_MASK
    value ^= value >> 16
    return value


def derive_seed(seed: SeedLike, salt: str) -> int:
    """Combine a base seed with a named salt into an independent seed.

    Streams seeded with derive_seed(s, "crack") and derive_seed(s, "fragment")
    share the root but not their sequences.
    """
    base = normalize_seed(seed)
    salted = base ^ _mix32(hash_string(salt) + 0x9E3779B9)
    return _mix32(salted)


def crack_seed_for(entity_id: SeedLike, wave: int, generation: int) -> int:
    """Crack seed for one entity from its identity, wave and split depth."""
    return derive_seed(entity_id, f"wave:{int(wave)}:generation:{int(generation)}")


class RandomStream:
    """Seeded, resettable Mulberry32 stream.

    reset(seed) returns the stream to the state it had right after
    construction with that seed, so the following draws repeat exactly.
    """

    def __init__(self, seed: SeedLike = 0):
        self.seed = 0
        self._state = 0
        self.draws = 0
        self.reset(seed)

    def reset(self, seed: Optional[SeedLike] = None) -> int:
        normalized = normalize_seed(self.seed if seed is None else seed)
        self.seed = normalized
        self._state = normalized
        self.draws = 0
        return normalized

    def _next_uint32(self) -> int:
        self.draws += 1
        self._state = (self._state + 0x6D2B79F5) & UINT32_MASK
        t = self._state
        t = ((t ^ (t >> 15)) * (t | 1)) & UINT32_MASK
        t ^= (t + (((t ^ (t >> 7)) * (t | 61)) & UINT32_MASK)) & UINT32_MASK
        return (t ^ (t >> 14)) & UINT32_MASK

    def next(self) -> float:
        """Next float in [0, 1)."""
        return self._next_uint32() * UINT32_FACTOR

    def __call__(self) -> float:
        return self.next()

    def range(self, low: float, high: float) -> float:
        if high == low:
            return low
        if high < low:
            low, high = high, low
        return low + (high - low) * self.next()

    def int(self, low: int, high: int) -> int:
        """Uniform integer in the inclusive range [low, high]."""
        if high < low:
            low, high = high, low
        span = high - low + 1
        return low + math.floor(self._next_uint32() * (span * UINT32_FACTOR))

    def chance(self, probability: float) -> bool:
        if probability <= 0:
            return False
        if probability >= 1:
            return True
        return self.next() < probability

    def pick(self, items: Sequence[T]) -> Optional[T]:
        if not items:
            return None
        return items[self.int(0, len(items) - 1)]

    def weighted_pick(self, weights: Union[Mapping[T, float], Sequence[tuple]]) -> Optional[T]:
        """Pick a key (or first tuple item) proportionally to its weight."""
        entries = list(weights.items()) if isinstance(weights, Mapping) else list(weights)
        total = sum(max(0.0, float(w)) for _, w in entries)
        if not math.isfinite(total) or total <= 0:
            return None
        threshold = self.range(0.0, total)
        for value, weight in entries:
            w = float(weight)
            if w <= 0:
                continue
            if threshold < w:
                return value
            threshold -= w
        return entries[-1][0]

    def fork(self, scope: Optional[SeedLike] = None) -> "RandomStream":
        """Child stream; advances this stream unless an explicit int seed is given."""
        if scope is None:
            child_seed = self._next_uint32()
        elif isinstance(scope, int) and not isinstance(scope, bool):
            child_seed = normalize_seed(scope)
        else:
            child_seed = self._next_uint32() ^ normalize_seed(str(scope))
        logger.debug("Forked stream seed=%d scope=%r child=%d", self.seed, scope, child_seed)
        return RandomStream(child_seed)

    def serialize(self) -> Dict[str, int]:
        return {"seed": self.seed, "state": self._state, "draws": self.draws}

    def restore(self, snapshot: Mapping[str, Any]) -> None:
        seed = snapshot.get("seed") if isinstance(snapshot, Mapping) else None
        state = snapshot.get("state") if isinstance(snapshot, Mapping) else None
        if not isinstance(seed, int) or not isinstance(state, int):
            raise ValueError("Invalid stream snapshot payload")
        self.seed = seed & UINT32_MASK
        self._state = state & UINT32_MASK
        self.draws = int(snapshot.get("draws", 0))


def create_stream(seed: SeedLike, salt: Optional[str] = None) -> RandomStream:
    """Stream for a root seed, optionally split off with a named salt."""
    if salt is None:
        return RandomStream(seed)
    return RandomStream(derive_seed(seed, salt))
