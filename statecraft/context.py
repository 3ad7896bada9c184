#!/usr/bin/env python3
"""
Injectable sources of nondeterminism for the simulation core.

Every probabilistic branch draws from SimContext.rng, event/loan/war ids come
from its counter and event timestamps from its clock, so a seeded context
replays a game exactly.
"""
from __future__ import annotations

import hashlib
import random
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, TypeVar

from statecraft.models import SIM_CONFIG, EventImpact, GameEvent

T = TypeVar("T")

SEED_BITS = 48
SEED_MASK = (1 << SEED_BITS) - 1


def normalize_seed(value: Optional[object]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return None
        try:
            return int(cleaned, 0) & SEED_MASK
        except ValueError:
            digest = hashlib.sha256(cleaned.encode("utf-8")).hexdigest()
            return int(digest, 16) & SEED_MASK
    digest = hashlib.sha256(str(value).encode("utf-8")).hexdigest()
    return int(digest, 16) & SEED_MASK


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SimContext:
    def __init__(
        self,
        seed: Optional[object] = None,
        *,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        next_id: int = 0,
    ) -> None:
        self.seed: Optional[int] = None
        if rng is None:
            effective_seed = normalize_seed(seed if seed is not None else SIM_CONFIG.sim_seed)
            if effective_seed is None:
                effective_seed = random.SystemRandom().randrange(1 << SEED_BITS)
            self.seed = effective_seed
            rng = random.Random(effective_seed)
        self.rng = rng
        self.clock = clock or _utc_now
        self._next_id = next_id

    @property
    def issued(self) -> int:
        """Next id number to be handed out; persisted as WorldState.next_event_id."""
        return self._next_id

    def resume_from(self, next_id: int) -> None:
        self._next_id = max(self._next_id, next_id)

    def next_id(self, prefix: str) -> str:
        value = self._next_id
        self._next_id += 1
        return f"{prefix}-{value}"

    def now(self) -> datetime:
        return self.clock()

    # --- randomness ---
    def random(self) -> float:
        return self.rng.random()

    def chance(self, probability: float) -> bool:
        return self.rng.random() < probability

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.rng.random()

    def randint(self, low: int, high: int) -> int:
        return self.rng.randint(low, high)

    def choice(self, items: Sequence[T]) -> T:
        return items[int(self.rng.random() * len(items)) % len(items)]

    def shuffled(self, items: Sequence[T]) -> List[T]:
        out = list(items)
        self.rng.shuffle(out)
        return out

    def event(
        self,
        day: int,
        type: str,
        category: str,
        message: str,
        impact: Optional[EventImpact] = None,
        icon: Optional[str] = None,
    ) -> GameEvent:
        return GameEvent(
            id=self.next_id("evt"),
            day=day,
            timestamp=self.now(),
            type=type,
            category=category,
            message=message,
            icon=icon,
            impact=impact,
        )
