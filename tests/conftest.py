import random
from datetime import datetime, timezone

import pytest

from statecraft.context import SimContext
from statecraft.helper import initialize_world_state

FIXED_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class ScriptedRandom(random.Random):
    """random() returns the scripted values in order, then the fallback forever."""

    def __init__(self, values=(), fallback=0.5):
        super().__init__(0)
        self.values = list(values)
        self.fallback = fallback

    def random(self):
        if self.values:
            return self.values.pop(0)
        return self.fallback


def scripted_ctx(values=(), fallback=0.5, next_id=0):
    return SimContext(rng=ScriptedRandom(values, fallback), clock=lambda: FIXED_TIME, next_id=next_id)


@pytest.fixture
def ctx():
    return SimContext(seed=1234, clock=lambda: FIXED_TIME)


@pytest.fixture
def quiet_ctx():
    """Every probabilistic branch fails: no world events, decisions or uprisings."""
    return scripted_ctx(fallback=0.99)


@pytest.fixture
def lucky_ctx():
    """Every probabilistic branch succeeds."""
    return scripted_ctx(fallback=0.0)


@pytest.fixture
def usa(ctx):
    return initialize_world_state("usa", 5, ctx)


class FakeRedis:
    """In-memory stand-in for the handful of redis.asyncio calls the store makes."""

    def __init__(self):
        self.hashes = {}
        self.lists = {}
        self.expiry = {}
        self.closed = False

    async def hset(self, name, key=None, value=None, mapping=None):
        bucket = self.hashes.setdefault(name, {})
        if mapping:
            bucket.update(mapping)
        if key is not None:
            bucket[key] = value

    async def hget(self, name, key):
        return self.hashes.get(name, {}).get(key)

    async def hgetall(self, name):
        return dict(self.hashes.get(name, {}))

    async def expire(self, name, seconds):
        self.expiry[name] = seconds

    async def delete(self, *names):
        for name in names:
            self.hashes.pop(name, None)
            self.lists.pop(name, None)

    async def rpush(self, name, *values):
        self.lists.setdefault(name, []).extend(values)

    async def lpop(self, name, count=None):
        items = self.lists.get(name, [])
        if not items:
            return None
        if count is None:
            return items.pop(0)
        popped, self.lists[name] = items[:count], items[count:]
        return popped

    async def close(self):
        self.closed = True
