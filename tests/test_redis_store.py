import asyncio
import json
from dataclasses import replace
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from statecraft.helper import initialize_world_state
from statecraft.infra.redis_store import RedisGameStore
from statecraft.models import RedisSettings

from conftest import FakeRedis


@pytest.fixture
def fake():
    return FakeRedis()


@pytest.fixture
def store(fake):
    settings = RedisSettings(save_key_prefix="test:save", scoreboard_key="test:scores", save_ttl_seconds=60)
    return RedisGameStore(settings=settings, client=fake)


def test_save_and_load(store, fake, usa):
    asyncio.run(store.save("usa", usa))
    assert fake.hashes["test:save:usa"]["day"] == "0"
    assert fake.expiry["test:save:usa"] == 60
    assert asyncio.run(store.load("usa")) == usa


def test_load_missing_save(store):
    assert asyncio.run(store.load("usa")) is None


def test_corrupt_save_raises(store, fake):
    fake.hashes["test:save:usa"] = {"data": '{"gdp": "lots"}'}
    with pytest.raises(ValidationError):
        asyncio.run(store.load("usa"))


def test_clear(store, fake, usa):
    asyncio.run(store.save("usa", usa))
    asyncio.run(store.clear("usa"))
    assert "test:save:usa" not in fake.hashes


def test_scoreboard_keeps_latest_per_country_sorted(store, usa, ctx):
    stamp = datetime(2030, 1, 1, tzinfo=timezone.utc)
    brazil = initialize_world_state("brazil", 5, ctx)

    async def play():
        await store.record_score(replace(usa, score=100), stamp)
        await store.record_score(replace(brazil, score=900), stamp)
        await store.record_score(replace(usa, score=500), stamp)
        return await store.scoreboard()

    board = asyncio.run(play())
    assert [(e.country_id, e.final_score) for e in board] == [("brazil", 900), ("usa", 500)]
    assert board[0].timestamp == stamp


def test_command_inbox(store, fake):
    async def play():
        await store.push_command("usa", {"action": "toggle_play"})
        await store.push_command("usa", {"action": "command", "name": "print_money", "args": [10]})
        fake.lists["test:save:usa:inbox"].append("{broken")
        fake.lists["test:save:usa:inbox"].append(json.dumps([1, 2]))
        return await store.pop_commands("usa", 10)

    commands = asyncio.run(play())
    assert [c["action"] for c in commands] == ["toggle_play", "command"]
    assert asyncio.run(store.pop_commands("usa")) == []


def test_close(store, fake):
    asyncio.run(store.close())
    assert fake.closed
