import asyncio
from dataclasses import replace

import pytest

from statecraft.infra.redis_store import RedisGameStore
from statecraft.models import RedisSettings
from statecraft.session import GameOverReason, GameSession
from statecraft.worker import SimulationWorker, WorkerConfig

from conftest import FakeRedis, scripted_ctx


def _config(**overrides):
    values = dict(
        country_id="usa",
        game_length=5,
        tick_interval_ms=0,
        fast_tick_interval_ms=0,
        autosave_seconds=0,
        command_batch=10,
        resume=True,
        seed="7",
    )
    values.update(overrides)
    return WorkerConfig(**values)


@pytest.fixture
def fake():
    return FakeRedis()


@pytest.fixture
def store(fake):
    return RedisGameStore(settings=RedisSettings(save_key_prefix="w:save", scoreboard_key="w:scores"), client=fake)


def test_tick_delay_follows_speed(store, usa):
    worker = SimulationWorker(_config(tick_interval_ms=1000, fast_tick_interval_ms=333), store,
                              GameSession(usa, scripted_ctx()))
    assert worker.tick_delay() == 1.0
    worker.session.set_speed(3)
    assert worker.tick_delay() == 0.333


def test_commands_are_applied_in_order(store, usa):
    session = GameSession(usa, scripted_ctx(fallback=0.99))
    worker = SimulationWorker(_config(), store, session)

    async def play():
        await store.push_command("usa", {"action": "command", "name": "adjust_interest_rate", "args": [5]})
        await store.push_command("usa", {"action": "bogus"})
        await store.push_command("usa", {"action": "decide"})
        await store.push_command("usa", {"action": "command", "name": "print_money", "args": [100]})
        await store.push_command("usa", {"action": "cycle_speed"})
        return await worker.apply_commands()

    applied = asyncio.run(play())
    assert applied == 3
    assert session.state.interest_rate == 5
    assert session.state.recent_print_money_count == 1
    assert session.state.game_speed == 3


def test_tick_once_advances_and_saves(store, fake, usa):
    session = GameSession(usa, scripted_ctx(fallback=0.99))
    worker = SimulationWorker(_config(), store, session)

    async def play():
        await worker.tick_once()

    asyncio.run(play())
    assert session.state.current_day == 1
    assert fake.hashes["w:save:usa"]["day"] == "1"


def test_run_finishes_game_and_records_score(store, fake, usa):
    near_end = replace(usa, current_day=usa.total_days - 2)
    session = GameSession(near_end, scripted_ctx(fallback=0.99))
    worker = SimulationWorker(_config(), store, session)

    asyncio.run(worker.run())

    assert session.game_over_reason is GameOverReason.COMPLETED
    assert session.state.current_day == usa.total_days
    assert "usa" in fake.hashes["w:scores"]
    assert "w:save:usa" not in fake.hashes
    assert fake.closed


def test_setup_resumes_saved_game(store, usa):
    saved = replace(usa, current_day=123, next_event_id=40)
    asyncio.run(store.save("usa", saved))

    worker = SimulationWorker(_config(), store)
    asyncio.run(worker.setup())
    assert worker.session.state.current_day == 123
    assert worker.session.ctx.issued == 40


def test_setup_starts_new_game_without_save(store):
    worker = SimulationWorker(_config(country_id="japan", resume=False), store)
    asyncio.run(worker.setup())
    assert worker.session.state.country.id == "japan"
    assert worker.session.state.current_day == 0


def test_stopped_worker_saves_on_exit(store, fake, usa):
    session = GameSession(usa, scripted_ctx(fallback=0.99))
    worker = SimulationWorker(_config(), store, session)
    worker.stop()
    asyncio.run(worker.run())
    assert not session.is_over
    assert "w:save:usa" in fake.hashes
    assert fake.closed


def test_session_is_required_before_ticking(store):
    worker = SimulationWorker(_config(), store)
    with pytest.raises(RuntimeError):
        worker.tick_delay()
    with pytest.raises(RuntimeError):
        asyncio.run(worker.tick_once())


def test_inbox_repress_failure_ends_the_game(store, usa):
    rioting = replace(usa, uprising_triggered=True, happiness=8)
    session = GameSession(rioting, scripted_ctx(fallback=0.99))
    worker = SimulationWorker(_config(), store, session)

    async def play():
        await store.push_command("usa", {"action": "command", "name": "repress_uprising"})
        return await worker.apply_commands()

    assert asyncio.run(play()) == 1
    assert session.game_over_reason is GameOverReason.OVERTHROWN
