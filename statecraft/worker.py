#!/usr/bin/env python3
"""
Simulation worker: drives one GameSession in real time.

The worker owns the session, drains queued player commands from Redis,
advances one day per interval (1000ms, 333ms at 3x speed), autosaves
periodically and records the scoreboard entry when the game ends.
"""
from __future__ import annotations

import asyncio
import os
import signal
from dataclasses import dataclass
from typing import Optional

from statecraft.context import SimContext
from statecraft.infra.redis_store import RedisGameStore
from statecraft.models import SIM_CONFIG
from statecraft.session import GameSession
from statecraft.state_utils import snapshot_from_state


@dataclass(frozen=True)
class WorkerConfig:
    country_id: str
    game_length: int
    tick_interval_ms: int
    fast_tick_interval_ms: int
    autosave_seconds: float
    command_batch: int
    resume: bool
    seed: Optional[str]


def _load_config() -> WorkerConfig:
    return WorkerConfig(
        country_id=os.environ.get("COUNTRY_ID", "usa"),
        game_length=int(os.environ.get("GAME_LENGTH", SIM_CONFIG.game_lengths[0])),
        tick_interval_ms=int(
            os.environ.get("TICK_INTERVAL_MS", SIM_CONFIG.timing.tick_interval_ms)
        ),
        fast_tick_interval_ms=int(
            os.environ.get("FAST_TICK_INTERVAL_MS", SIM_CONFIG.timing.fast_tick_interval_ms)
        ),
        autosave_seconds=float(
            os.environ.get("AUTOSAVE_SECONDS", SIM_CONFIG.timing.autosave_seconds)
        ),
        command_batch=int(os.environ.get("COMMAND_BATCH", 20)),
        resume=os.environ.get("RESUME_SAVE", "true").lower() == "true",
        seed=os.environ.get("SIM_SEED") or None,
    )


class SimulationWorker:
    def __init__(
        self,
        config: Optional[WorkerConfig] = None,
        store: Optional[RedisGameStore] = None,
        session: Optional[GameSession] = None,
    ) -> None:
        self.config = config or _load_config()
        self.store = store or RedisGameStore()
        self._session = session
        self._stop = asyncio.Event()
        self._saved_revision: Optional[int] = None
        self._last_save_at = 0.0

    @property
    def session(self) -> GameSession:
        if self._session is None:
            raise RuntimeError("worker has no session yet, call setup() first")
        return self._session

    async def setup(self) -> None:
        if self._session is not None:
            return
        ctx = SimContext(self.config.seed)
        saved = await self.store.load(self.config.country_id) if self.config.resume else None
        if saved is not None:
            self._session = GameSession(saved, ctx)
            print(
                f"[statecraft-worker] resumed country={self.config.country_id} "
                f"day={saved.current_day}/{saved.total_days}"
            )
        else:
            self._session = GameSession.new_game(self.config.country_id, self.config.game_length, ctx)
            print(
                f"[statecraft-worker] new game country={self.config.country_id} "
                f"years={self.config.game_length} seed={ctx.seed}"
            )

    def tick_delay(self) -> float:
        if self.session.state.game_speed > 1:
            return self.config.fast_tick_interval_ms / 1000
        return self.config.tick_interval_ms / 1000

    async def apply_commands(self) -> int:
        """Apply queued player input in arrival order. Bad entries are logged and skipped."""
        session = self.session
        payloads = await self.store.pop_commands(self.config.country_id, self.config.command_batch)
        applied = 0
        for payload in payloads:
            action = payload.get("action")
            try:
                if action == "command":
                    result = session.command(payload["name"], *payload.get("args", []))
                    print(f"[statecraft-worker] {payload['name']}: {result.message}")
                elif action == "decide":
                    session.resolve_decision(int(payload["choice"]))
                elif action == "fight_uprising":
                    session.fight_uprising()
                elif action == "surrender":
                    session.surrender()
                elif action == "acknowledge_war":
                    session.acknowledge_war_result()
                elif action == "toggle_play":
                    session.toggle_play()
                elif action == "cycle_speed":
                    session.cycle_speed()
                else:
                    raise ValueError(f"unknown action {action!r}")
            except (KeyError, TypeError, ValueError) as exc:
                print(f"[statecraft-worker] rejected input {payload}: {exc}")
                continue
            applied += 1
        return applied

    async def autosave(self, force: bool = False) -> bool:
        """Save when the session changed since the last save and the period elapsed."""
        if self.session.is_over:
            return False
        if self._saved_revision == self.session.revision:
            return False
        now = asyncio.get_running_loop().time()
        if not force and now - self._last_save_at < self.config.autosave_seconds:
            return False
        await self.store.save(self.config.country_id, self.session.state)
        self._saved_revision = self.session.revision
        self._last_save_at = now
        return True

    async def finish(self) -> None:
        state = self.session.state
        await self.store.record_score(state)
        await self.store.clear(self.config.country_id)
        print(
            f"[statecraft-worker] game over reason={self.session.game_over_reason.value} "
            f"{snapshot_from_state(state)}"
        )

    async def tick_once(self) -> None:
        await self.apply_commands()
        self.session.advance_day()
        await self.autosave()

    async def run(self) -> None:
        await self.setup()
        if not self.session.state.is_playing:
            self.session.toggle_play()
        self._last_save_at = asyncio.get_running_loop().time()

        print(
            f"[statecraft-worker] starting loop country={self.config.country_id} "
            f"tick_delay={self.tick_delay()}s"
        )
        try:
            while not self._stop.is_set():
                try:
                    await self.tick_once()
                except Exception as exc:  # pragma: no cover - background safety
                    print(f"[statecraft-worker] error during tick: {exc}")

                if self.session.is_over:
                    await self.finish()
                    break

                await asyncio.sleep(self.tick_delay())
        finally:
            if not self.session.is_over:
                await self.autosave(force=True)
            await self.store.close()
            print("[statecraft-worker] stopping loop")

    def stop(self) -> None:
        self._stop.set()


async def main() -> None:
    worker = SimulationWorker()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, worker.stop)

    await worker.run()


def cli() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    cli()
