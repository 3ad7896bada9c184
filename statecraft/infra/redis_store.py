#!/usr/bin/env python3
"""
Redis-backed persistence for saved games and the scoreboard.

Saves live in one hash per country (`<prefix>:<country_id>`) whose 'data'
field holds the JSON snapshot. The scoreboard is a single hash keyed by
country id, so each country keeps only its latest result. Player commands
queue in a list per country (`<prefix>:<country_id>:inbox`).
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import TypeAdapter
from redis import asyncio as aioredis

from statecraft.models import REDIS_SETTINGS, RedisSettings, ScoreboardEntry, WorldState
from statecraft.state_utils import dump_state, load_state, scoreboard_entry

_ENTRY_ADAPTER = TypeAdapter(ScoreboardEntry)


class RedisGameStore:
    def __init__(
        self,
        settings: RedisSettings | None = None,
        client: Any = None,
    ) -> None:
        self.settings = settings or REDIS_SETTINGS
        self.key_prefix = self.settings.save_key_prefix
        self.scoreboard_key = self.settings.scoreboard_key
        self.ttl_seconds = self.settings.save_ttl_seconds
        # decode_responses=True so we deal with str, not bytes
        self._redis = client or aioredis.from_url(str(self.settings.redis_url), decode_responses=True)

    @property
    def client(self):
        return self._redis

    async def close(self) -> None:
        await self._redis.close()

    def save_key(self, country_id: str) -> str:
        return f"{self.key_prefix}:{country_id}"

    # --- Saved games ---
    async def save(self, country_id: str, state: WorldState) -> None:
        key = self.save_key(country_id)
        mapping = {"data": dump_state(state), "day": str(state.current_day)}
        await self._redis.hset(key, mapping=mapping)
        if self.ttl_seconds:
            await self._redis.expire(key, self.ttl_seconds)
        print(f"[statecraft-store] saved key={key} day={state.current_day}")

    async def load(self, country_id: str) -> Optional[WorldState]:
        """
        Returns None when no save exists. A corrupt payload raises
        pydantic.ValidationError.
        """
        data = await self._redis.hget(self.save_key(country_id), "data")
        if not data:
            return None
        return load_state(data)

    async def clear(self, country_id: str) -> None:
        key = self.save_key(country_id)
        await self._redis.delete(key)
        print(f"[statecraft-store] cleared key={key}")

    # --- Scoreboard ---
    async def record_score(self, state: WorldState, timestamp: datetime | None = None) -> ScoreboardEntry:
        entry = scoreboard_entry(state, timestamp or datetime.now(timezone.utc))
        payload = _ENTRY_ADAPTER.dump_json(entry).decode("utf-8")
        await self._redis.hset(self.scoreboard_key, entry.country_id, payload)
        print(
            f"[statecraft-store] scoreboard country={entry.country_id} score={entry.final_score:.0f}"
        )
        return entry

    async def scoreboard(self) -> List[ScoreboardEntry]:
        raw = await self._redis.hgetall(self.scoreboard_key)
        entries = [_ENTRY_ADAPTER.validate_json(value) for value in (raw or {}).values()]
        entries.sort(key=lambda e: e.final_score, reverse=True)
        return entries

    # --- Player command inbox ---
    def inbox_key(self, country_id: str) -> str:
        return f"{self.key_prefix}:{country_id}:inbox"

    async def push_command(self, country_id: str, payload: dict) -> None:
        await self._redis.rpush(self.inbox_key(country_id), json.dumps(payload))

    async def pop_commands(self, country_id: str, count: int = 20) -> List[dict]:
        """Drain up to `count` queued commands, oldest first. Malformed JSON is dropped."""
        raw = await self._redis.lpop(self.inbox_key(country_id), count)
        if not raw:
            return []
        if isinstance(raw, str):
            raw = [raw]
        out: List[dict] = []
        for item in raw:
            try:
                payload = json.loads(item)
            except json.JSONDecodeError:
                print(f"[statecraft-store] dropping malformed command: {item!r}")
                continue
            if isinstance(payload, dict):
                out.append(payload)
        return out
