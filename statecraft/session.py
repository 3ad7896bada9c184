#!/usr/bin/env python3
"""
Single-player game session: owns the current snapshot, the SimContext and
the phase machine that gates the tick engine.
"""
from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import Any, Optional

from statecraft.actions import COMMANDS, repress_uprising
from statecraft.context import SimContext
from statecraft.decisions import effect_changes, pick_outcome
from statecraft.helper.world_helpers import initialize_world_state
from statecraft.models import ActionResult, GameEvent, WorldState
from statecraft.state_utils import append_events, apply_delta
from statecraft.world import advance_world

GAME_SPEEDS = (1, 3)


class Phase(str, Enum):
    RUNNING = "running"
    PAUSED = "paused"
    AWAITING_DECISION = "awaiting_decision"
    GAME_OVER = "game_over"


class GameOverReason(str, Enum):
    COMPLETED = "completed"
    OVERTHROWN = "overthrown"
    SURRENDERED = "surrendered"
    DECISION = "decision"


class GameSession:
    def __init__(self, state: WorldState, ctx: Optional[SimContext] = None) -> None:
        self.ctx = ctx or SimContext()
        self.ctx.resume_from(state.next_event_id)
        self.state = state
        self.game_over_reason: Optional[GameOverReason] = None
        self.game_over_message: Optional[str] = None
        # Bumped on every change so the driver knows when to autosave
        self.revision = 0

    @classmethod
    def new_game(
        cls, country_id: str, game_length: int, ctx: Optional[SimContext] = None
    ) -> "GameSession":
        ctx = ctx or SimContext()
        return cls(initialize_world_state(country_id, game_length, ctx), ctx)

    # ---------- phase ----------

    @property
    def phase(self) -> Phase:
        if self.game_over_reason is not None:
            return Phase.GAME_OVER
        if self.state.pending_decisions:
            return Phase.AWAITING_DECISION
        if self.state.is_playing:
            return Phase.RUNNING
        return Phase.PAUSED

    @property
    def is_over(self) -> bool:
        return self.game_over_reason is not None

    def _commit(self, state: WorldState) -> None:
        self.state = replace(state, next_event_id=self.ctx.issued)
        self.revision += 1

    def _log(self, type: str, category: str, message: str) -> GameEvent:
        event = self.ctx.event(self.state.current_day, type, category, message)
        self._commit(replace(self.state, events=append_events(self.state.events, [event])))
        return event

    def _end(self, reason: GameOverReason, message: str) -> None:
        self.game_over_reason = reason
        self.game_over_message = message
        self._log("critical", "system", message)
        self._commit(replace(self.state, is_playing=False))

    # ---------- tick ----------

    def advance_day(self) -> bool:
        """
        Run one tick if the session is RUNNING. Returns True when the clock moved.
        """
        if self.phase is not Phase.RUNNING:
            return False
        if self.state.current_day >= self.state.total_days:
            self._finish()
            return False

        self._commit(advance_world(self.state, self.ctx))
        if self.state.current_day >= self.state.total_days:
            self._finish()
        return True

    def _finish(self) -> None:
        self._end(GameOverReason.COMPLETED, f"Game Complete! Final Score: {self.state.score:.0f}")

    # ---------- commands ----------

    def execute(self, result: ActionResult) -> ActionResult:
        """Merge a command result into the snapshot. Rejections only add their events."""
        if self.is_over:
            return result
        state = apply_delta(self.state, result.state_changes)
        if result.events:
            state = replace(state, events=append_events(state.events, result.events))
        self._commit(state)
        return result

    def command(self, name: str, *args: Any) -> ActionResult:
        handler = COMMANDS.get(name)
        if handler is None:
            raise ValueError(f"unknown command: {name!r}")
        if handler is repress_uprising and self.state.uprising_triggered and not self.is_over:
            # A failed suppression ends the game
            return self.fight_uprising()
        return self.execute(handler(self.state, self.ctx, *args))

    # ---------- host-level resolutions ----------

    def resolve_decision(self, choice_index: int) -> Optional[str]:
        """
        Resolve the head-of-queue decision with the given choice and return
        the outcome message (None when the branch has no effect).
        """
        if not self.state.pending_decisions:
            raise ValueError("no pending decision")
        decision, *rest = self.state.pending_decisions
        if not 0 <= choice_index < len(decision.choices):
            raise ValueError(f"choice index {choice_index} out of range for decision {decision.id}")

        choice = decision.choices[choice_index]
        effect = pick_outcome(choice, self.ctx)
        state = replace(self.state, pending_decisions=list(rest))
        if effect is None:
            self._commit(state)
            return None

        state = apply_delta(state, effect_changes(state, effect))
        self._commit(state)
        self._log("player", "domestic", effect.message)
        if effect.fatal:
            self._end(GameOverReason.DECISION, effect.message)
        return effect.message

    def fight_uprising(self) -> ActionResult:
        if self.is_over:
            raise ValueError("the game is already over")
        if not self.state.uprising_triggered:
            raise ValueError("there is no uprising to fight")
        result = self.execute(repress_uprising(self.state, self.ctx))
        if not result.success:
            self._end(
                GameOverReason.OVERTHROWN,
                "YOU HAVE BEEN OVERTHROWN! The people have risen against you.",
            )
        return result

    def surrender(self) -> None:
        if not self.state.uprising_triggered:
            raise ValueError("there is no uprising to surrender to")
        self._commit(replace(self.state, uprising_triggered=False))
        self._end(GameOverReason.SURRENDERED, "You surrendered to the uprising. Your reign has ended.")

    def acknowledge_war_result(self) -> None:
        self._commit(replace(self.state, pending_war_result=None))

    def toggle_play(self) -> bool:
        if self.is_over:
            return False
        self._commit(replace(self.state, is_playing=not self.state.is_playing))
        return self.state.is_playing

    def set_speed(self, speed: int) -> None:
        if speed not in GAME_SPEEDS:
            raise ValueError(f"unsupported game speed {speed}; expected one of {GAME_SPEEDS}")
        self._commit(replace(self.state, game_speed=speed))

    def cycle_speed(self) -> int:
        self.set_speed(3 if self.state.game_speed == 1 else 1)
        return self.state.game_speed
