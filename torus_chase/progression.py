"""
Progression State Machine
==========================
Score, health, invincibility and the Menu/Playing application states.

The state machine never touches entities. It returns events for the
shell and requests (spawn a pursuer, relocate the pickup, apply
knockback, start/end the round) for the Simulation to carry out.

    MENU --start_round--> PLAYING --health <= 0 / end_round--> MENU
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .config import ProgressionConfig
from .errors import StateError
from .events import (
    COLLISION_PICKUP, COLLISION_PURSUER,
    PICKUP_COLLECTED, HEALTH_GAINED, PLAYER_HIT, STATE_CHANGED,
    REQUEST_SPAWN_PURSUER, REQUEST_RELOCATE_PICKUP, REQUEST_KNOCKBACK,
    REQUEST_START_ROUND, REQUEST_END_ROUND,
)


logger = logging.getLogger(__name__)


class AppState(Enum):
    MENU = 'menu'
    PLAYING = 'playing'


@dataclass
class ProgressionState:
    score: int = 0
    health: int = 0
    invincible: bool = False


@dataclass
class InvincibilityTimer:
    """Countdown that reports its expiry exactly once."""
    remaining: float = 0.0
    running: bool = False

    def start(self, duration: float) -> None:
        self.remaining = duration
        self.running = True

    def stop(self) -> None:
        self.remaining = 0.0
        self.running = False

    def tick(self, dt: float) -> bool:
        """Advance by dt. True only on the tick the countdown reaches zero."""
        if not self.running:
            return False
        self.remaining = max(0.0, self.remaining - dt)
        if self.remaining <= 0.0:
            self.running = False
            return True
        return False


class Progression:
    """Owns ProgressionState and the application state."""

    def __init__(self, config: ProgressionConfig):
        self.config = config
        self.app_state = AppState.MENU
        self.state = ProgressionState(health=config.start_health)
        self.timer = InvincibilityTimer()
        self.last_score: Optional[int] = None

    # -------------------------------------------------------------------------
    # Application state
    # -------------------------------------------------------------------------

    def request(self, target: AppState) -> List[dict]:
        """Move to `target`. Requesting the current state does nothing."""
        if target == self.app_state:
            logger.debug('ignoring transition request to current state %s', target.value)
            return []
        if target == AppState.PLAYING:
            return self.start_round()
        return self.end_round()

    def start_round(self) -> List[dict]:
        if self.app_state == AppState.PLAYING:
            return []

        self.state = ProgressionState(score=0, health=self.config.start_health)
        self.timer.stop()
        self.app_state = AppState.PLAYING
        logger.info('round started (health=%d)', self.state.health)

        return [
            {'type': REQUEST_START_ROUND},
            {'type': STATE_CHANGED, 'state': AppState.PLAYING, 'last_score': self.last_score},
        ]

    def end_round(self) -> List[dict]:
        if self.app_state == AppState.MENU:
            return []

        self.last_score = self.state.score
        self.state.invincible = False
        self.timer.stop()
        self.app_state = AppState.MENU
        logger.info('round over, score %d', self.last_score)

        return [
            {'type': REQUEST_END_ROUND},
            {'type': STATE_CHANGED, 'state': AppState.MENU, 'last_score': self.last_score},
        ]

    # -------------------------------------------------------------------------
    # Gameplay events
    # -------------------------------------------------------------------------

    def _require_playing(self, action: str) -> None:
        if self.app_state != AppState.PLAYING:
            raise StateError(f'cannot {action} while in {self.app_state.value}')

    def health_bonus_due(self, score: int) -> bool:
        """
        Every health_interval-th point grants health instead of a plain pickup.

        Score 1 never qualifies, even with an interval of 1.
        """
        return score > 0 and score % self.config.health_interval == 0 and score != 1

    def collect_pickup(self) -> List[dict]:
        """Score a pickup. Always requests one pursuer spawn and a pickup relocation."""
        self._require_playing('collect a pickup')

        state = self.state
        state.score += 1

        if self.health_bonus_due(state.score):
            state.health = min(state.health + 1, self.config.max_health)
            logger.info('health bonus at score %d (health=%d)', state.score, state.health)
            outcome = {'type': HEALTH_GAINED, 'score': state.score, 'health': state.health}
        else:
            outcome = {'type': PICKUP_COLLECTED, 'score': state.score, 'health': state.health}

        return [
            outcome,
            {'type': REQUEST_RELOCATE_PICKUP},
            {'type': REQUEST_SPAWN_PURSUER, 'score': state.score},
        ]

    def register_hit(self, severity: int = 1) -> List[dict]:
        """
        Take a hit: lose health, go invincible, knock every pursuer back.

        Knockback is requested even when the hit ends the round.
        """
        self._require_playing('take a hit')
        if self.state.invincible:
            raise StateError('cannot take a hit while invincible')

        state = self.state
        state.health -= severity
        state.invincible = True
        self.timer.start(self.config.invincibility_duration)
        logger.info('player hit (health=%d)', state.health)

        events = [
            {'type': PLAYER_HIT, 'severity': severity, 'health': state.health},
            {'type': REQUEST_KNOCKBACK},
        ]
        if state.health <= 0:
            events.extend(self.end_round())
        return events

    def handle_collisions(self, collisions: List[dict]) -> List[dict]:
        """
        Feed one tick's collision events through the state machine.

        Stops as soon as the round ends; later collisions in the same tick
        belong to a round that no longer exists.
        """
        events = []
        for collision in collisions:
            if self.app_state != AppState.PLAYING:
                break
            if collision['type'] == COLLISION_PURSUER:
                events.extend(self.register_hit())
            elif collision['type'] == COLLISION_PICKUP:
                events.extend(self.collect_pickup())
        return events

    def tick(self, dt: float) -> bool:
        """Advance the invincibility timer. True on the tick invincibility ends."""
        if self.timer.tick(dt):
            self.state.invincible = False
            logger.debug('invincibility ended')
            return True
        return False
