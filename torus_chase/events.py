"""
Events and Frame Messages
==========================
Per-tick messages between the simulation core and the shell.

Events are plain dicts with a 'type' key. They are produced and drained
within a single tick; nothing carries over to the next one.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


# =============================================================================
# CORE -> SHELL EVENTS
# =============================================================================

PICKUP_COLLECTED = 'pickup_collected'
HEALTH_GAINED = 'health_gained'
PLAYER_HIT = 'player_hit'
PURSUER_SPAWNED = 'pursuer_spawned'
STATE_CHANGED = 'state_changed'
SHAKE_OFFSET = 'shake_offset'


# =============================================================================
# COLLISIONS (collision system -> state machine)
# =============================================================================

COLLISION_PURSUER = 'collision_pursuer'
COLLISION_PICKUP = 'collision_pickup'


# =============================================================================
# INTERNAL REQUESTS (state machine -> simulation, never reach the shell)
# =============================================================================

REQUEST_SPAWN_PURSUER = 'request_spawn_pursuer'
REQUEST_RELOCATE_PICKUP = 'request_relocate_pickup'
REQUEST_KNOCKBACK = 'request_knockback'
REQUEST_START_ROUND = 'request_start_round'
REQUEST_END_ROUND = 'request_end_round'

REQUEST_TYPES = frozenset({
    REQUEST_SPAWN_PURSUER,
    REQUEST_RELOCATE_PICKUP,
    REQUEST_KNOCKBACK,
    REQUEST_START_ROUND,
    REQUEST_END_ROUND,
})


def is_request(event: dict) -> bool:
    return event['type'] in REQUEST_TYPES


@dataclass(frozen=True)
class FrameInput:
    """
    One frame of shell input.

    direction is the raw 8-way input vector; it is normalized by the core,
    so (1, 1) moves no faster than (1, 0).
    """
    direction: Tuple[float, float] = (0.0, 0.0)
    dt: float = 0.0


@dataclass(frozen=True)
class EntitySnapshot:
    """What the shell needs to draw one entity."""
    entity_id: int
    role: str
    x: float
    y: float
    radius: float
    archetype: Optional[str] = None
