"""
Component Definitions
======================
Plain dataclasses attached to entities. Systems hold the behavior.
"""

from dataclasses import dataclass
from enum import Enum

from .errors import InvalidParameterError


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """World position, origin at the centre of the play area, y up."""
    x: float = 0.0
    y: float = 0.0

    def as_tuple(self):
        return self.x, self.y


@dataclass
class Velocity:
    """Movement velocity in units per second."""
    x: float = 0.0
    y: float = 0.0

    def as_tuple(self):
        return self.x, self.y


@dataclass
class Collider:
    """Circle collider centred on Position."""
    radius: float = 1.0

    def __post_init__(self):
        if self.radius <= 0:
            raise InvalidParameterError(f'radius must be positive, got {self.radius}')


@dataclass
class Wraps:
    """Entity re-enters the opposite edge once it is `margin` past an edge."""
    margin: float = 0.0


# =============================================================================
# CONTROL COMPONENTS
# =============================================================================

@dataclass
class PlayerControlled:
    """Acceleration-limited steering from directional input."""
    max_speed: float = 300.0
    accel: float = 600.0

    def __post_init__(self):
        if self.max_speed <= 0 or self.accel <= 0:
            raise InvalidParameterError(
                f'player max_speed and accel must be positive, '
                f'got {self.max_speed} and {self.accel}'
            )


@dataclass(frozen=True)
class PursuerProfile:
    """
    Per-pursuer AI parameters, fixed at spawn.

    future_prediction: 0 = pure pursuit, 1 = lead by the full player velocity.
    pickup_pull: positive is drawn toward the pickup, negative repelled.
    """
    max_speed: float
    max_accel: float
    future_prediction: float = 0.0
    pickup_pull: float = 0.0
    wraps: bool = False
    wrap_margin: float = 0.0
    archetype: str = 'chaser'

    def __post_init__(self):
        if self.max_speed <= 0:
            raise InvalidParameterError(f'max_speed must be positive, got {self.max_speed}')
        if self.max_accel <= 0:
            raise InvalidParameterError(f'max_accel must be positive, got {self.max_accel}')
        if not 0.0 <= self.future_prediction <= 1.0:
            raise InvalidParameterError(
                f'future_prediction must be within [0, 1], got {self.future_prediction}'
            )
        if not -1.0 <= self.pickup_pull <= 1.0:
            raise InvalidParameterError(
                f'pickup_pull must be within [-1, 1], got {self.pickup_pull}'
            )
        if self.wrap_margin < 0:
            raise InvalidParameterError(f'wrap_margin must be non-negative, got {self.wrap_margin}')

    def summary(self) -> dict:
        """Rounded view for event payloads and logs."""
        return {
            'archetype': self.archetype,
            'max_speed': round(self.max_speed, 1),
            'max_accel': round(self.max_accel, 1),
            'future_prediction': round(self.future_prediction, 2),
            'pickup_pull': round(self.pickup_pull, 2),
            'wraps': self.wraps,
        }


# =============================================================================
# TAG COMPONENTS
# =============================================================================

class Role(Enum):
    PLAYER = 'player'
    PURSUER = 'pursuer'
    PICKUP = 'pickup'


@dataclass
class PlayerTag:
    """Marks the player entity."""
    pass


@dataclass
class PursuerTag:
    """Marks a pursuer entity."""
    archetype: str = 'chaser'


@dataclass
class PickupTag:
    """Marks the pickup entity."""
    pass
