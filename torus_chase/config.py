"""
Game Configuration
===================
Tuning values grouped into dataclasses with playable defaults.

Units: distances in world units (the play area is width x height,
centred on the origin), speeds in units/second, accelerations in
units/second^2, durations in seconds.
"""

from dataclasses import dataclass, field
from typing import Optional

from .errors import ConfigError


# =============================================================================
# DEFAULT PLAY AREA
# =============================================================================

DEFAULT_WIDTH = 1280.0
DEFAULT_HEIGHT = 720.0

# Tick length the pickup pull is tuned against (the shell runs at 60 FPS)
REFERENCE_DT = 1.0 / 60.0


# =============================================================================
# SECTIONS
# =============================================================================

@dataclass
class PlayerConfig:
    """Player movement tuning."""
    radius: float = 16.0
    accel: float = 600.0
    max_speed: float = 300.0
    spawn_x: float = -150.0
    spawn_y: float = 0.0


@dataclass
class PickupConfig:
    radius: float = 10.0
    spawn_x: float = 150.0
    spawn_y: float = 0.0


@dataclass
class PursuerConfig:
    """
    Pursuer stats and the difficulty curve they are drawn from.

    max_speed and max_accel follow a logistic curve of the score, mapped
    into [min, max] and perturbed by +/- deviation.
    """
    radius: float = 12.0

    min_speed: float = 120.0
    max_speed: float = 280.0
    speed_deviation: float = 20.0

    min_accel: float = 150.0
    max_accel: float = 500.0
    accel_deviation: float = 40.0

    curve_steepness: float = 0.25
    curve_midpoint: float = 15.0

    # Velocity added per tick toward (or away from) the pickup at pull 1.0.
    # Must stay below the weakest steering step per reference tick, or the
    # pull outgrows the acceleration clamp and speed runs away.
    pull_scale: float = 1.2

    # Second archetype: wraps the arena and tracks the short way round
    wrapper_unlock_score: int = 10
    wrapper_chance: float = 0.35
    wrapper_accel_multiplier: float = 0.6
    wrapper_margin_factor: float = 0.5
    wrapper_pull_factor: float = 0.4


@dataclass
class ProgressionConfig:
    start_health: int = 3
    max_health: int = 5
    health_interval: int = 8
    invincibility_duration: float = 1.5


@dataclass
class KnockbackConfig:
    """Shove applied to every pursuer when the player is hit."""
    base: float = 400.0
    decay_rate: float = -0.01


@dataclass
class ShakeConfig:
    hit_trauma: float = 12.0
    decay_rate: float = 0.08  # per-tick blend toward zero, not dt-scaled
    frequency_x: float = 23.0
    frequency_y: float = 17.0
    cutoff: float = 0.05


@dataclass
class GameConfig:
    """All tuning for one simulation instance."""
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    seed: Optional[int] = None
    player: PlayerConfig = field(default_factory=PlayerConfig)
    pickup: PickupConfig = field(default_factory=PickupConfig)
    pursuer: PursuerConfig = field(default_factory=PursuerConfig)
    progression: ProgressionConfig = field(default_factory=ProgressionConfig)
    knockback: KnockbackConfig = field(default_factory=KnockbackConfig)
    shake: ShakeConfig = field(default_factory=ShakeConfig)

    def validate(self) -> 'GameConfig':
        """Raise ConfigError on the first invalid value. Returns self."""
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f'play area must be positive, got {self.width}x{self.height}')

        p = self.player
        if p.radius <= 0 or p.accel <= 0 or p.max_speed <= 0:
            raise ConfigError('player radius, accel and max_speed must be positive')

        if self.pickup.radius <= 0:
            raise ConfigError('pickup radius must be positive')

        e = self.pursuer
        if e.radius <= 0:
            raise ConfigError('pursuer radius must be positive')
        if e.min_speed > e.max_speed or e.min_accel > e.max_accel:
            raise ConfigError('pursuer curve ranges must satisfy min <= max')
        if e.speed_deviation < 0 or e.accel_deviation < 0:
            raise ConfigError('pursuer deviations must be non-negative')
        # The lowest possible roll must still be a valid profile
        if e.min_speed - e.speed_deviation <= 0:
            raise ConfigError('min_speed - speed_deviation must stay positive')
        if e.min_accel - e.accel_deviation <= 0:
            raise ConfigError('min_accel - accel_deviation must stay positive')
        if e.wrapper_accel_multiplier <= 0:
            raise ConfigError('wrapper_accel_multiplier must be positive')
        if e.curve_steepness <= 0:
            raise ConfigError('curve_steepness must be positive')
        if not 0.0 <= e.wrapper_chance <= 1.0:
            raise ConfigError('wrapper_chance must be within [0, 1]')
        if e.wrapper_margin_factor < 0:
            raise ConfigError('wrapper_margin_factor must be non-negative')
        if not 0.0 <= e.wrapper_pull_factor <= 1.0:
            raise ConfigError('wrapper_pull_factor must be within [0, 1]')
        if e.pull_scale < 0:
            raise ConfigError('pull_scale must be non-negative')
        weakest_step = (e.min_accel - e.accel_deviation) * REFERENCE_DT
        if e.pull_scale >= weakest_step:
            raise ConfigError(
                f'pull_scale {e.pull_scale} must stay below the weakest chaser step {weakest_step:.3f}'
            )
        if e.pull_scale * e.wrapper_pull_factor >= weakest_step * e.wrapper_accel_multiplier:
            raise ConfigError('wrapper pull must stay below the weakest wrapper step')

        g = self.progression
        if g.start_health <= 0 or g.start_health > g.max_health:
            raise ConfigError('start_health must be within 1..max_health')
        if g.health_interval <= 0:
            raise ConfigError('health_interval must be positive')
        if g.invincibility_duration < 0:
            raise ConfigError('invincibility_duration must be non-negative')

        if self.knockback.decay_rate >= 0:
            raise ConfigError('knockback decay_rate must be negative')

        s = self.shake
        if not 0.0 < s.decay_rate <= 1.0:
            raise ConfigError('shake decay_rate must be within (0, 1]')
        if s.hit_trauma < 0 or s.cutoff < 0:
            raise ConfigError('shake trauma and cutoff must be non-negative')

        return self
