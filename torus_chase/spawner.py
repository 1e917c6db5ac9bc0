"""
Spawner and Difficulty Curve
=============================
Pursuer/pickup placement and score-driven pursuer stats.

Pursuer max_speed and max_accel follow a logistic curve of the score:

    f(score) = 1 / (1 + e^(-k * (score - midpoint)))

mapped into [min, max] and perturbed by a uniform deviation, so
difficulty climbs smoothly toward a soft ceiling and no two spawns are
identical. All randomness comes from the caller's random.Random.
"""

import logging
import math
import random
from typing import Tuple

from .ecs import World
from .config import PickupConfig, PursuerConfig
from .components import (
    Position, Velocity, Collider, Wraps, PickupTag, PursuerProfile
)
from .geometry import lerp
from .pursuers import ARCHETYPE_CHASER, ARCHETYPE_WRAPPER, create_pursuer


logger = logging.getLogger(__name__)


# =============================================================================
# DIFFICULTY CURVE
# =============================================================================

def logistic(score: float, steepness: float, midpoint: float) -> float:
    """Logistic curve in (0, 1), 0.5 at the midpoint."""
    exponent = -steepness * (score - midpoint)
    # exp overflows past ~709; the curve is already 0 there
    if exponent > 700:
        return 0.0
    return 1.0 / (1.0 + math.exp(exponent))


def difficulty(score: int, config: PursuerConfig) -> float:
    return logistic(score, config.curve_steepness, config.curve_midpoint)


def expected_max_speed(score: int, config: PursuerConfig) -> float:
    """Deviation-free pursuer max speed at this score."""
    return lerp(config.min_speed, config.max_speed, difficulty(score, config))


def expected_max_accel(score: int, config: PursuerConfig) -> float:
    """Deviation-free chaser max acceleration at this score."""
    return lerp(config.min_accel, config.max_accel, difficulty(score, config))


def wrapper_unlocked(score: int, config: PursuerConfig) -> bool:
    return score >= config.wrapper_unlock_score


def roll_profile(score: int, rng: random.Random, config: PursuerConfig) -> PursuerProfile:
    """
    Draw a pursuer profile for the given score.

    Once the wrapper archetype is unlocked it is picked with
    probability wrapper_chance. Wrappers accelerate slower, wrap with a
    tighter margin, and feel a weaker pull from the pickup.
    """
    max_speed = expected_max_speed(score, config) + rng.uniform(
        -config.speed_deviation, config.speed_deviation
    )
    max_accel = expected_max_accel(score, config) + rng.uniform(
        -config.accel_deviation, config.accel_deviation
    )
    future_prediction = rng.uniform(0.0, 1.0)
    pickup_pull = rng.uniform(-1.0, 1.0)

    if wrapper_unlocked(score, config) and rng.random() < config.wrapper_chance:
        return PursuerProfile(
            max_speed=max_speed,
            max_accel=max_accel * config.wrapper_accel_multiplier,
            future_prediction=future_prediction,
            pickup_pull=pickup_pull * config.wrapper_pull_factor,
            wraps=True,
            wrap_margin=config.radius * config.wrapper_margin_factor,
            archetype=ARCHETYPE_WRAPPER,
        )

    return PursuerProfile(
        max_speed=max_speed,
        max_accel=max_accel,
        future_prediction=future_prediction,
        pickup_pull=pickup_pull,
        wraps=False,
        wrap_margin=config.radius,
        archetype=ARCHETYPE_CHASER,
    )


# =============================================================================
# PLACEMENT
# =============================================================================

def edge_spawn_position(rng: random.Random, width: float, height: float,
                        margin: float) -> Tuple[float, float]:
    """
    Random point just outside one of the four arena edges.

    The point sits `margin` past the edge, i.e. fully off screen for an
    entity of radius `margin`.
    """
    half_w = width / 2
    half_h = height / 2
    side = rng.randrange(4)

    if side == 0:  # left
        return -half_w - margin, rng.uniform(-half_h, half_h)
    if side == 1:  # right
        return half_w + margin, rng.uniform(-half_h, half_h)
    if side == 2:  # bottom
        return rng.uniform(-half_w, half_w), -half_h - margin
    return rng.uniform(-half_w, half_w), half_h + margin  # top


def random_point_in_bounds(rng: random.Random, width: float, height: float,
                           inset: float = 0.0) -> Tuple[float, float]:
    """Uniform random point inside the arena, kept `inset` from each edge."""
    half_w = max(0.0, width / 2 - inset)
    half_h = max(0.0, height / 2 - inset)
    return rng.uniform(-half_w, half_w), rng.uniform(-half_h, half_h)


# =============================================================================
# SPAWN FUNCTIONS
# =============================================================================

def spawn_pursuer(world: World, score: int, rng: random.Random,
                  config: PursuerConfig, width: float, height: float
                  ) -> Tuple[int, PursuerProfile]:
    """Roll a profile for `score` and spawn it off a random edge."""
    profile = roll_profile(score, rng, config)
    x, y = edge_spawn_position(rng, width, height, config.radius)
    entity_id = create_pursuer(world, x, y, config.radius, profile)
    logger.debug('spawned %s pursuer %d at (%.0f, %.0f) score=%d',
                 profile.archetype, entity_id, x, y, score)
    return entity_id, profile


def create_pickup(world: World, config: PickupConfig) -> int:
    """Create the pickup at its configured start point. It never moves on its own."""
    return world.create_entity(
        Position(config.spawn_x, config.spawn_y),
        Velocity(0.0, 0.0),
        Collider(config.radius),
        Wraps(config.radius),
        PickupTag(),
    )


def relocate_pickup(world: World, rng: random.Random,
                    width: float, height: float) -> None:
    """Move every pickup to a fresh uniform random point in the arena."""
    for entity_id, pos, collider, _ in world.query(Position, Collider, PickupTag):
        pos.x, pos.y = random_point_in_bounds(rng, width, height, collider.radius)
        logger.debug('pickup %d relocated to (%.0f, %.0f)', entity_id, pos.x, pos.y)
