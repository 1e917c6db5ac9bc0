"""
Simulation Systems
===================
Functions that operate on entities with matching components.

Per-tick order (driven by Simulation.tick):
    player_steering_system -> capture_targets -> pursuer_ai_system
    -> wraparound_system -> collision_system

knockback_system runs when the state machine reports a hit.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .ecs import World
from .components import (
    Position, Velocity, Collider, Wraps,
    PlayerControlled, PursuerProfile, PlayerTag, PursuerTag, PickupTag
)
from .events import COLLISION_PICKUP, COLLISION_PURSUER
from . import geometry
from .geometry import Vec2


logger = logging.getLogger(__name__)


# =============================================================================
# PLAYER STEERING
# =============================================================================

def player_steering_system(world: World, direction: Vec2, dt: float) -> None:
    """
    Steer the player toward direction * max_speed, then integrate.

    Runs on zero-input ticks too, so the player decelerates to a stop at
    the same rate it accelerates.
    """
    unit = geometry.normalize(direction)
    for entity_id, pos, vel, ctrl in world.query(Position, Velocity, PlayerControlled):
        target = geometry.scale(unit, ctrl.max_speed)
        vel.x, vel.y = geometry.move_toward(vel.as_tuple(), target, ctrl.accel * dt)
        pos.x += vel.x * dt
        pos.y += vel.y * dt


# =============================================================================
# PURSUER AI
# =============================================================================

@dataclass(frozen=True)
class Targets:
    """Read-only view of player and pickup state shared by every pursuer this tick."""
    player_position: Vec2
    player_velocity: Vec2
    pickup_position: Optional[Vec2]


def capture_targets(world: World) -> Optional[Targets]:
    """Snapshot the player and pickup, or None when there is no player."""
    player = world.first(Position, Velocity, PlayerTag)
    if player is None:
        return None
    _, p_pos, p_vel, _ = player

    pickup = world.first(Position, PickupTag)
    pickup_position = pickup[1].as_tuple() if pickup else None

    return Targets(p_pos.as_tuple(), p_vel.as_tuple(), pickup_position)


def interception_point(position: Vec2, profile: PursuerProfile, targets: Targets,
                       width: float, height: float) -> Vec2:
    """
    Where a pursuer aims: the player led by future_prediction of its
    velocity, moved to the nearest toroidal copy for wrapping pursuers.
    """
    aim = geometry.add(
        targets.player_position,
        geometry.scale(targets.player_velocity, profile.future_prediction),
    )
    if profile.wraps:
        aim = geometry.toroidal_nearest(position, aim, width, height)
    return aim


def steer_pursuer(pos: Position, vel: Velocity, profile: PursuerProfile,
                  targets: Targets, dt: float, width: float, height: float,
                  pull_scale: float) -> None:
    """
    One pursuer's update. Writes only this pursuer's velocity and position.

    The pickup pull is added after the acceleration clamp, so a strongly
    attracted pursuer can bend away from pure tracking.
    """
    here = pos.as_tuple()
    aim = interception_point(here, profile, targets, width, height)

    desired = geometry.scale(geometry.direction_to(here, aim), profile.max_speed)
    vx, vy = geometry.move_toward(vel.as_tuple(), desired, profile.max_accel * dt)

    if targets.pickup_position is not None and profile.pickup_pull != 0.0:
        pull = geometry.scale(
            geometry.direction_to(here, targets.pickup_position),
            profile.pickup_pull * pull_scale,
        )
        vx += pull[0]
        vy += pull[1]

    vel.x, vel.y = vx, vy
    pos.x += vx * dt
    pos.y += vy * dt


def pursuer_ai_system(world: World, targets: Optional[Targets], dt: float,
                      width: float, height: float, pull_scale: float) -> None:
    """Advance every pursuer. Pursuers never read each other, so order is irrelevant."""
    if targets is None:
        return

    for entity_id, pos, vel, profile in world.query(Position, Velocity, PursuerProfile):
        steer_pursuer(pos, vel, profile, targets, dt, width, height, pull_scale)


# =============================================================================
# WRAPAROUND
# =============================================================================

def wrap_position(x: float, y: float, half_width: float, half_height: float,
                  margin: float) -> Tuple[float, float]:
    """
    Toroidal correction for one point.

    An entity re-enters once it is `margin` past an edge. The comparisons
    are strict, so a corrected point is never corrected again.
    """
    if x < -half_width - margin:
        x = half_width + margin
    elif x > half_width + margin:
        x = -half_width - margin

    if y < -half_height - margin:
        y = half_height + margin
    elif y > half_height + margin:
        y = -half_height - margin

    return x, y


def wraparound_system(world: World, width: float, height: float) -> None:
    """Apply wrap correction to every entity carrying a Wraps component."""
    half_w = width / 2
    half_h = height / 2
    for entity_id, pos, wraps in world.query(Position, Wraps):
        pos.x, pos.y = wrap_position(pos.x, pos.y, half_w, half_h, wraps.margin)


# =============================================================================
# COLLISION
# =============================================================================

def circles_overlap(a: Vec2, radius_a: float, b: Vec2, radius_b: float) -> bool:
    """Strict circle overlap; circles that only touch do not collide."""
    reach = radius_a + radius_b
    return geometry.distance_squared(a, b) < reach * reach


def collision_system(world: World, invincible: bool) -> List[dict]:
    """
    Scan player-vs-pursuer and player-vs-pickup.

    Pursuer detection is skipped entirely while invincible. At most one
    pursuer collision is reported per tick: the oldest overlapping pursuer.
    """
    events = []

    player = world.first(Position, Collider, PlayerTag)
    if player is None:
        return events
    _, p_pos, p_col, _ = player
    here = p_pos.as_tuple()

    if not invincible:
        for enemy_id, e_pos, e_col, _ in world.query(Position, Collider, PursuerTag):
            if circles_overlap(here, p_col.radius, e_pos.as_tuple(), e_col.radius):
                events.append({'type': COLLISION_PURSUER, 'entity_id': enemy_id})
                break  # Only one pursuer hit per frame

    for pickup_id, k_pos, k_col, _ in world.query(Position, Collider, PickupTag):
        if circles_overlap(here, p_col.radius, k_pos.as_tuple(), k_col.radius):
            events.append({'type': COLLISION_PICKUP, 'entity_id': pickup_id})

    return events


# =============================================================================
# KNOCKBACK
# =============================================================================

def knockback_magnitude(distance: float, contact_distance: float,
                        base: float, decay_rate: float) -> float:
    """base at contact distance, decaying exponentially (decay_rate < 0) beyond it."""
    return base * math.exp(decay_rate * (distance - contact_distance))


def knockback_system(world: World, base: float, decay_rate: float) -> int:
    """
    Shove every pursuer away from the player.

    The impulse goes straight into velocity and is not limited by the
    pursuer's max_accel. A pursuer centred exactly on the player has no
    away direction and is left alone. Returns how many pursuers were shoved.
    """
    player = world.first(Position, Collider, PlayerTag)
    if player is None:
        return 0
    _, p_pos, p_col, _ = player
    here = p_pos.as_tuple()

    shoved = 0
    for enemy_id, e_pos, e_vel, e_col, _ in world.query(
        Position, Velocity, Collider, PursuerTag
    ):
        there = e_pos.as_tuple()
        direction = geometry.direction_to(here, there)
        if direction == geometry.ZERO:
            continue

        magnitude = knockback_magnitude(
            geometry.distance(here, there),
            p_col.radius + e_col.radius,
            base, decay_rate,
        )
        e_vel.x += direction[0] * magnitude
        e_vel.y += direction[1] * magnitude
        shoved += 1

    logger.debug('knockback shoved %d pursuers', shoved)
    return shoved
