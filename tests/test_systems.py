import itertools
import math

import pytest

from torus_chase.components import Position, Velocity, PursuerProfile
from torus_chase.config import PlayerConfig, PickupConfig, PursuerConfig
from torus_chase.events import COLLISION_PICKUP, COLLISION_PURSUER
from torus_chase.player import create_player
from torus_chase.pursuers import create_pursuer
from torus_chase.spawner import create_pickup
from torus_chase.systems import (
    Targets, capture_targets, circles_overlap, collision_system,
    knockback_magnitude, knockback_system, player_steering_system,
    pursuer_ai_system, wrap_position, wraparound_system,
)


WIDTH, HEIGHT = 1280.0, 720.0


def _profile(**overrides):
    values = dict(max_speed=100.0, max_accel=50.0)
    values.update(overrides)
    return PursuerProfile(**values)


# =============================================================================
# PLAYER STEERING
# =============================================================================

def test_player_accelerates_toward_input(world):
    eid = create_player(world, PlayerConfig())
    player_steering_system(world, (1.0, 0.0), 0.1)

    vel = world.get_component(eid, Velocity)
    pos = world.get_component(eid, Position)
    assert (vel.x, vel.y) == pytest.approx((60.0, 0.0))
    assert (pos.x, pos.y) == pytest.approx((-150.0 + 6.0, 0.0))


def test_player_diagonal_is_normalized(world):
    eid = create_player(world, PlayerConfig())
    for _ in range(20):
        player_steering_system(world, (1.0, 1.0), 0.1)

    vel = world.get_component(eid, Velocity)
    assert math.hypot(vel.x, vel.y) == pytest.approx(300.0)
    assert vel.x == pytest.approx(vel.y)


def test_player_decelerates_without_input(world):
    eid = create_player(world, PlayerConfig())
    world.get_component(eid, Velocity).x = 100.0

    player_steering_system(world, (0.0, 0.0), 0.1)
    assert world.get_component(eid, Velocity).x == pytest.approx(40.0)

    player_steering_system(world, (0.0, 0.0), 0.1)
    assert world.get_component(eid, Velocity).x == 0.0


# =============================================================================
# PURSUER AI
# =============================================================================

def _targets(player=(0.0, 0.0), velocity=(0.0, 0.0), pickup=None):
    return Targets(player, velocity, pickup)


def test_pure_pursuit_steers_straight_at_player(world):
    eid = create_pursuer(world, 100.0, 0.0, 12.0, _profile())
    pursuer_ai_system(world, _targets(), 0.1, WIDTH, HEIGHT, pull_scale=8.0)

    vel = world.get_component(eid, Velocity)
    assert (vel.x, vel.y) == pytest.approx((-5.0, 0.0))
    assert world.get_component(eid, Position).x == pytest.approx(99.5)


def test_full_prediction_leads_the_player(world):
    eid = create_pursuer(world, 0.0, 100.0, 12.0, _profile(future_prediction=1.0))
    # Player at origin moving right at 100: aim point is (100, 0)
    pursuer_ai_system(world, _targets(velocity=(100.0, 0.0)), 0.1, WIDTH, HEIGHT, 8.0)

    vel = world.get_component(eid, Velocity)
    assert vel.x > 0
    assert vel.x == pytest.approx(-vel.y)


def test_wrapping_pursuer_takes_the_short_way_round(world):
    wrapper = create_pursuer(world, 600.0, 0.0, 12.0, _profile(wraps=True, wrap_margin=6.0))
    chaser = create_pursuer(world, 600.0, 10.0, 12.0, _profile())
    pursuer_ai_system(world, _targets(player=(-600.0, 0.0)), 0.1, WIDTH, HEIGHT, 8.0)

    assert world.get_component(wrapper, Velocity).x > 0
    assert world.get_component(chaser, Velocity).x < 0


def test_pickup_pull_is_added_after_the_clamp(world):
    eid = create_pursuer(world, 0.0, 0.0, 12.0, _profile(pickup_pull=0.5))
    # Player straight down, pickup straight right
    pursuer_ai_system(
        world, _targets(player=(0.0, -100.0), pickup=(50.0, 0.0)), 0.1, WIDTH, HEIGHT, 8.0
    )

    vel = world.get_component(eid, Velocity)
    assert (vel.x, vel.y) == pytest.approx((4.0, -5.0))


def test_negative_pull_repels(world):
    eid = create_pursuer(world, 0.0, 0.0, 12.0, _profile(pickup_pull=-1.0))
    pursuer_ai_system(
        world, _targets(player=(0.0, -100.0), pickup=(50.0, 0.0)), 0.1, WIDTH, HEIGHT, 8.0
    )
    assert world.get_component(eid, Velocity).x == pytest.approx(-8.0)


def test_pursuer_on_top_of_player_holds_heading(world):
    eid = create_pursuer(world, 0.0, 0.0, 12.0, _profile())
    world.get_component(eid, Velocity).x = 30.0
    pursuer_ai_system(world, _targets(), 0.1, WIDTH, HEIGHT, 8.0)

    # Desired velocity is zero, so the clamp just decelerates
    assert world.get_component(eid, Velocity).x == pytest.approx(25.0)


def test_capture_targets(world):
    create_player(world, PlayerConfig())
    create_pickup(world, PickupConfig())

    targets = capture_targets(world)
    assert targets.player_position == (-150.0, 0.0)
    assert targets.pickup_position == (150.0, 0.0)


def test_ai_without_player_does_nothing(world):
    eid = create_pursuer(world, 0.0, 0.0, 12.0, _profile())
    pursuer_ai_system(world, capture_targets(world), 0.1, WIDTH, HEIGHT, 8.0)
    assert world.get_component(eid, Position).x == 0.0


def test_default_pull_cannot_outrun_the_clamp(world):
    # Weakest chaser the default curve can roll, full attraction, with the
    # pickup sitting off to one side of the player for the whole run
    pull_scale = PursuerConfig().pull_scale
    eid = create_pursuer(
        world, -300.0, 100.0, 12.0, _profile(max_speed=120.0, max_accel=110.0, pickup_pull=1.0)
    )
    targets = _targets(player=(0.0, 0.0), pickup=(200.0, 0.0))

    peak = 0.0
    for _ in range(600):
        pursuer_ai_system(world, targets, 1.0 / 60.0, WIDTH, HEIGHT, pull_scale)
        vel = world.get_component(eid, Velocity)
        peak = max(peak, math.hypot(vel.x, vel.y))

    assert peak <= 240.0


# =============================================================================
# WRAPAROUND
# =============================================================================

def test_wrap_moves_to_opposite_edge():
    assert wrap_position(-660.0, 0.0, 640.0, 360.0, 16.0) == (656.0, 0.0)
    assert wrap_position(660.0, 0.0, 640.0, 360.0, 16.0) == (-656.0, 0.0)
    assert wrap_position(0.0, -380.0, 640.0, 360.0, 16.0) == (0.0, 376.0)
    assert wrap_position(0.0, 380.0, 640.0, 360.0, 16.0) == (0.0, -376.0)


def test_wrap_is_idempotent():
    coords = [-1000.0, -656.5, -656.0, -640.0, 0.0, 640.0, 656.0, 656.5, 1000.0]
    for x, y in itertools.product(coords, coords):
        once = wrap_position(x, y, 640.0, 360.0, 16.0)
        twice = wrap_position(*once, 640.0, 360.0, 16.0)
        assert once == twice


def test_wrap_margin_is_per_entity(world):
    player = create_player(world, PlayerConfig(spawn_x=-650.0))
    tight = create_pursuer(world, -650.0, 0.0, 12.0, _profile(wraps=True, wrap_margin=6.0))
    chaser = create_pursuer(world, -1000.0, 0.0, 12.0, _profile())

    wraparound_system(world, WIDTH, HEIGHT)

    assert world.get_component(player, Position).x == -650.0  # margin 16: not yet
    assert world.get_component(tight, Position).x == 646.0
    assert world.get_component(chaser, Position).x == -1000.0  # chasers never wrap


# =============================================================================
# COLLISION
# =============================================================================

def test_overlap_is_symmetric_and_strict():
    a, b = (0.0, 0.0), (10.0, 0.0)
    assert circles_overlap(a, 6.0, b, 5.0) == circles_overlap(b, 5.0, a, 6.0) is True
    assert circles_overlap(a, 5.0, b, 5.0) is False
    assert circles_overlap(b, 5.0, a, 5.0) is False


def test_collision_reports_one_pursuer_hit_per_tick(world):
    create_player(world, PlayerConfig(spawn_x=0.0))
    first = create_pursuer(world, 5.0, 0.0, 12.0, _profile())
    create_pursuer(world, -5.0, 0.0, 12.0, _profile())

    events = collision_system(world, invincible=False)
    assert events == [{'type': COLLISION_PURSUER, 'entity_id': first}]


def test_collision_skips_pursuers_while_invincible(world):
    create_player(world, PlayerConfig(spawn_x=0.0))
    create_pursuer(world, 5.0, 0.0, 12.0, _profile())
    pickup = create_pickup(world, PickupConfig(spawn_x=3.0))

    events = collision_system(world, invincible=True)
    assert events == [{'type': COLLISION_PICKUP, 'entity_id': pickup}]


def test_no_collisions_far_apart(world):
    create_player(world, PlayerConfig())
    create_pickup(world, PickupConfig())
    create_pursuer(world, 500.0, 300.0, 12.0, _profile())
    assert collision_system(world, invincible=False) == []


# =============================================================================
# KNOCKBACK
# =============================================================================

def test_knockback_magnitude_equals_base_at_contact():
    assert knockback_magnitude(28.0, 28.0, 400.0, -0.01) == pytest.approx(400.0)
    assert knockback_magnitude(128.0, 28.0, 400.0, -0.01) == pytest.approx(400.0 * math.exp(-1))


def test_knockback_pushes_every_pursuer_away(world):
    create_player(world, PlayerConfig(spawn_x=0.0))
    near = create_pursuer(world, 28.0, 0.0, 12.0, _profile())
    far = create_pursuer(world, 0.0, -128.0, 12.0, _profile())

    assert knockback_system(world, 400.0, -0.01) == 2

    near_vel = world.get_component(near, Velocity)
    far_vel = world.get_component(far, Velocity)
    assert (near_vel.x, near_vel.y) == pytest.approx((400.0, 0.0))
    assert far_vel.x == pytest.approx(0.0)
    assert far_vel.y == pytest.approx(-400.0 * math.exp(-1))


def test_knockback_ignores_max_accel(world):
    create_player(world, PlayerConfig(spawn_x=0.0))
    eid = create_pursuer(world, 28.0, 0.0, 12.0, _profile(max_accel=1.0))
    knockback_system(world, 400.0, -0.01)
    assert world.get_component(eid, Velocity).x == pytest.approx(400.0)


def test_knockback_skips_coincident_pursuer(world):
    create_player(world, PlayerConfig(spawn_x=0.0))
    eid = create_pursuer(world, 0.0, 0.0, 12.0, _profile())

    assert knockback_system(world, 400.0, -0.01) == 0
    vel = world.get_component(eid, Velocity)
    assert (vel.x, vel.y) == (0.0, 0.0)
