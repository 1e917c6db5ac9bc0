"""
Pursuer Archetypes
===================
Pursuer entity creation.

Two archetypes exist:
    chaser  - stays on its side of the arena edges, tracks directly
    wrapper - unlocked later; wraps the arena and tracks the short way round
"""

from .ecs import World
from .components import (
    Position, Velocity, Collider, Wraps, PursuerProfile, PursuerTag
)


ARCHETYPE_CHASER = 'chaser'
ARCHETYPE_WRAPPER = 'wrapper'


def create_pursuer(world: World, x: float, y: float, radius: float,
                   profile: PursuerProfile) -> int:
    """
    Create a pursuer at (x, y) driven by the given profile.

    Only wrapping profiles get a Wraps component; chasers may drift past
    an edge and are brought back by their own steering.
    """
    entity_id = world.create_entity(
        Position(x, y),
        Velocity(0.0, 0.0),
        Collider(radius),
        profile,
        PursuerTag(profile.archetype),
    )
    if profile.wraps:
        world.add_component(entity_id, Wraps(profile.wrap_margin))
    return entity_id
