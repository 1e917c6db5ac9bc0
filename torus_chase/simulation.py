"""
Simulation
===========
The per-frame pipeline and the context it threads through the systems.

A Simulation owns the entity registry, the progression state machine,
screen shake, the play-area bounds and the random generator. The shell
drives it with one FrameInput per frame and reads back events and an
entity snapshot.
"""

import logging
import random
from typing import List, Optional

from .config import GameConfig
from .ecs import World
from .errors import InvalidParameterError
from .components import (
    Position, Collider, PursuerProfile, PlayerTag, PursuerTag, PickupTag, Role
)
from .events import (
    FrameInput, EntitySnapshot,
    PLAYER_HIT, PURSUER_SPAWNED, SHAKE_OFFSET,
    REQUEST_SPAWN_PURSUER, REQUEST_RELOCATE_PICKUP, REQUEST_KNOCKBACK,
    REQUEST_START_ROUND, REQUEST_END_ROUND,
)
from .player import create_player
from .progression import AppState, Progression
from .shake import ScreenShake
from .spawner import create_pickup, relocate_pickup, spawn_pursuer
from .systems import (
    player_steering_system, capture_targets, pursuer_ai_system,
    wraparound_system, collision_system, knockback_system,
)


logger = logging.getLogger(__name__)


class Simulation:
    """
    Central simulation context.

    Field ownership per tick: the motion systems write positions and
    velocities, the Progression writes score/health/invincibility, and
    only the request handlers here create or destroy entities.
    """

    def __init__(self, config: Optional[GameConfig] = None,
                 rng: Optional[random.Random] = None):
        self.config = (config if config is not None else GameConfig()).validate()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.width = self.config.width
        self.height = self.config.height

        self.world = World()
        self.progression = Progression(self.config.progression)
        self.shake = ScreenShake(self.config.shake)

        logger.debug('simulation created %gx%g seed=%s', self.width, self.height, self.config.seed)

    # -------------------------------------------------------------------------
    # Read-only state for the shell
    # -------------------------------------------------------------------------

    @property
    def app_state(self) -> AppState:
        return self.progression.app_state

    @property
    def score(self) -> int:
        return self.progression.state.score

    @property
    def health(self) -> int:
        return self.progression.state.health

    @property
    def max_health(self) -> int:
        return self.config.progression.max_health

    @property
    def invincible(self) -> bool:
        return self.progression.state.invincible

    @property
    def last_score(self) -> Optional[int]:
        return self.progression.last_score

    def snapshot(self) -> List[EntitySnapshot]:
        """Every live entity with what it takes to draw it, in creation order."""
        snapshots = []
        for entity_id, pos, collider in self.world.query(Position, Collider):
            archetype = None
            if self.world.has_component(entity_id, PlayerTag):
                role = Role.PLAYER
            elif self.world.has_component(entity_id, PickupTag):
                role = Role.PICKUP
            elif self.world.has_component(entity_id, PursuerTag):
                role = Role.PURSUER
                archetype = self.world.get_component(entity_id, PursuerTag).archetype
            else:
                continue
            snapshots.append(EntitySnapshot(
                entity_id, role.value, pos.x, pos.y, collider.radius, archetype
            ))
        return snapshots

    def pursuer_count(self) -> int:
        return len(self.world.get_entities_with(PursuerProfile))

    # -------------------------------------------------------------------------
    # Shell -> core
    # -------------------------------------------------------------------------

    def set_bounds(self, width: float, height: float) -> None:
        """Resize the play area. Entities are not moved; they wrap at the new edges."""
        if width <= 0 or height <= 0:
            raise InvalidParameterError(f'play area must be positive, got {width}x{height}')
        self.width = float(width)
        self.height = float(height)
        logger.debug('play area resized to %gx%g', self.width, self.height)

    def request_state(self, target: AppState) -> List[dict]:
        """Ask for a Menu/Playing transition. Returns the resulting events."""
        return self._carry_out(self.progression.request(target))

    def collect_pickup(self) -> List[dict]:
        """Deliver a pickup collection directly (what a pickup collision triggers)."""
        return self._carry_out(self.progression.collect_pickup())

    def hit_player(self) -> List[dict]:
        """Deliver a player hit directly (what a pursuer collision triggers)."""
        return self._carry_out(self.progression.register_hit())

    def tick(self, frame: FrameInput) -> List[dict]:
        """
        Run one frame.

        Motion first (player, then pursuers against a snapshot of the
        player and pickup, then wraparound), then the invincibility timer,
        then collisions and the state machine against final positions.
        Screen shake updates every frame, in the menu too.
        """
        dt = frame.dt
        if dt < 0:
            raise InvalidParameterError(f'dt must be non-negative, got {dt}')

        events = []

        if self.app_state == AppState.PLAYING:
            player_steering_system(self.world, frame.direction, dt)

            targets = capture_targets(self.world)
            pursuer_ai_system(
                self.world, targets, dt, self.width, self.height,
                self.config.pursuer.pull_scale,
            )
            wraparound_system(self.world, self.width, self.height)

            self.progression.tick(dt)

            collisions = collision_system(self.world, self.invincible)
            events.extend(self._carry_out(self.progression.handle_collisions(collisions)))

        offset_x, offset_y = self.shake.update(dt)
        events.append({'type': SHAKE_OFFSET, 'x': offset_x, 'y': offset_y})
        return events

    # -------------------------------------------------------------------------
    # Requests from the state machine
    # -------------------------------------------------------------------------

    def _carry_out(self, events: List[dict]) -> List[dict]:
        """Execute internal requests in order; pass everything else to the shell."""
        out = []
        for event in events:
            kind = event['type']

            if kind == REQUEST_SPAWN_PURSUER:
                entity_id, profile = spawn_pursuer(
                    self.world, event['score'], self.rng,
                    self.config.pursuer, self.width, self.height,
                )
                out.append({
                    'type': PURSUER_SPAWNED,
                    'entity_id': entity_id,
                    'profile': profile.summary(),
                })
            elif kind == REQUEST_RELOCATE_PICKUP:
                relocate_pickup(self.world, self.rng, self.width, self.height)
            elif kind == REQUEST_KNOCKBACK:
                knockback_system(
                    self.world, self.config.knockback.base, self.config.knockback.decay_rate
                )
            elif kind == REQUEST_START_ROUND:
                self._despawn_round()
                create_player(self.world, self.config.player)
                create_pickup(self.world, self.config.pickup)
            elif kind == REQUEST_END_ROUND:
                self._despawn_round()
            else:
                if kind == PLAYER_HIT:
                    self.shake.add_trauma(self.config.shake.hit_trauma * event['severity'])
                out.append(event)
        return out

    def _despawn_round(self) -> None:
        """Remove the player, the pickup and every pursuer."""
        for tag in (PlayerTag, PickupTag, PursuerTag):
            for entity_id in self.world.get_entities_with(tag):
                self.world.destroy_entity(entity_id)
        removed = self.world.process_dead_entities()
        if removed:
            logger.debug('despawned %d round entities', len(removed))
