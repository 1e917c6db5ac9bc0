"""
Player Module
==============
Player entity creation and keyboard input handling.
"""

from typing import Tuple
import math

from .ecs import World
from .config import PlayerConfig
from .components import (
    Position, Velocity, Collider, Wraps, PlayerControlled, PlayerTag
)


def create_player(world: World, config: PlayerConfig) -> int:
    """Create the player entity at its configured spawn point."""
    return world.create_entity(
        Position(config.spawn_x, config.spawn_y),
        Velocity(0.0, 0.0),
        Collider(config.radius),
        Wraps(config.radius),
        PlayerControlled(max_speed=config.max_speed, accel=config.accel),
        PlayerTag(),
    )


# Key name -> (dx, dy). World y points up, so 'w' is +y.
_MOVE_KEYS = {
    'w': (0, 1), 'KEY_UP': (0, 1),
    's': (0, -1), 'KEY_DOWN': (0, -1),
    'a': (-1, 0), 'KEY_LEFT': (-1, 0),
    'd': (1, 0), 'KEY_RIGHT': (1, 0),
}


class InputHandler:
    """
    Turns blessed key presses into a held-direction vector.

    Terminals do not report key-up events, so each press keeps its
    direction held for a number of frames and is refreshed by key repeat.
    """

    def __init__(self, hold_duration: int = 12):
        self.keys_held: dict = {}  # key -> frames remaining
        self.hold_duration = hold_duration

        # Actions triggered this frame (consumed on read)
        self._quit_triggered = False
        self._start_triggered = False
        self._toggle_fps = False

    def process_key(self, key) -> None:
        """Process a single key press from blessed's inkey()."""
        if key is None or not key:
            return

        name = key.name if key.is_sequence else key.lower()

        if name == 'q' or name == 'KEY_ESCAPE':
            self._quit_triggered = True
        elif name in _MOVE_KEYS:
            self.keys_held[name] = self.hold_duration
        elif name in (' ', 'KEY_ENTER'):
            self._start_triggered = True
        elif name == 'f':
            self._toggle_fps = True

    def update(self) -> None:
        """Age key hold timers (call once per frame)."""
        expired = []
        for key, frames in self.keys_held.items():
            self.keys_held[key] = frames - 1
            if self.keys_held[key] <= 0:
                expired.append(key)
        for key in expired:
            del self.keys_held[key]

    def release_all(self) -> None:
        self.keys_held.clear()

    def get_movement_vector(self) -> Tuple[float, float]:
        """Current 8-way direction from held keys, diagonals normalized."""
        dx, dy = 0.0, 0.0
        for key in self.keys_held:
            kx, ky = _MOVE_KEYS[key]
            dx += kx
            dy += ky

        # Opposing keys cancel out; clamp doubles from WASD + arrows
        dx = max(-1.0, min(1.0, dx))
        dy = max(-1.0, min(1.0, dy))

        if dx != 0 and dy != 0:
            length = math.sqrt(dx * dx + dy * dy)
            dx /= length
            dy /= length

        return dx, dy

    def consume_quit(self) -> bool:
        triggered = self._quit_triggered
        self._quit_triggered = False
        return triggered

    def consume_start(self) -> bool:
        """Check and consume the start-round trigger."""
        triggered = self._start_triggered
        self._start_triggered = False
        return triggered

    def consume_toggle_fps(self) -> bool:
        triggered = self._toggle_fps
        self._toggle_fps = False
        return triggered
