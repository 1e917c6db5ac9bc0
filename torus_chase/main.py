#!/usr/bin/env python3
"""
TORUS CHASE - Terminal Survive-and-Collect
===========================================
Dodge the pursuers, grab the pickup, and survive as long as you can.
Every edge of the arena wraps around to the opposite one.

Controls:
    WASD / Arrows  - Move (acceleration-limited)
    SPACE / ENTER  - Start a round
    F              - Toggle FPS display
    Q/ESC          - Quit
"""

import argparse
import logging
import sys
import time

try:
    from blessed import Terminal
except ImportError:
    print("ERROR: 'blessed' library required. Install with: pip install blessed")
    sys.exit(1)

from .config import GameConfig
from .engine import (
    GameRenderer, GRAY_DARK, GRAY_MED,
    NEON_CYAN, NEON_MAGENTA, NEON_YELLOW, NEON_GREEN, NEON_RED, NEON_ORANGE, WHITE,
    UI_ROWS,
)
from .errors import SimulationError
from .events import FrameInput, PICKUP_COLLECTED, HEALTH_GAINED, PLAYER_HIT, SHAKE_OFFSET
from .player import InputHandler
from .progression import AppState
from .pursuers import ARCHETYPE_WRAPPER
from .simulation import Simulation


logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

TARGET_FPS = 60
FRAME_TIME = 1.0 / TARGET_FPS
MIN_WIDTH = 60
MIN_HEIGHT = 20

# World units covered by one terminal cell (cells are about twice as tall as wide)
CELL_WORLD_WIDTH = 16.0
CELL_WORLD_HEIGHT = 32.0

TITLE_ART = [
    r" _____ ___  ___ _   _ ___    ___ _  _   _   ___ ___ ",
    r"|_   _/ _ \| _ \ | | / __|  / __| || | /_\ / __| __|",
    r"  | || (_) |   / |_| \__ \ | (__| __ |/ _ \\__ \ _| ",
    r"  |_| \___/|_|_\\___/|___/  \___|_||_/_/ \_\___/___|",
]

ROLE_GLYPHS = {
    'player': ('@', NEON_CYAN),
    'pickup': ('*', NEON_YELLOW),
    'pursuer': ('&', NEON_RED),
}
WRAPPER_GLYPH = ('%', NEON_MAGENTA)


def world_bounds_for(cols: int, rows: int):
    """Play-area size that maps one world cell-block onto each terminal cell."""
    return cols * CELL_WORLD_WIDTH, (rows - UI_ROWS) * CELL_WORLD_HEIGHT


def play_area_for(cols: int, rows: int, width=None, height=None):
    """Play-area size for a terminal, with either axis optionally pinned."""
    auto_width, auto_height = world_bounds_for(cols, rows)
    return (
        auto_width if width is None else width,
        auto_height if height is None else height,
    )


# =============================================================================
# GAME STATE
# =============================================================================

class GameState:
    """Shell around a Simulation: input, rendering and the flash timers."""

    def __init__(self, term: Terminal, config: GameConfig, width=None, height=None):
        self.term = term
        # A pinned play area is scaled onto the terminal instead of following it
        self.fixed_area = width is not None or height is not None
        width, height = play_area_for(term.width, term.height, width, height)
        config.width, config.height = width, height

        self.sim = Simulation(config)
        self.renderer = GameRenderer(term, width, height)
        self.input_handler = InputHandler()

        self.running = True
        self.frame = 0
        self.flash_text = ''
        self.flash_color = WHITE
        self.flash_timer = 0

    def start_game(self):
        self.input_handler.release_all()
        self.sim.request_state(AppState.PLAYING)

    def check_resize(self):
        """Follow terminal resizes. Entities stay where they are."""
        if (self.term.width, self.term.height) == (self.renderer.width, self.renderer.height):
            return
        self.renderer.resize(self.term.width, self.term.height)
        if self.fixed_area:
            return
        width, height = world_bounds_for(self.term.width, self.term.height)
        self.renderer.world_width, self.renderer.world_height = width, height
        self.sim.set_bounds(width, height)

    def update(self):
        """Run one fixed-timestep tick of the simulation."""
        self.frame += 1
        self.input_handler.update()
        if self.flash_timer > 0:
            self.flash_timer -= 1

        frame_input = FrameInput(self.input_handler.get_movement_vector(), FRAME_TIME)
        for event in self.sim.tick(frame_input):
            kind = event['type']
            if kind == SHAKE_OFFSET:
                self.renderer.set_shake(event['x'], event['y'])
            elif kind == HEALTH_GAINED:
                self._flash('+1 HEALTH', NEON_GREEN)
            elif kind == PICKUP_COLLECTED:
                self._flash(f"+1  ({event['score']})", NEON_YELLOW)
            elif kind == PLAYER_HIT:
                self._flash('HIT!', NEON_RED)

    def _flash(self, text: str, color: int, frames: int = 45):
        self.flash_text = text
        self.flash_color = color
        self.flash_timer = frames

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> str:
        r = self.renderer
        r.begin_frame()

        if self.sim.app_state == AppState.MENU:
            self._render_title()
        else:
            self._render_playfield()
            self._render_ui()

        return r.end_frame()

    def _render_title(self):
        r = self.renderer
        top = max(0, r.height // 2 - 6)
        for i, line in enumerate(TITLE_ART):
            r.put_centered(top + i, line, NEON_CYAN)

        y = top + len(TITLE_ART) + 2
        if self.sim.last_score is not None:
            r.put_centered(y, f'LAST SCORE: {self.sim.last_score}', NEON_YELLOW)
        # Blink prompt at ~2Hz
        if (self.frame // 30) % 2 == 0:
            r.put_centered(y + 2, 'PRESS SPACE TO START', WHITE)
        r.put_centered(y + 4, 'WASD/ARROWS move   Q quit', GRAY_MED)

    def _render_playfield(self):
        r = self.renderer
        for snap in self.sim.snapshot():
            char, color = ROLE_GLYPHS[snap.role]
            if snap.archetype == ARCHETYPE_WRAPPER:
                char, color = WRAPPER_GLYPH
            # Player blinks while invincible
            if snap.role == 'player' and self.sim.invincible and (self.frame // 4) % 2:
                color = GRAY_DARK
            r.put_world(snap.x, snap.y, char, color)

    def _render_ui(self):
        r = self.renderer
        y = r.game_height
        r.put_string(0, y, '-' * r.width, GRAY_DARK)

        hearts = '♥' * max(0, self.sim.health)
        empty = '·' * max(0, self.sim.max_health - self.sim.health)
        r.put_string(1, y + 1, f'HP {hearts}', NEON_RED)
        r.put_string(4 + len(hearts), y + 1, empty, GRAY_DARK)
        r.put_string(16, y + 1, f'SCORE {self.sim.score}', NEON_YELLOW)
        r.put_string(30, y + 1, f'PURSUERS {self.sim.pursuer_count()}', NEON_ORANGE)

        if self.flash_timer > 0:
            r.put_centered(1, self.flash_text, self.flash_color)

        if r.show_fps:
            fps = f'{r.current_fps:.0f} FPS'
            r.put_string(r.width - len(fps) - 1, y + 1, fps, GRAY_MED)

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def handle_input(self):
        """Drain all pending input from the terminal."""
        key = self.term.inkey(timeout=0)
        while key:
            self.input_handler.process_key(key)
            key = self.term.inkey(timeout=0)

        if self.input_handler.consume_quit():
            self.running = False
        if self.input_handler.consume_toggle_fps():
            self.renderer.show_fps = not self.renderer.show_fps
        if self.input_handler.consume_start() and self.sim.app_state == AppState.MENU:
            self.start_game()


# =============================================================================
# MAIN LOOP
# =============================================================================

def positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f'must be positive, got {value}')
    return number


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Terminal survive-and-collect arcade game')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible runs')
    parser.add_argument('--width', type=positive_float, default=None,
                        help='Fixed play-area width in world units (default: follow the terminal)')
    parser.add_argument('--height', type=positive_float, default=None,
                        help='Fixed play-area height in world units (default: follow the terminal)')
    parser.add_argument('--log-file', default=None, help='Write logs to this file')
    parser.add_argument('--debug', action='store_true', help='Log at DEBUG level')
    return parser.parse_args(argv)


def setup_logging(log_file, debug: bool):
    """The terminal is fullscreen, so logs only go to a file when asked."""
    if log_file is None:
        logging.getLogger().addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


def main(argv=None):
    """Entry point. Sets up terminal and runs the 60 FPS game loop."""
    args = parse_args(argv)
    setup_logging(args.log_file, args.debug)

    term = Terminal()
    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    try:
        game = GameState(term, GameConfig(seed=args.seed), args.width, args.height)
    except SimulationError as exc:
        logger.error('could not start: %s', exc)
        print(f'ERROR: {exc}')
        sys.exit(1)

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        last_time = time.perf_counter()
        accumulator = 0.0
        fps_timer = 0.0
        fps_frame_count = 0

        print(term.home + term.clear, end='', flush=True)

        while game.running:
            now = time.perf_counter()
            delta = now - last_time
            last_time = now

            # Clamp delta to prevent spiral of death
            delta = min(delta, FRAME_TIME * 5)
            accumulator += delta
            fps_timer += delta

            game.check_resize()
            game.handle_input()

            ticks = 0
            while accumulator >= FRAME_TIME and ticks < 4:
                game.update()
                accumulator -= FRAME_TIME
                ticks += 1
                fps_frame_count += 1

            print(game.render(), end='', flush=True)

            if fps_timer >= 0.5:
                game.renderer.current_fps = fps_frame_count / fps_timer
                fps_frame_count = 0
                fps_timer = 0.0

            elapsed = time.perf_counter() - now
            sleep_time = FRAME_TIME - elapsed
            if sleep_time > 0.001:
                time.sleep(sleep_time * 0.9)

        print(term.normal, end='', flush=True)

    if game.sim.last_score is not None:
        print(f'Last score: {game.sim.last_score}')


if __name__ == '__main__':
    main()
