from types import SimpleNamespace

import pytest

from torus_chase.config import GameConfig
from torus_chase.engine import UI_ROWS
from torus_chase.main import GameState, parse_args, play_area_for, world_bounds_for


def _fake_term(width=80, height=24):
    return SimpleNamespace(
        width=width, height=height, normal='<n>', clear='<clr>',
        move_xy=lambda x, y: f'<{x},{y}>',
        color=lambda c: f'<c{c}>',
    )


def test_parse_args_defaults_follow_the_terminal():
    args = parse_args([])
    assert args.width is None
    assert args.height is None
    assert args.seed is None
    assert not args.debug


def test_parse_args_play_area_flags():
    args = parse_args(['--width', '1600', '--height', '900', '--seed', '7'])
    assert (args.width, args.height, args.seed) == (1600.0, 900.0, 7)


@pytest.mark.parametrize('argv', [
    ['--width', '0'],
    ['--height', '-5'],
    ['--width', 'wide'],
])
def test_parse_args_rejects_bad_sizes(argv):
    with pytest.raises(SystemExit):
        parse_args(argv)


def test_play_area_follows_terminal_cells():
    assert world_bounds_for(80, 24) == (80 * 16.0, (24 - UI_ROWS) * 32.0)
    assert play_area_for(80, 24) == world_bounds_for(80, 24)


def test_play_area_pins_one_axis_at_a_time():
    assert play_area_for(80, 24, width=1000.0) == (1000.0, (24 - UI_ROWS) * 32.0)
    assert play_area_for(80, 24, height=500.0) == (80 * 16.0, 500.0)


def test_game_uses_the_requested_play_area():
    game = GameState(_fake_term(), GameConfig(seed=1), 1600.0, 900.0)
    assert (game.sim.width, game.sim.height) == (1600.0, 900.0)
    assert (game.renderer.world_width, game.renderer.world_height) == (1600.0, 900.0)


def test_pinned_play_area_survives_terminal_resize():
    term = _fake_term()
    game = GameState(term, GameConfig(seed=1), 1600.0, 900.0)

    term.width, term.height = 120, 40
    game.check_resize()

    assert game.renderer.width == 120
    assert (game.sim.width, game.sim.height) == (1600.0, 900.0)
    # Origin still lands in the middle of the larger game area
    assert game.renderer.world_to_cell(0.0, 0.0) == (60, (40 - UI_ROWS) // 2)


def test_unpinned_play_area_follows_terminal_resize():
    term = _fake_term()
    game = GameState(term, GameConfig(seed=1))

    term.width, term.height = 100, 30
    game.check_resize()

    assert (game.sim.width, game.sim.height) == world_bounds_for(100, 30)
