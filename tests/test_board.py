"""Tests for board geometry helpers."""

from duelboard.services.game.engine.board import (
    board_max,
    board_min,
    cardinal_neighbors,
    chebyshev_ring,
    clamp,
    generate_tiles,
    is_in_bounds,
    step,
    tile_at,
)


class TestBounds:
    """Test the coordinate range of the board."""

    def test_eleven_square_board_runs_from_minus_five_to_five(self):
        assert board_min(11) == -5
        assert board_max(11) == 5

    def test_edges_are_in_bounds(self):
        assert is_in_bounds(-5, -5)
        assert is_in_bounds(5, 5)
        assert is_in_bounds(0, 0)

    def test_past_the_edge_is_out_of_bounds(self):
        assert not is_in_bounds(6, 0)
        assert not is_in_bounds(0, -6)

    def test_smaller_board(self):
        assert is_in_bounds(1, -1, board_size=3)
        assert not is_in_bounds(2, 0, board_size=3)

    def test_clamp(self):
        assert clamp(9) == 5
        assert clamp(-9) == -5
        assert clamp(3) == 3


class TestNeighbourhoods:
    """Test cardinal and Chebyshev neighbourhoods."""

    def test_step_directions(self):
        assert step(0, 0, "up") == (0, 1)
        assert step(0, 0, "down") == (0, -1)
        assert step(0, 0, "left") == (-1, 0)
        assert step(0, 0, "right") == (1, 0)

    def test_step_does_not_clamp(self):
        assert step(5, 5, "up") == (5, 6)

    def test_cardinal_neighbors_in_the_middle(self):
        assert sorted(cardinal_neighbors(0, 0)) == [(-1, 0), (0, -1), (0, 1), (1, 0)]

    def test_cardinal_neighbors_in_a_corner(self):
        assert sorted(cardinal_neighbors(5, 5)) == [(4, 5), (5, 4)]

    def test_chebyshev_ring_has_eight_squares(self):
        ring = chebyshev_ring(0, 0)
        assert len(ring) == 8
        assert (0, 0) not in ring
        assert (1, 1) in ring and (-1, -1) in ring

    def test_chebyshev_ring_on_the_edge(self):
        """A leader on its home edge has five summon squares."""
        ring = chebyshev_ring(0, -5)
        assert sorted(ring) == [(-1, -5), (-1, -4), (0, -4), (1, -5), (1, -4)]

    def test_chebyshev_ring_in_a_corner(self):
        assert len(chebyshev_ring(-5, -5)) == 3


class TestTiles:
    """Test tile generation and lookup."""

    def test_one_tile_per_square(self):
        tiles = generate_tiles(11, seed=1)
        assert len(tiles) == 121
        assert len({(t.position.x, t.position.y) for t in tiles}) == 121

    def test_same_seed_same_layout(self):
        first = [t.terrain.type for t in generate_tiles(11, seed=42)]
        second = [t.terrain.type for t in generate_tiles(11, seed=42)]
        assert first == second

    def test_tile_at(self):
        tiles = generate_tiles(11, seed=1)
        tile = tile_at(tiles, 2, -3)
        assert tile is not None
        assert (tile.position.x, tile.position.y) == (2, -3)

    def test_tile_at_off_board(self):
        assert tile_at(generate_tiles(11, seed=1), 6, 0) is None
