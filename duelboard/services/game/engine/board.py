"""Board geometry: bounds, tile lookup and neighbourhoods.

The board is an N x N grid centred on the origin, so with N=11 both axes run
over [-5, 5]. Every function here is pure.
"""

import random

from duelboard.schemas.game_engine import Position, Terrain, TerrainType, Tile

BOARD_SIZE = 11
TILE_Z = 0.0
SUMMON_Z = 0.06  # Height at which pieces rest on a tile
PLAYER_BASE_Z = 0.1

DIRECTION_OFFSETS: dict[str, tuple[int, int]] = {
    "up": (0, 1),
    "down": (0, -1),
    "left": (-1, 0),
    "right": (1, 0),
}

TERRAINS: list[Terrain] = [
    Terrain(type=TerrainType.SOGEN, name="Sogen"),
    Terrain(type=TerrainType.YAMI, name="Yami"),
    Terrain(type=TerrainType.LABYRINTH, name="Labyrinth"),
    Terrain(type=TerrainType.NORMAL, name="Normal"),
    Terrain(type=TerrainType.UMI, name="Umi"),
    Terrain(type=TerrainType.CRUSH, name="Crush"),
    Terrain(type=TerrainType.MOUNTAIN, name="Mountain"),
    Terrain(type=TerrainType.WASTELAND, name="Wasteland"),
    Terrain(type=TerrainType.FOREST, name="Forest"),
    Terrain(type=TerrainType.TOON, name="Toon"),
]


def board_max(board_size: int = BOARD_SIZE) -> int:
    """Largest coordinate on either axis."""
    return (board_size - 1) // 2


def board_min(board_size: int = BOARD_SIZE) -> int:
    """Smallest coordinate on either axis."""
    return -board_max(board_size)


def is_in_bounds(x: int, y: int, board_size: int = BOARD_SIZE) -> bool:
    low, high = board_min(board_size), board_max(board_size)
    return low <= x <= high and low <= y <= high


def clamp(value: int, board_size: int = BOARD_SIZE) -> int:
    return max(board_min(board_size), min(board_max(board_size), value))


def step(x: int, y: int, direction: str) -> tuple[int, int]:
    """Coordinate one square away in the given direction (unclamped)."""
    dx, dy = DIRECTION_OFFSETS[direction]
    return x + dx, y + dy


def tile_at(tiles: list[Tile], x: int, y: int) -> Tile | None:
    return next((t for t in tiles if t.position.x == x and t.position.y == y), None)


def cardinal_neighbors(x: int, y: int, board_size: int = BOARD_SIZE) -> list[tuple[int, int]]:
    """The in-bounds N, S, E, W neighbours of a square."""
    neighbors = []
    for dx, dy in ((0, 1), (0, -1), (1, 0), (-1, 0)):
        nx, ny = x + dx, y + dy
        if is_in_bounds(nx, ny, board_size):
            neighbors.append((nx, ny))
    return neighbors


def chebyshev_ring(x: int, y: int, board_size: int = BOARD_SIZE) -> list[tuple[int, int]]:
    """The in-bounds squares at Chebyshev distance 1 (diagonals included)."""
    ring = []
    for nx in range(x - 1, x + 2):
        for ny in range(y - 1, y + 2):
            if nx == x and ny == y:
                continue
            if is_in_bounds(nx, ny, board_size):
                ring.append((nx, ny))
    return ring


def generate_tiles(board_size: int = BOARD_SIZE, seed: int | None = None) -> list[Tile]:
    """Lay out one tile per square with a random terrain.

    Args:
        board_size: Squares per side.
        seed: Optional seed so a board can be reproduced.

    Returns:
        Tiles in column-major order, starting at the bottom-left corner.
    """
    rng = random.Random(seed)
    low, high = board_min(board_size), board_max(board_size)
    tiles: list[Tile] = []
    for x in range(low, high + 1):
        for y in range(low, high + 1):
            tiles.append(
                Tile(
                    terrain=rng.choice(TERRAINS),
                    position=Position(x=x, y=y, z=TILE_Z),
                )
            )
    return tiles
