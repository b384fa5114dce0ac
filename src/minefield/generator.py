"""
Mine generation for the minefield engine.

Mines are placed by sequential sampling without replacement over a
shrinking pool of spaces. Given the same seed, origin, dimensions and
mine count the layout is always identical, which is what lets a saved
game or a test reproduce a board exactly.
"""
import logging
import random
from typing import Optional, Set

import numpy as np

from .space import Space

logger = logging.getLogger(__name__)


def random_seed(rng: random.Random) -> int:
    """Draw a fresh 64-bit seed from a random source."""
    return rng.getrandbits(64)


def exclusion_zone(
    width: int, height: int, origin: Optional[Space]
) -> Set[Space]:
    """
    Get the spaces that must stay mine-free around a first click.

    Args:
        width: Board width.
        height: Board height.
        origin: Space clicked, or None when no space is protected.

    Returns:
        The in-bounds 3x3 neighborhood of origin (4 at a corner, 6 on an
        edge, 9 in the interior), or an empty set without an origin.
    """
    if origin is None:
        return set()
    zone = set()
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            space = origin.offset(dx, dy)
            if 0 <= space.x < width and 0 <= space.y < height:
                zone.add(space)
    return zone


def generate_mines(
    width: int,
    height: int,
    mine_count: int,
    seed: int,
    origin: Optional[Space] = None,
) -> np.ndarray:
    """
    Build a mine grid.

    For mine i a slot index is drawn uniformly from
    ``[0, pool_size - i)``. The grid is then walked in row-major order,
    counting only spaces outside the exclusion zone that hold no mine
    yet, and the mine lands on the space whose count matches the slot.

    Args:
        width: Board width.
        height: Board height.
        mine_count: Number of mines to place.
        seed: Seed for the deterministic generator.
        origin: Space whose neighborhood stays mine-free, if any.

    Returns:
        Boolean array of shape (height, width), True where a mine is.

    Raises:
        ValueError: If the pool cannot hold that many mines.
    """
    excluded = exclusion_zone(width, height, origin)
    pool_size = width * height - len(excluded)
    if mine_count < 0 or mine_count > pool_size:
        raise ValueError(
            f"Cannot place {mine_count} mines in {pool_size} free spaces"
        )

    rng = random.Random(seed)
    slots = [rng.randrange(pool_size - i) for i in range(mine_count)]

    mines = np.zeros((height, width), dtype=bool)
    for slot in slots:
        _place_at_slot(mines, excluded, slot)

    logger.debug(
        "Generated %d mines on %dx%d board (seed=%d, origin=%s)",
        mine_count, width, height, seed, origin,
    )
    return mines


def _place_at_slot(mines: np.ndarray, excluded: Set[Space], slot: int) -> None:
    """Place one mine on the free space numbered ``slot`` in row-major order."""
    height, width = mines.shape
    position = 0
    for y in range(height):
        for x in range(width):
            if Space(x, y) in excluded or mines[y, x]:
                continue
            if position == slot:
                mines[y, x] = True
                return
            position += 1
