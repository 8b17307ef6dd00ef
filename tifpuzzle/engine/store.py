"""
Piece Store Module - Canonical tile list and its mutations.

The store performs no legality checks beyond id existence. Bounds and
correctness are decided by the geometry resolver and the drag controller.
"""

import logging
from typing import Dict, Iterator, List, Optional

from .piece import Point, Tile

logger = logging.getLogger(__name__)


class PieceStore:
    """
    Ordered collection of tiles keyed by id.

    Iteration order is creation order, which is also the order the
    auto-solve sequencer walks unplaced tiles in.
    """

    def __init__(self, tiles: Optional[List[Tile]] = None):
        self._tiles: List[Tile] = []
        self._index: Dict[int, Tile] = {}
        if tiles:
            self.replace_all(tiles)

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def __contains__(self, tile_id: int) -> bool:
        return tile_id in self._index

    def get(self, tile_id: int) -> Tile:
        """
        Get tile by id.

        Raises:
            KeyError: If no tile has this id
        """
        try:
            return self._index[tile_id]
        except KeyError:
            raise KeyError(f"Unknown tile id: {tile_id}") from None

    def all(self) -> List[Tile]:
        """Snapshot of all tiles in store order."""
        return list(self._tiles)

    def unplaced(self) -> List[Tile]:
        """Tiles not yet committed to their cell, in store order."""
        return [t for t in self._tiles if not t.is_placed]

    def all_placed(self) -> bool:
        """True if the store holds tiles and every one is placed."""
        return bool(self._tiles) and all(t.is_placed for t in self._tiles)

    def max_z_index(self) -> float:
        """Highest z-index in the store (0 when empty)."""
        return max((t.z_index for t in self._tiles), default=0.0)

    def set_position(self, tile_id: int, point: Point) -> Tile:
        tile = self.get(tile_id)
        tile.position = point
        return tile

    def set_rotation(self, tile_id: int, rotation: float) -> Tile:
        tile = self.get(tile_id)
        tile.rotation = rotation
        return tile

    def set_placed(self, tile_id: int) -> Tile:
        tile = self.get(tile_id)
        tile.is_placed = True
        return tile

    def bump_z_index(self, tile_id: int) -> Tile:
        """Raise a tile above every other tile (max + 1)."""
        tile = self.get(tile_id)
        tile.z_index = self.max_z_index() + 1
        return tile

    def replace_all(self, tiles: List[Tile]) -> None:
        """Replace the whole tile list."""
        self._tiles = list(tiles)
        self._index = {t.id: t for t in self._tiles}
        logger.debug(f"Store replaced: {len(self._tiles)} tiles")
