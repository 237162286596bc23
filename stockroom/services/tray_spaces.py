"""Tray space padding - placeholder cells for the empty slots of a column."""
import logging
import weakref
from typing import List, Optional, Union

from stockroom.layers.column import Column
from stockroom.layers.tray import Tray

logger = logging.getLogger(__name__)


class TraySpace:
    """
    An empty slot in a column. Never persisted.

    Spaces compare by identity so they can key a selection map; the cache
    hands out the same instance for a slot for as long as it stays empty.
    """
    __slots__ = ("index", "_column_ref")

    def __init__(self, index: int, parent_column: Column):
        self.index = index
        self._column_ref = weakref.ref(parent_column)

    def __repr__(self):
        return f"TraySpace(index={self.index})"

    @property
    def parent_column(self) -> Optional[Column]:
        return self._column_ref()


TrayCell = Union[Tray, TraySpace]


class TraySpaceCache:
    """
    Per-view cache of the spaces padding each column up to its capacity.

    Columns are held weakly so dropping a column from the tree also drops its
    spaces; ``purge`` releases them earlier.
    """

    def __init__(self):
        self._spaces: "weakref.WeakKeyDictionary[Column, List[TraySpace]]" = weakref.WeakKeyDictionary()

    def __len__(self):
        return len(self._spaces)

    def get_padded_cells(self, column: Column, default_padding: int = 1) -> List[TrayCell]:
        """
        Return the column's trays followed by enough spaces to reach its capacity.

        An uncapped column gets ``default_padding`` spaces. Cached spaces whose
        slot is still empty are reused, and new ones are only allocated for slots
        that have no cached space yet.
        """
        trays = column.trays
        tray_count = len(trays)
        if column.max_height:
            missing = max(0, column.max_height - tray_count)
        else:
            missing = default_padding
        wanted = range(tray_count, tray_count + missing)

        existing = self._spaces.get(column)
        if existing is None:
            spaces = [TraySpace(index, column) for index in wanted]
        elif len(existing) == missing and all(space.index in wanted for space in existing):
            spaces = existing
        else:
            spaces = [space for space in existing if space.index in wanted]
            have = {space.index for space in spaces}
            spaces.extend(TraySpace(index, column) for index in wanted if index not in have)
            spaces.sort(key=lambda space: space.index)

        self._spaces[column] = spaces
        return list(trays) + spaces

    def purge(self, column: Optional[Column] = None) -> None:
        """Drop the cached spaces of one column, or of every column."""
        if column is not None:
            self._spaces.pop(column, None)
        else:
            logger.debug("Purging tray spaces of %d columns", len(self._spaces))
            self._spaces.clear()
