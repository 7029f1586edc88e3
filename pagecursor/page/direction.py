from __future__ import annotations

from enum import Enum


class Direction(Enum):
    """ Pagination direction: the two cursor keys """
    BEFORE = 'before'
    AFTER = 'after'

    @property
    def key(self) -> str:
        """ The name of the pagination parameter that carries a cursor in this direction """
        return self.value


# Names of pagination parameters that carry cursors.
# At most one of them can be present in a parameter mapping.
CURSOR_KEYS: frozenset[str] = frozenset(direction.key for direction in Direction)
