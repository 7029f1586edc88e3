""" Page state: the data that a cursor gets after it's loaded """

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from sqlalchemy.util import symbol

from pagecursor import exc
from pagecursor.typing import Element, OptionalCursorToken


@dataclass(frozen=True)
class PageState:
    """ A loaded page: elements, and cursors to the neighboring pages """
    # Elements of the page, in the order the remote engine returned them
    data: tuple[Element, ...]

    # Cursor to the page before this one. `None` if this is the first page.
    before: OptionalCursorToken

    # Cursor to the page after this one. `None` if this is the last page.
    after: OptionalCursorToken


# Marker for values not yet set
NOTSET = symbol('NOTSET')


T = TypeVar('T')


class LoadCell(Generic[T]):
    """ A cell that can be set exactly once

    Holds the lazily loaded value. Empty cells report `is_set=False`; there is no way back once a value is in.

    Example:
        cell = LoadCell()
        cell.is_set  # -> False
        cell.set(PageState((), None, None))
        cell.get()  # -> PageState(...)
    """
    __slots__ = '_value',

    _value: Union[T, symbol]

    def __init__(self):
        self._value = NOTSET

    @property
    def is_set(self) -> bool:
        return self._value is not NOTSET

    def get(self) -> T:
        """ Get the value

        Raises:
            LookupError: the cell is still empty
        """
        if self._value is NOTSET:
            raise LookupError('The cell is empty')
        return self._value  # type: ignore[return-value]

    def get_or_none(self) -> Union[T, None]:
        """ Get the value, or `None` when empty """
        return None if self._value is NOTSET else self._value  # type: ignore[return-value]

    def set(self, value: T):
        """ Put a value into the cell

        Raises:
            exc.PageAlreadyLoadedError: the cell has already been set
        """
        if self._value is not NOTSET:
            raise exc.PageAlreadyLoadedError('The page has already been loaded')
        self._value = value

    def __eq__(self, other):
        if not isinstance(other, LoadCell):
            return NotImplemented
        return self.is_set == other.is_set and self.get_or_none() == other.get_or_none()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self):
        return f'{type(self).__name__}({self._value!r})'
