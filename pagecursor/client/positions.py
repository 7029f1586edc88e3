""" Position cursors: opaque tokens that point at a row offset in an ordered set """

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from typing import Optional, NamedTuple

from pagecursor import exc
from pagecursor.typing import Element, PaginationParams, CursorToken
from pagecursor.page.direction import Direction, CURSOR_KEYS

from .base import PageResult
from .settings import ClientSettings


# Parameters that reference Clients understand
KNOWN_PARAMS = frozenset({'size', *CURSOR_KEYS})


class PositionCursorData(NamedTuple):
    """ Cursor data for a position cursor """
    # Row offset into the ordered set
    pos: int

    def serialize(self) -> dict:
        return {'pos': self.pos}

    def encode(self) -> CursorToken:
        return encode_opaque_cursor('pos', self.serialize())

    @classmethod
    def decode(cls, cursor: CursorToken) -> PositionCursorData:
        """ Decode a cursor token

        Raises:
            exc.InvalidCursorError: all sorts of errors related to bad cursor
        """
        try:
            prefix, data = decode_opaque_cursor(cursor)
            if prefix != 'pos':
                raise ValueError(prefix)
            value = cls(**data)
            if isinstance(value.pos, bool) or not isinstance(value.pos, int) or value.pos < 0:
                raise ValueError(value.pos)
        except Exception as e:
            raise exc.InvalidCursorError(cursor) from e

        return value


@dataclass(frozen=True)
class Window:
    """ The slice of the set to fetch for one page """
    # Page size: the number of elements to return
    size: int

    # Pagination direction
    direction: Direction

    # Row offset to start at
    offset: int

    # Number of rows to fetch. Going forward, it includes one look-ahead row to check if there's a next page
    limit: int

    # The cursor position: the start (when going forward) or the end (when going backward) of the page
    pos: int

    def make_page(self, rows: list[Element]) -> PageResult:
        """ Turn fetched rows into a page: drop the look-ahead row, generate cursors

        Note that `rows` is modified in place
        """
        if self.direction == Direction.AFTER:
            # Do we have a next page?
            # We always load one more row to check if there's a next page
            has_next_page = len(rows) > self.size

            # We've loaded one extra row. Now remove it.
            if has_next_page:
                del rows[self.size:]

            return PageResult(
                data=rows,
                before=_position_cursor(self.pos),
                after=PositionCursorData(self.pos + self.size).encode() if has_next_page else None,
            )
        else:
            return PageResult(
                data=rows,
                before=_position_cursor(self.offset),
                after=PositionCursorData(self.pos).encode(),
            )


def plan_window(params: PaginationParams, settings: ClientSettings) -> Window:
    """ Decide which rows to fetch for the page described by `params`

    Raises:
        exc.QueryError: unknown parameters, invalid size, both cursors used
        exc.InvalidCursorError: the cursor can't be decoded
    """
    # Only known parameters
    unknown = set(params) - KNOWN_PARAMS
    if unknown:
        raise exc.QueryError(f'Unsupported pagination parameters: {sorted(unknown)}')

    # Size
    size = params.get('size')
    if size is not None and (isinstance(size, bool) or not isinstance(size, int) or size <= 0):
        raise exc.QueryError(f'"size" must be a positive integer, got {size!r}')
    size = settings.get_final_size(size)

    # Cursors
    before: Optional[str] = params.get('before')
    after: Optional[str] = params.get('after')
    if before is not None and after is not None:
        raise exc.QueryError("Choose a pagination direction and use either 'before' or 'after'.")

    if before is not None:
        pos = PositionCursorData.decode(before).pos
        offset = max(pos - size, 0)
        return Window(size=size, direction=Direction.BEFORE, offset=offset, limit=pos - offset, pos=pos)
    else:
        pos = PositionCursorData.decode(after).pos if after is not None else 0
        return Window(size=size, direction=Direction.AFTER, offset=pos, limit=size + 1, pos=pos)


def encode_opaque_cursor(prefix: str, data: dict) -> str:
    """ Encode a dict of data as an opaque cursor. Give it a nice prefix so that the user sees what's up """
    return prefix + ':' + base64.b85encode(json.dumps(data).encode()).decode()


def decode_opaque_cursor(data: str) -> tuple[str, dict]:
    """ Decode an opaque cursor into a (prefix, data dict) tuple

    Raises:
        Exception: all sorts of errors related to bad cursor
    """
    prefix, data_encoded = data.split(':', 1)  # ValueError
    decoded = json.loads(base64.b85decode(data_encoded))  # ValueError, json.decoder.JSONDecodeError
    if not isinstance(decoded, dict):
        raise TypeError(decoded)
    return prefix, decoded


def _position_cursor(pos: int) -> Optional[CursorToken]:
    """ A cursor to `pos`, unless it's the very beginning of the set """
    return PositionCursorData(pos).encode() if pos > 0 else None
