""" Pagination parameters: frozen mappings with at most one cursor key """

from __future__ import annotations

from collections import abc
from types import MappingProxyType
from typing import Any, Optional

from pagecursor import exc
from pagecursor.typing import PaginationParams

from .direction import CURSOR_KEYS


def freeze_params(params: Optional[PaginationParams]) -> abc.Mapping[str, Any]:
    """ Make a read-only copy of pagination parameters

    Raises:
        exc.PaginationParamsError: both "before" and "after" are present
    """
    params = dict(params or {})
    check_single_cursor_key(params)
    return MappingProxyType(params)


def merge_params(params: PaginationParams, new_params: PaginationParams) -> abc.Mapping[str, Any]:
    """ Merge `new_params` into a copy of `params`, return a read-only mapping

    If `new_params` has a cursor key, then both cursors are first removed from the copy:
    a cursor in one direction always replaces a stale cursor in the other direction.
    Other keys: the last write wins.

    Example:
        merge_params({'size': 2, 'before': 'c0'}, {'after': 'c1'})
        -> {'size': 2, 'after': 'c1'}

    Raises:
        exc.PaginationParamsError: `new_params` mentions both "before" and "after"
    """
    check_single_cursor_key(new_params)

    merged = dict(params)

    # Remove previous cursor
    if CURSOR_KEYS & new_params.keys():
        for key in CURSOR_KEYS:
            merged.pop(key, None)

    # Update params
    merged.update(new_params)
    return MappingProxyType(merged)


def check_single_cursor_key(params: PaginationParams):
    """ Make sure that at most one cursor key is used """
    if len(CURSOR_KEYS & params.keys()) > 1:
        raise exc.PaginationParamsError(dict(params))
