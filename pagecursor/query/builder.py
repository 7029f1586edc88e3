""" Query builder: make page queries, wrap them with transforms, take them apart """

from __future__ import annotations

from typing import Any

from pagecursor import exc
from pagecursor.typing import PaginationParams, ServerMap

from .expressions import Expression, Paginate, MapStatement, MapElements


def paginate(set: Any, params: PaginationParams) -> Paginate:
    """ Make a page query for a set """
    return Paginate(set, dict(params))


def wrap(expr: Expression, server_map: ServerMap) -> Expression:
    """ Wrap a query with a server-side transform

    The transform receives the query as its argument. Its result replaces the query.

    Raises:
        exc.QueryError: the transform did not return an expression
    """
    wrapped = server_map(expr)

    if not isinstance(wrapped, Expression):
        raise exc.QueryError(f'The server map has to return an Expression, got {type(wrapped).__name__}')

    return wrapped


def unwrap(expr: Expression) -> tuple[Paginate, list[Expression]]:
    """ Take a query apart: get to the Paginate expression, collect wrappers

    Returns:
        paginate: the innermost page query
        wrappers: transform expressions, innermost first

    Raises:
        exc.QueryError: unsupported expression
    """
    wrappers: list[Expression] = []

    while not isinstance(expr, Paginate):
        if isinstance(expr, (MapStatement, MapElements)):
            wrappers.append(expr)
            expr = expr.source
        else:
            raise exc.QueryError(f'Unsupported expression: {expr!r}')

    wrappers.reverse()
    return expr, wrappers
