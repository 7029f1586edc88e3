""" Expressions: the page query, and the transforms that wrap it """

from __future__ import annotations

from collections import abc
from dataclasses import dataclass
from typing import Any

from pagecursor.typing import Element, PaginationParams


class Expression:
    """ Base class for query expressions understood by a Client

    Expressions are immutable descriptions. A Client evaluates them.
    """
    __slots__ = ()

    def map_statement(self, func: abc.Callable[[Any], Any]) -> MapStatement:
        """ Wrap this expression with an SQL-level transform

        Example:
            page.map_statement(lambda stmt: stmt.with_only_columns(Item.id))
        """
        return MapStatement(self, func)

    def map_elements(self, func: abc.Callable[[Element], Element]) -> MapElements:
        """ Wrap this expression with a per-element transform evaluated by the engine

        Example:
            page.map_elements(lambda row: row['id'])
        """
        return MapElements(self, func)


@dataclass(frozen=True)
class Paginate(Expression):
    """ The page query: one page of a set, as chosen by pagination parameters """
    # The set to paginate over
    set: Any

    # Pagination parameters: "size", "before", "after"
    params: PaginationParams


@dataclass(frozen=True)
class MapStatement(Expression):
    """ Transform the set's SELECT statement before it is paginated

    The function receives an `sa.sql.Select` and must return a new one.
    It has to keep exactly one row per element: otherwise position cursors would drift.
    """
    source: Expression
    func: abc.Callable[[Any], Any]


@dataclass(frozen=True)
class MapElements(Expression):
    """ Transform every element of the page. Applied by the engine, before the page is returned """
    source: Expression
    func: abc.Callable[[Element], Element]
