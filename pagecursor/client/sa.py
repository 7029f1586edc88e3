""" SAClient: a reference Client that paginates SqlAlchemy statements """

from __future__ import annotations

import logging
from typing import Any, Optional

import sqlalchemy as sa

from pagecursor import exc
from pagecursor.query import Expression, MapStatement, MapElements, unwrap

from .base import Client, PageResult
from .positions import plan_window
from .settings import ClientSettings


logger = logging.getLogger(__name__)


class SAClient(Client):
    """ A Client that executes page queries against a database

    The set to paginate over is an SqlAlchemy `Select` statement, a `Table`, or a declarative model class.
    Cursors are position cursors: make sure the set is sorted by a unique key, otherwise pages may overlap.

    Example:
        client = SAClient(connection)
        stmt = sa.select(Item.id, Item.title).order_by(Item.id)
        for rows in PageCursor(client, stmt, {'size': 10}):
            ...
    """

    def __init__(self, connection: sa.engine.Connection, settings: Optional[ClientSettings] = None):
        self.connection = connection
        self.settings = settings or ClientSettings()

    def query(self, expr: Expression) -> PageResult:
        """ Execute a page query

        Raises:
            exc.QueryError: the expression or its parameters are malformed
            sa.exc.SQLAlchemyError: database errors, as is
        """
        paginate, wrappers = unwrap(expr)
        window = plan_window(paginate.params, self.settings)

        # Statement
        stmt = select_for_set(paginate.set)
        for wrapper in wrappers:
            if isinstance(wrapper, MapStatement):
                stmt = wrapper.func(stmt)

        # Paginate
        stmt = isolate_window(stmt)
        stmt = stmt.offset(window.offset).limit(window.limit)

        # Execute
        logger.debug('Executing page query: %s', stmt)
        rows = [dict(row._mapping) for row in self.connection.execute(stmt)]
        page = window.make_page(rows)

        # Map elements
        data = page.data
        for wrapper in wrappers:
            if isinstance(wrapper, MapElements):
                data = [wrapper.func(element) for element in data]

        return page._replace(data=data)


def select_for_set(set: Any) -> sa.sql.Select:
    """ Get a SELECT statement for a set: a Select, a Table, or a declarative model

    Raises:
        exc.QueryError: not something we can select from
    """
    if isinstance(set, sa.sql.Select):
        return set
    elif isinstance(set, sa.Table):
        return sa.select(set)
    elif isinstance(getattr(set, '__table__', None), sa.Table):
        return sa.select(set.__table__)
    else:
        raise exc.QueryError(f'Cannot paginate over {set!r}: expected a Select, a Table, or a model')


def isolate_window(stmt: sa.sql.Select) -> sa.sql.Select:
    """ Make sure that pagination stays within the set's own LIMIT/OFFSET

    OFFSET/LIMIT applied to a statement replace the ones it already has.
    A limited statement is therefore wrapped into a subquery, and the ordering is carried over as a row number:

        SELECT id, title FROM (
            SELECT id, title, row_number() OVER (ORDER BY id) AS __set_row_n
            FROM items ORDER BY id LIMIT 3
        ) ORDER BY __set_row_n
    """
    # No LIMIT/OFFSET: paginate as is
    if stmt._limit_clause is None and stmt._offset_clause is None:
        return stmt

    row_n = sa.func.row_number().over(order_by=stmt._order_by_clauses or None).label(ROW_N_LABEL)
    subquery = stmt.add_columns(row_n).subquery()

    return (
        sa.select(*(column for column in subquery.c if column.key != ROW_N_LABEL))
        .order_by(subquery.c[ROW_N_LABEL])
    )


# Label for the row number column that keeps the set's ordering within a subquery
ROW_N_LABEL = '__set_row_n'
