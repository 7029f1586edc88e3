import pytest
import sqlalchemy as sa
import sqlalchemy.orm

from pagecursor import PageCursor, SAClient, ClientSettings, exc
from pagecursor.client.sa import select_for_set
from pagecursor.testing import QueryCounter, QueryLogger, created_tables, insert

from .util.models import metadata, items, item_row, ids


def test_sa_pagination(connection: sa.engine.Connection):
    """ Test: paginate over a table, forward and backward """
    def main():
        client = SAClient(connection)
        page = PageCursor(client, sa.select(items).order_by(items.c.id), {'size': 2})

        # Test: forward
        with QueryCounter(connection.engine) as counter:
            pages = list(page)

        assert ids(pages) == [[1, 2], [3, 4], [5]]
        assert pages[0][0] == {'id': 1, 'title': 'item-1'}
        assert counter.n == 3  # one statement per page

        # Test: backward, from the last page
        last_page = page.page_after().page_after()
        assert ids(last_page.reverse_iterate()) == [[5], [3, 4], [1, 2]]

        # Test: elements
        assert [row['id'] for row in page.iter_elements()] == [1, 2, 3, 4, 5]

    # Data
    with created_tables(connection, metadata):
        insert(connection, items, *(item_row(n) for n in range(1, 6)))

        main()


def test_sa_page_links(connection: sa.engine.Connection):
    """ Test: the first page has no "before"; the last page has no "after" """
    def main():
        page = PageCursor(SAClient(connection), sa.select(items).order_by(items.c.id), {'size': 2})

        # Page 0
        assert ids([page.data]) == [[1, 2]]
        assert page.before is None
        assert page.after is not None

        # Page 1 (last page)
        next_page = page.page_after()
        assert ids([next_page.data]) == [[3]]
        assert next_page.before == page.after
        assert next_page.after is None
        assert next_page.page_after() is None

        # Back to page 0
        prev_page = next_page.page_before()
        assert prev_page.data == page.data
        assert prev_page.before is None
        assert prev_page.after == page.after

    with created_tables(connection, metadata):
        insert(connection, items, *(item_row(n) for n in range(1, 4)))

        main()


def test_sa_maps(connection: sa.engine.Connection):
    """ Test: server map modifies the statement; post-processing map modifies rows """
    def main():
        page = (
            PageCursor(SAClient(connection), sa.select(items).order_by(items.c.id), {'size': 2})
            .with_map(lambda page_q: page_q.map_statement(lambda stmt: stmt.with_only_columns(items.c.id)))
        )

        # Server map
        assert list(page) == [[{'id': 1}, {'id': 2}], [{'id': 3}]]

        # Server map: statement and elements
        ids_page = page.with_map(lambda page_q: (
            page_q
            .map_statement(lambda stmt: stmt.with_only_columns(items.c.id))
            .map_elements(lambda row: row['id'])
        ))
        assert list(ids_page) == [[1, 2], [3]]

        # Post-processing map
        assert list(ids_page.with_postprocessing_map(str)) == [['1', '2'], ['3']]

    with created_tables(connection, metadata):
        insert(connection, items, *(item_row(n) for n in range(1, 4)))

        main()


def test_sa_statement(connection: sa.engine.Connection):
    """ Test: what SQL is executed """
    def main():
        client = SAClient(connection, ClientSettings(default_size=2))
        page = PageCursor(client, sa.select(items).order_by(items.c.id))

        with QueryLogger(connection.engine) as log:
            page.load()
            page.page_after().load()

        assert len(log) == 2
        assert all('ORDER BY items.id' in stmt for stmt in log)
        assert all('LIMIT' in stmt and 'OFFSET' in stmt for stmt in log)

    with created_tables(connection, metadata):
        insert(connection, items, *(item_row(n) for n in range(1, 6)))

        main()


def test_sa_errors(connection: sa.engine.Connection):
    """ Test: database errors and bad cursors reach the caller """
    client = SAClient(connection)

    # Database error: no such table
    page = PageCursor(client, sa.select(sa.table('missing', sa.column('id'))))
    with pytest.raises(sa.exc.DBAPIError):
        page.data
    assert not page.loaded

    # Bad cursor: no query is made
    page = PageCursor(client, sa.select(items), {'after': 'pos:garbage'})
    with pytest.raises(exc.InvalidCursorError):
        page.data

    # Not a set
    page = PageCursor(client, 'items')
    with pytest.raises(exc.QueryError):
        page.data


def test_select_for_set():
    """ Test: tables and models are turned into SELECT statements """
    Base = sa.orm.declarative_base()

    class Item(Base):
        __tablename__ = 'items'
        id = sa.Column(sa.Integer, primary_key=True)

    stmt = sa.select(items).order_by(items.c.id)
    assert select_for_set(stmt) is stmt

    assert 'FROM items' in str(select_for_set(items))
    assert 'FROM items' in str(select_for_set(Item))

    with pytest.raises(exc.QueryError):
        select_for_set(object())


def test_sa_limited_set(connection: sa.engine.Connection):
    """ Test: a set with its own LIMIT/OFFSET is paginated within its bounds """
    def main():
        client = SAClient(connection)

        # LIMIT: only the first 3 rows
        page = PageCursor(client, sa.select(items).order_by(items.c.id).limit(3), {'size': 2})
        assert ids(page) == [[1, 2], [3]]
        assert ids(page.page_after().reverse_iterate()) == [[3], [1, 2]]

        # OFFSET + LIMIT, descending
        page = PageCursor(client, sa.select(items).order_by(items.c.id.desc()).offset(1).limit(3), {'size': 2})
        assert ids(page) == [[4, 3], [2]]
        assert page.data[0] == {'id': 4, 'title': 'item-4'}

        # Server map that limits the statement
        page = page.with_map(lambda page_q: page_q.map_statement(lambda stmt: stmt.with_only_columns(items.c.id).limit(2)))
        assert ids(page) == [[4, 3]]

        # Unlimited sets are paginated as is
        with QueryLogger(connection.engine) as log:
            PageCursor(client, sa.select(items).order_by(items.c.id), {'size': 2}).load()
        assert 'row_number' not in log[0]

    with created_tables(connection, metadata):
        insert(connection, items, *(item_row(n) for n in range(1, 6)))

        main()
