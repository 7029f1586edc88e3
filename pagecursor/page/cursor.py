""" PageCursor: lazy, immutable, bidirectional pagination over a remote set """

from __future__ import annotations

import logging
from collections import abc
from typing import Any, Optional

from pagecursor.typing import Element, LocalMap, OptionalCursorToken, PaginationParams, ServerMap
from pagecursor.client.base import Client, PageResult
from pagecursor.query import paginate, wrap

from .direction import Direction
from .params import freeze_params, merge_params
from .state import LoadCell, PageState


logger = logging.getLogger(__name__)


class PageCursor:
    """ Helper for paginating over sets

    Given a client and a set, lets you iterate, as well as move page by page over a set.

    Pages load lazily: loading happens when `data`, `before`, or `after` are first accessed,
    or when `page_before()` / `page_after()` need to see the current page's cursors.
    Builders return new cursors that are not loaded, even if the current one is.
    A cursor never changes its configuration.

    Example:
        page = PageCursor(client, sa.select(Item).order_by(Item.id))

        # Page over a set 5 at a time, mapping elements on the server and then in Python
        page = (
            PageCursor(client, sa.select(Item).order_by(Item.id))
            .with_params(size=5)
            .with_map(lambda page_q: page_q.map_statement(lambda stmt: stmt.with_only_columns(Item.id)))
            .with_postprocessing_map(lambda row: row['id'])
        )

        for data in page:
            ...
    """

    __slots__ = '_client', '_set', '_params', '_server_map', '_local_map', '_page'

    # Client to execute queries with
    _client: Client

    # The set to paginate over
    _set: Any

    # Pagination parameters. Read-only.
    _params: abc.Mapping[str, Any]

    # Wraps the generated paginate query with a server-side transform
    _server_map: Optional[ServerMap]

    # Maps every element of the loaded page in Python
    _local_map: Optional[LocalMap]

    # The loaded page. Set once.
    _page: LoadCell[PageState]

    def __init__(self, client: Client, set: Any, params: PaginationParams = None, server_map: ServerMap = None):
        """ Create a cursor for paging over a set

        Args:
            client: Client to execute queries with
            set: A set to paginate over
            params: Pagination parameters: "size", "before", "after"
            server_map: Optional function to wrap the generated paginate query with.
                It receives the paginate query and returns a new query expression.

        Raises:
            exc.PaginationParamsError: both "before" and "after" are given
        """
        self._client = client
        self._set = set
        self._params = freeze_params(params)
        self._server_map = server_map
        self._local_map = None
        self._page = LoadCell()

    @property
    def client(self) -> Client:
        return self._client

    @property
    def set(self) -> Any:
        return self._set

    @property
    def params(self) -> abc.Mapping[str, Any]:
        """ The pagination parameters used by this cursor. Read-only """
        return self._params

    @property
    def server_map(self) -> Optional[ServerMap]:
        return self._server_map

    @property
    def postprocessing_map(self) -> Optional[LocalMap]:
        return self._local_map

    # region Loading

    @property
    def loaded(self) -> bool:
        """ Has the page been loaded? Never triggers a load """
        return self._page.is_set

    def load(self) -> bool:
        """ Load the page, unless it's been loaded already

        Returns:
            `True` if the page has just been loaded, `False` if it had been loaded before

        Raises:
            Whatever the client raises. The cursor remains unloaded.
        """
        if self._page.is_set:
            return False

        result = self._get_page()
        self._page.set(PageState(
            data=tuple(result.data),
            before=result.before,
            after=result.after,
        ))
        return True

    def _get_page(self) -> PageResult:
        """ Execute the page query, apply the post-processing map """
        # Create query
        query = paginate(self._set, self._params)

        # Wrap paginate query with the server map
        if self._server_map is not None:
            query = wrap(query, self._server_map)

        # Execute query
        logger.debug('Loading page: params=%r', dict(self._params))
        result = PageResult.ensure(self._client.query(query))

        # Map the resulting data in Python
        if self._local_map is not None:
            result = result._replace(data=[self._local_map(element) for element in result.data])

        return result

    # endregion

    # region Data

    @property
    def data(self) -> list[Element]:
        """ Elements of the current page. Loads the page

        Every access gives a new list: modifying it does not change the loaded page.
        """
        self.load()
        return list(self._page.get().data)

    @property
    def before(self) -> OptionalCursorToken:
        """ Cursor to the page before the current one. Loads the page """
        self.load()
        return self._page.get().before

    @property
    def after(self) -> OptionalCursorToken:
        """ Cursor to the page after the current one. Loads the page """
        self.load()
        return self._page.get().after

    # endregion

    # region Builders

    def with_params(self, params: PaginationParams = None, **kwargs) -> PageCursor:
        """ Get a copy of the cursor with `params` merged into its parameters

        A cursor key ("before" or "after") replaces whatever cursor the current parameters have.

        Example:
            page.with_params(size=10)
            page.with_params({'after': token})

        Raises:
            exc.PaginationParamsError: both "before" and "after" are given
        """
        new_params = {**(params or {}), **kwargs}
        return self._copy(params=merge_params(self._params, new_params))

    def with_map(self, server_map: Optional[ServerMap]) -> PageCursor:
        """ Get a copy of the cursor with the server map set

        The function will be used to wrap the generated paginate query.
        It receives the paginate query as an argument.

        Example: fetch only the ids:

            page.with_map(lambda page_q: page_q.map_statement(lambda stmt: stmt.with_only_columns(Item.id)))
        """
        return self._copy(server_map=server_map)

    def with_postprocessing_map(self, local_map: Optional[LocalMap]) -> PageCursor:
        """ Get a copy of the cursor with the post-processing map set

        The function will be called with every element of the page that's being loaded.
        Use it to convert elements in Python (e.g. load them into models).
        Whatever can be done by the engine should be done with `with_map()` instead.

        Example:
            page.with_postprocessing_map(lambda row: Item(**row))
        """
        return self._copy(local_map=local_map)

    def _copy(self, **changes) -> PageCursor:
        """ Make a copy with some configuration changed. The copy is not loaded """
        page = object.__new__(type(self))
        page._client = self._client
        page._set = self._set
        page._params = changes.get('params', self._params)
        page._server_map = changes.get('server_map', self._server_map)
        page._local_map = changes.get('local_map', self._local_map)
        page._page = LoadCell()
        return page

    # endregion

    # region Pagination

    def page_after(self) -> Optional[PageCursor]:
        """ The page after the current one

        Returns `None` when there are no more pages after the current one.
        Loads the current page to find its "after" cursor.
        """
        return self._new_page(Direction.AFTER)

    def page_before(self) -> Optional[PageCursor]:
        """ The page before the current one

        Returns `None` when there are no more pages before the current one.
        Loads the current page to find its "before" cursor.
        """
        return self._new_page(Direction.BEFORE)

    def _new_page(self, direction: Direction) -> Optional[PageCursor]:
        assert isinstance(direction, Direction), f'Invalid direction: {direction!r}'

        self.load()
        cursor = getattr(self._page.get(), direction.key)

        # No cursor: we've reached the end of the set
        if cursor is None:
            return None

        return self.with_params({direction.key: cursor})

    def forward_iterate(self) -> abc.Iterator[list[Element]]:
        """ Iterate over pages in the "after" direction, starting with this one. Yields page data """
        return self._iterate(Direction.AFTER)

    def reverse_iterate(self) -> abc.Iterator[list[Element]]:
        """ Iterate over pages in the "before" direction, starting with this one. Yields page data

        Pages go in reverse, but elements within every page remain in the order the engine returned them.
        """
        return self._iterate(Direction.BEFORE)

    def iter_elements(self, reverse: bool = False) -> abc.Iterator[Element]:
        """ Iterate over elements of every page, one page at a time """
        pages = self.reverse_iterate() if reverse else self.forward_iterate()
        for data in pages:
            yield from data

    def _iterate(self, direction: Direction) -> abc.Iterator[list[Element]]:
        page: Optional[PageCursor] = self
        while page is not None:
            yield page.data
            page = page._new_page(direction)

    __iter__ = forward_iterate

    # endregion

    def __eq__(self, other):
        """ Same configuration, same page state

        Note that the server map and the post-processing map are compared by identity:
        two different lambdas are different even if they do the same thing.
        """
        if not isinstance(other, PageCursor):
            return NotImplemented
        return (
            self._page == other._page and
            self._client is other._client and
            _same(self._set, other._set) and
            self._params == other._params and
            self._server_map is other._server_map and
            self._local_map is other._local_map
        )

    # Cursors cache their page: they are not hashable
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self):
        state = 'loaded' if self.loaded else 'not loaded'
        return f'<{type(self).__name__}({self._set!r}, {dict(self._params)!r}): {state}>'


def _same(a: Any, b: Any) -> bool:
    """ Compare two sets

    Some objects (e.g. SqlAlchemy clauses) overload `==` to build expressions; those only compare by identity.
    """
    return a is b or (a == b) is True
