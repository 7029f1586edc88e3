from __future__ import annotations

from collections import abc
from typing import NamedTuple, Optional

from pagecursor import exc
from pagecursor.typing import Element, CursorToken
from pagecursor.query import Expression


class PageResult(NamedTuple):
    """ One page, as returned by a Client """
    # Elements of the page
    data: list[Element]

    # Cursor to the previous page, if available
    before: Optional[CursorToken]

    # Cursor to the next page, if available
    after: Optional[CursorToken]

    @classmethod
    def ensure(cls, response: object) -> PageResult:
        """ Get a PageResult from a Client response: a PageResult, or a mapping with "data", "before", "after"

        Raises:
            exc.InvalidResponseError: the response does not look like a page
        """
        if isinstance(response, PageResult):
            return response
        elif isinstance(response, abc.Mapping) and 'data' in response:
            return cls(
                data=list(response['data']),
                before=response.get('before'),
                after=response.get('after'),
            )
        else:
            raise exc.InvalidResponseError(response)


class Client:
    """ Executes page queries against a remote engine

    Implementations must let network and engine errors propagate unchanged: the cursor does no error handling of its own.
    """

    def query(self, expr: Expression) -> PageResult:
        """ Execute a query, return one page

        Raises:
            exc.QueryError: the query is malformed
        """
        raise NotImplementedError
