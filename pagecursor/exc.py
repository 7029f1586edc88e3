class BasePagecursorException(Exception):
    pass


class QueryError(BasePagecursorException):
    """ Invalid query: the expression or its pagination parameters are malformed

    Reported by clients and by the query builder. It reaches the caller through whatever accessor triggered the load.
    """

    def __init__(self, err: str):
        super().__init__(f'Query error: {err}')


class InvalidCursorError(QueryError):
    """ A cursor token could not be decoded

    Reported when the user feeds a tampered, truncated, or foreign cursor value to "before" or "after"
    """

    def __init__(self, cursor: str):
        self.cursor = cursor
        super().__init__(f'The provided cursor is invalid: {cursor!r}')


class PaginationParamsError(BasePagecursorException, ValueError):
    """ Pagination parameters mention both "before" and "after"

    Only one cursor can be used at a time: it tells the direction to paginate in.
    """

    def __init__(self, params: dict):
        self.params = params
        super().__init__(f"Choose a pagination direction and use either 'before' or 'after', not both: {params!r}")


class InvalidResponseError(BasePagecursorException):
    """ A Client returned something that does not look like a page """

    def __init__(self, response: object):
        self.response = response
        super().__init__(f'Expected a page with "data", "before", "after"; got {type(response).__name__}: {response!r}')


class PageAlreadyLoadedError(BasePagecursorException, RuntimeError):
    """ Attempted to load a page that's already been loaded

    A page is loaded exactly once. Getting this error means that two callers raced to load the same cursor.
    """
