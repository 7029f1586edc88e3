""" Count SQL round trips made while pages load """

import sqlalchemy as sa


class QueryCounter:
    """ Count SQL statements that an engine executes within a `with` block

    Every page that SAClient loads is exactly one statement, so the count is the number of page loads.

    Example:
        with QueryCounter(connection.engine) as counter:
            list(page)
        counter.n  # -> the number of pages
    """

    def __init__(self, engine: sa.engine.Engine):
        super().__init__()
        self.engine = engine
        self.n = 0

    def _on_statement(self, **kw):
        self.n += 1

    def __enter__(self):
        sa.event.listen(self.engine, 'after_cursor_execute', self._on_statement, named=True)
        return self

    def __exit__(self, *exc):
        sa.event.remove(self.engine, 'after_cursor_execute', self._on_statement)
        return False


class QueryLogger(QueryCounter, list):
    """ Collect the SQL text of every statement executed within a `with` block

    Example:
        with QueryLogger(connection.engine) as log:
            page.load()
        log[0]  # -> 'SELECT ... LIMIT ? OFFSET ?'
    """

    def _on_statement(self, **kw):
        super()._on_statement(**kw)
        self.append(kw['statement'])
