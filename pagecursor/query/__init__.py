""" Query expressions and the query builder

A Client executes expressions. The core only builds one kind: a `Paginate` query, optionally wrapped with a server map.
"""

from .expressions import Expression, Paginate, MapStatement, MapElements
from .builder import paginate, wrap, unwrap
