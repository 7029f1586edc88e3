from importlib.metadata import version

__version__ = version('pagecursor')

from .page import PageCursor, Direction
from .client import Client, PageResult, ClientSettings, SAClient
from .query import Expression, Paginate, MapStatement, MapElements

from . import query
from . import exc
