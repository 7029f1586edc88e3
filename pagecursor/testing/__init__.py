""" Tools for testing """

from .client import ListClient
from .query_logger import QueryCounter, QueryLogger
from .tables import created_tables, insert
