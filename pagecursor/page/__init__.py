""" Page cursors: lazy pagination over a set

A PageCursor loads one page on demand and knows how to get to its neighbors.
"""

from .cursor import PageCursor
from .direction import Direction, CURSOR_KEYS
from .state import PageState, LoadCell
from .params import freeze_params, merge_params
