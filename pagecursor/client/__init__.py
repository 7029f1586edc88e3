""" Clients: execute page queries

A Client is the only thing that talks to the remote engine. The core knows nothing but `Client.query()`.
"""

from .base import Client, PageResult
from .settings import ClientSettings
from .positions import PositionCursorData, Window, plan_window
from .sa import SAClient
