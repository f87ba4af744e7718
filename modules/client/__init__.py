"""
Notes API Client.

HTTP transport, typed API wrapper, query cache, and the optimistic
mutation synchronizer used by the command-line client.
"""

from modules.client.api import NotesApi
from modules.client.cache import QueryCache
from modules.client.sync import NoteSynchronizer
from modules.client.transport import APIClient

__all__ = [
    "APIClient",
    "NoteSynchronizer",
    "NotesApi",
    "QueryCache",
]
