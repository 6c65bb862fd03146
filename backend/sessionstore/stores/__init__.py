# Session Store Persistence
from sessionstore.stores.base import SessionStore, UserStore
from sessionstore.stores.memory import InMemorySessionStore, InMemoryUserStore
from sessionstore.stores.sql import SQLSessionStore, SQLUserStore

__all__ = [
    "InMemorySessionStore",
    "InMemoryUserStore",
    "SQLSessionStore",
    "SQLUserStore",
    "SessionStore",
    "UserStore",
]
