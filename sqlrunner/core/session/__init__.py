"""
Database sessions for the script runner.

``Session`` / ``Statement`` / ``ResultSet`` are the contracts the engine
consumes; ``DbApiSession`` implements them over PEP 249 drivers.
"""

from .base import ResultSet, Session, Statement
from .connect import connect, open_session
from .dbapi import DbApiResultSet, DbApiSession, DbApiStatement

__all__ = [
    "ResultSet",
    "Session",
    "Statement",
    "connect",
    "open_session",
    "DbApiResultSet",
    "DbApiSession",
    "DbApiStatement",
]
