"""Persistence gateways for chat sessions and messages.

Responsibilities:
    - PersistenceGateway: the contract the chat engine consumes
    - InMemoryGateway: process-local store for tests and offline runs
    - SqliteGateway: durable single-file store behind the REST API
    - HttpGateway: client of the REST API used by the UI

All gateways raise ecochat.errors exceptions, never backend-specific ones.
"""

from ecochat.persistence.gateway import PersistenceGateway
from ecochat.persistence.http import HttpGateway
from ecochat.persistence.memory import InMemoryGateway
from ecochat.persistence.sqlite import SqliteGateway

__all__ = ["HttpGateway", "InMemoryGateway", "PersistenceGateway", "SqliteGateway"]
