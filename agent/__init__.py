from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from backend.query import CategoryTable
from backend.yelp import YelpClient

from .composer import ResponseKind, TurnResponse
from .core import RestaurantFinderAgent
from .stores import InMemorySessionStore, JsonSessionStore, SessionStoreError
from .turns import Intent, IntentName, Searcher, TurnOutcome, TurnStateMachine

logger = logging.getLogger(__name__)


def build_agent(search: Optional[Searcher] = None, store: Optional[InMemorySessionStore] = None) -> RestaurantFinderAgent:
    categories = CategoryTable()
    categories.bootstrap_from_file()

    if store is None:
        store_path = (os.getenv("SESSION_STORE_PATH") or "").strip()
        store = JsonSessionStore(Path(store_path)) if store_path else InMemorySessionStore()

    if search is None:
        client = YelpClient()
        search = client
        logger.info("[Agent] Yelp search configured: %s", {"available": client.available, "base_url": client.base_url})

    logger.info("[Agent] session store: %s, %d categories", type(store).__name__, len(categories))
    return RestaurantFinderAgent(store=store, search=search, categories=categories)


__all__ = [
    "build_agent",
    "RestaurantFinderAgent",
    "TurnStateMachine",
    "TurnOutcome",
    "TurnResponse",
    "ResponseKind",
    "Intent",
    "IntentName",
    "InMemorySessionStore",
    "JsonSessionStore",
    "SessionStoreError",
]
