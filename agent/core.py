from __future__ import annotations

import logging

from backend.query import CategoryTable
from backend.state import LastAction, UserState

from .composer import TurnResponse
from .stores import InMemorySessionStore, SessionStoreError
from .turns import Intent, Searcher, TurnOutcome, TurnStateMachine

logger = logging.getLogger(__name__)

STORE_FAILED = "I'm sorry, I couldn't load your saved settings. Please try again."


class RestaurantFinderAgent:
    """
    Runs one turn end to end: load state, apply the intent, save, respond.
    Turns for one user are serialized by the voice platform.
    """

    def __init__(
        self,
        store: InMemorySessionStore,
        search: Searcher,
        categories: CategoryTable,
    ) -> None:
        self.store = store
        self.categories = categories
        self.machine = TurnStateMachine(search=search, categories=categories)

    # ------------------------------------------------------------------
    def handle(self, user_id: str, intent: Intent) -> TurnResponse:
        return self.run(user_id, intent).response

    def run(self, user_id: str, intent: Intent) -> TurnOutcome:
        try:
            state = self.store.load(user_id)
        except SessionStoreError:
            logger.exception("could not load state for user=%s", user_id)
            return TurnOutcome(TurnResponse.error(STORE_FAILED), UserState(), LastAction())

        outcome = self.machine.handle_turn(intent, state)
        logger.info(
            "turn user=%s intent=%s action=%s persist=%s",
            user_id, intent.name, outcome.action, outcome.persist,
        )

        if outcome.persist:
            try:
                self.store.save(user_id, outcome.state)
            except SessionStoreError:
                # the spoken answer still goes out; the next turn sees the old state
                logger.error("could not save state for user=%s after %s", user_id, outcome.action, exc_info=True)
        return outcome


__all__ = ["RestaurantFinderAgent"]
