"""Turn state machine for list navigation.

Each turn takes the stored ``UserState`` plus the new intent and returns a
fresh ``UserState`` together with the response to speak. The input state is
never modified, so a rejected turn leaves nothing half-applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Mapping, Optional, Tuple

from backend.cursor import CHUNK_SIZE, PositionOutOfRange, advance, resolve_position, rewind_one_chunk, window_start
from backend.query import CategoryTable, QueryParameters, build_query, is_zip_code
from backend.restaurants import ResultSet
from backend.state import ActionKind, LastAction, UserState
from backend.yelp import SearchError, SearchResult

from .composer import (
    GOODBYE,
    HELP,
    HELP_REPROMPT,
    WELCOME,
    WELCOME_REPROMPT,
    TurnResponse,
    compose_details,
    compose_list,
    describe_query,
    read_location,
)

logger = logging.getLogger(__name__)

Searcher = Callable[[QueryParameters], SearchResult]

NEED_LOCATION = "As a new user, please specify your location by saying Set Location."
BAD_LOCATION = "Please specify a city name or five-digit ZIP code as your preferred location."
SEARCH_FAILED = "I'm sorry, I'm having trouble finding restaurants right now. Please try again later."
NARROW_REPROMPT = (
    "Repeat your request with additional conditions like good or cheap to narrow the list, "
    "or say Read List to start reading the list."
)
NO_LIST_TO_READ = "Please ask for a set of restaurants before reading the list."
END_OF_LIST = "You are at the end of the list. Please ask for a new set of restaurants."
CANNOT_GO_BACK = "I can't go back from this point. Please ask for a new set of restaurants."
NO_NUMBER = "I'm sorry, I didn't hear a number of the restaurant you wanted details about."
NO_LIST_FOR_DETAILS = "Please ask for a set of restaurants before asking for details."
NOT_READ_YET = "Please ask to start reading the list before asking for details."
INVALID_REPROMPT = "Please ask for a valid number or say repeat to repeat the list."
CANNOT_REPEAT = (
    "You can say repeat after you've read a list of restaurants or details on a specific restaurant."
)
NOT_UNDERSTOOD = "I'm sorry, I didn't understand that. Say help me to hear what you can ask."


class IntentName(str, Enum):
    LAUNCH = "LaunchRequest"
    FIND_RESTAURANT = "FindRestaurantIntent"
    SET_LOCATION = "SetLocationIntent"
    READ_LIST = "ReadListIntent"
    BACK = "BackIntent"
    DETAILS = "DetailsIntent"
    REPEAT = "AMAZON.RepeatIntent"
    HELP = "AMAZON.HelpIntent"
    STOP = "AMAZON.StopIntent"
    CANCEL = "AMAZON.CancelIntent"


@dataclass(frozen=True)
class Intent:
    name: str
    slots: Mapping[str, str] = field(default_factory=dict)

    def slot(self, name: str) -> Optional[str]:
        value = self.slots.get(name)
        if value is None:
            return None
        value = str(value).strip()
        return value or None


@dataclass
class TurnOutcome:
    response: TurnResponse
    state: UserState
    action: LastAction
    persist: bool = False


class TurnStateMachine:
    """Decides the next action from the previous one and the incoming intent."""

    def __init__(self, search: Searcher, categories: CategoryTable, chunk_size: int = CHUNK_SIZE) -> None:
        self.search = search
        self.categories = categories
        self.chunk_size = chunk_size
        self._handlers: Dict[str, Callable[[Intent, UserState], TurnOutcome]] = {
            IntentName.LAUNCH.value: self._launch,
            IntentName.FIND_RESTAURANT.value: self._find_restaurant,
            IntentName.SET_LOCATION.value: self._set_location,
            IntentName.READ_LIST.value: self._read_list,
            IntentName.BACK.value: self._back,
            IntentName.DETAILS.value: self._details,
            IntentName.REPEAT.value: self._repeat,
            IntentName.HELP.value: self._help,
            IntentName.STOP.value: self._goodbye,
            IntentName.CANCEL.value: self._goodbye,
        }

    # ------------------------------------------------------------------
    def handle_turn(self, intent: Intent, state: UserState) -> TurnOutcome:
        handler = self._handlers.get(intent.name)
        if handler is None:
            return _reject(state, TurnResponse.error(NOT_UNDERSTOOD))
        return handler(intent, state)

    # ------------------------------------------------------------------
    def _launch(self, intent: Intent, state: UserState) -> TurnOutcome:
        return _reject(state, TurnResponse.question(WELCOME, WELCOME_REPROMPT, card=False))

    def _help(self, intent: Intent, state: UserState) -> TurnOutcome:
        return _reject(state, TurnResponse.question(HELP, HELP_REPROMPT, card=False))

    def _goodbye(self, intent: Intent, state: UserState) -> TurnOutcome:
        return _reject(state, TurnResponse.statement(GOODBYE, card=False))

    # ------------------------------------------------------------------
    def _find_restaurant(self, intent: Intent, state: UserState) -> TurnOutcome:
        params = build_query(intent.slots, self.categories)
        if not params.location:
            if not state.location:
                return _reject(state, TurnResponse.statement(NEED_LOCATION))
            params.location = state.location

        try:
            result = self.search(params)
        except SearchError as exc:
            logger.warning("search failed for %s: %s", params, exc)
            return _reject(state, TurnResponse.error(SEARCH_FAILED))

        description = describe_query(params, self.categories)
        total = len(result.businesses)
        if total == 0:
            return _reject(state, TurnResponse.statement(f"I'm sorry, I didn't find any {description}."))

        new_state = state.copy()
        new_state.results = ResultSet(tuple(result.businesses))
        if total <= self.chunk_size:
            response = self._narrate(new_state, 0)
        else:
            new_state.last_action = LastAction.find_restaurant()
            response = TurnResponse.question(f"I found {total} {description}. {NARROW_REPROMPT}", NARROW_REPROMPT)
        return _commit(new_state, response)

    def _set_location(self, intent: Intent, state: UserState) -> TurnOutcome:
        location = intent.slot("Location")
        if not location:
            zip_code = intent.slot("LocationZIP")
            if not zip_code or len(zip_code) != 5:
                return _reject(state, TurnResponse.error(BAD_LOCATION))
            location = zip_code

        new_state = state.copy()
        new_state.location = location
        new_state.last_action = LastAction.set_location()

        speech = f"Preferred location set to {read_location(location)}."
        if not is_zip_code(location):
            speech += " If this is incorrect, you can also specify a five-digit ZIP code."
        return _commit(new_state, TurnResponse.statement(speech))

    # ------------------------------------------------------------------
    def _read_list(self, intent: Intent, state: UserState) -> TurnOutcome:
        results = state.results
        if not results:
            return _reject(state, TurnResponse.statement(NO_LIST_TO_READ))

        start = results.read
        if state.last_action.kind == ActionKind.DETAILS:
            # re-read the chunk the details came from
            start = window_start(start, self.chunk_size)
        if start >= len(results):
            return _reject(state, TurnResponse.statement(END_OF_LIST))

        new_state = state.copy()
        return _commit(new_state, self._narrate(new_state, start))

    def _back(self, intent: Intent, state: UserState) -> TurnOutcome:
        results = state.results
        kind = state.last_action.kind
        if not results or kind not in (ActionKind.READ_LIST, ActionKind.DETAILS):
            return _reject(state, TurnResponse.statement(CANNOT_GO_BACK), LastAction.back_limit())

        if kind == ActionKind.READ_LIST:
            start = rewind_one_chunk(results.read, self.chunk_size)
        else:
            start = window_start(results.read, self.chunk_size)

        new_state = state.copy()
        return _commit(new_state, self._narrate(new_state, start))

    def _details(self, intent: Intent, state: UserState) -> TurnOutcome:
        raw = intent.slot("RestaurantID")
        if not raw:
            return _reject(state, TurnResponse.error(NO_NUMBER))
        results = state.results
        if not results:
            return _reject(state, TurnResponse.statement(NO_LIST_FOR_DETAILS))
        if results.read == 0:
            return _reject(state, TurnResponse.statement(NOT_READ_YET))

        response, position = self._lookup(results, raw)
        if position is None:
            return _reject(state, response)

        new_state = state.copy()
        new_state.last_action = LastAction.details(position)
        return _commit(new_state, response)

    def _repeat(self, intent: Intent, state: UserState) -> TurnOutcome:
        last = state.last_action
        results = state.results
        if results and last.value is not None:
            if last.kind == ActionKind.READ_LIST and 0 <= last.value < len(results):
                new_state = state.copy()
                response = self._narrate(new_state, last.value)
                changed = new_state.results.read != results.read
                return TurnOutcome(response, new_state, new_state.last_action, persist=changed)
            if last.kind == ActionKind.DETAILS and results.read > 0:
                response, _ = self._lookup(results, str(last.value))
                return _reject(state, response)
        return _reject(state, TurnResponse.statement(CANNOT_REPEAT))

    # ------------------------------------------------------------------
    def _narrate(self, state: UserState, start: int) -> TurnResponse:
        """Read the chunk beginning at ``start`` and move the cursor past it."""
        results = state.results
        new_read, count = advance(start, len(results), self.chunk_size)
        state.results = results.with_read(new_read)
        state.last_action = LastAction.read_list(start)
        speech, reprompt = compose_list(results, start, count)
        return TurnResponse.question(speech, reprompt)

    def _lookup(self, results: ResultSet, raw: str) -> Tuple[TurnResponse, Optional[int]]:
        try:
            position = int(raw)
            index = resolve_position(results.read, position, len(results), self.chunk_size)
        except (ValueError, PositionOutOfRange):
            speech = f"{raw} is not a valid option to read. {INVALID_REPROMPT}"
            return TurnResponse.question(speech, INVALID_REPROMPT), None
        return TurnResponse.statement(compose_details(results[index])), position


def _commit(state: UserState, response: TurnResponse) -> TurnOutcome:
    return TurnOutcome(response, state, state.last_action, persist=True)


def _reject(state: UserState, response: TurnResponse, action: Optional[LastAction] = None) -> TurnOutcome:
    return TurnOutcome(response, state, action or state.last_action, persist=False)


__all__ = ["IntentName", "Intent", "TurnOutcome", "TurnStateMachine", "Searcher"]
