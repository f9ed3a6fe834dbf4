"""Spoken text for list windows, restaurant details and search summaries.

Nothing here touches session state; callers decide which window to render.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from backend.query import CategoryTable, QueryParameters, is_zip_code
from backend.restaurants import Business, ResultSet

CARD_TITLE = "Restaurant Finder"
GENERIC_REPROMPT = "What else can I help with?"

PRICE_ADJECTIVES = {1: "cheap", 2: "moderately priced", 3: "spendy", 4: "splurge"}

WELCOME = (
    "Welcome to Restaurant Finder. You can find restaurants by type of cuisine, price range, "
    "or with high Yelp reviews. For example, you can say Find a cheap Chinese restaurant in Seattle. "
    "How can I help you?"
)
WELCOME_REPROMPT = "For instructions on what you can say, please say help me."
HELP = (
    "You can find restaurants by type of cuisine, price range, or Yelp review. For example, "
    "you can say Find a cheap Chinese restaurant in Seattle ... Now, what can I help you with?"
)
HELP_REPROMPT = (
    "You can find restaurants by type of cuisine, price range, or Yelp review, or you can say exit... "
    "Now, what can I help you with?"
)
GOODBYE = "Goodbye"


class ResponseKind(str, Enum):
    STATEMENT = "statement"
    QUESTION = "question"
    ERROR = "error"


@dataclass(frozen=True)
class TurnResponse:
    """Transport-neutral answer for one turn."""

    kind: ResponseKind
    speech: str
    reprompt: Optional[str] = None
    card_title: Optional[str] = None
    card_content: Optional[str] = None

    @property
    def ends_session(self) -> bool:
        return self.kind == ResponseKind.STATEMENT

    @classmethod
    def statement(cls, speech: str, *, card: bool = True) -> "TurnResponse":
        if not card:
            return cls(ResponseKind.STATEMENT, speech)
        return cls(ResponseKind.STATEMENT, speech, card_title=CARD_TITLE, card_content=speech)

    @classmethod
    def question(cls, speech: str, reprompt: str, *, card: bool = True) -> "TurnResponse":
        if not card:
            return cls(ResponseKind.QUESTION, speech, reprompt)
        return cls(ResponseKind.QUESTION, speech, reprompt, CARD_TITLE, speech)

    @classmethod
    def error(cls, speech: str) -> "TurnResponse":
        return cls(ResponseKind.ERROR, speech, GENERIC_REPROMPT)


# ----------------------------------------------------------------------
def compose_list(results: ResultSet, start: int, count: int) -> Tuple[str, str]:
    """Enumerate ``results[start:start + count]``. Returns ``(speech, reprompt)``."""
    reprompt = "You can ask for more details by saying the corresponding restaurant number"
    if len(results) - (start + count) > 0:
        reprompt += " or say More to hear more results."
    else:
        reprompt += "."

    noun = "restaurant" if count == 1 else "restaurants"
    items = " ".join(f"{i} ... {name}." for i, name in enumerate(results.names(start, count), start=1))
    speech = f"Reading {count} {noun}. {reprompt}"
    if items:
        speech += f" {items}"
    return speech, reprompt


def compose_details(business: Business) -> str:
    speech = f"{business.name} is located at {business.address} in {business.city}."
    speech += f" It has a Yelp rating of {business.rating:g} based on {business.review_count} reviews."
    adjective = PRICE_ADJECTIVES.get(business.price)
    if adjective:
        speech += f" It is a {adjective} option."
    if business.phone:
        speech += f" The phone number is {format_phone(business.phone)}."
    return speech


def format_phone(raw: str) -> str:
    """``+12065550123`` -> ``(206) 555-0123``; anything else is returned as is."""
    if len(raw) == 12 and raw.startswith("+1"):
        return f"({raw[2:5]}) {raw[5:8]}-{raw[8:12]}"
    return raw


def read_location(location: str) -> str:
    # ZIP codes read digit by digit
    if is_zip_code(location):
        return " ".join(location)
    return location


def describe_query(params: QueryParameters, table: Optional[CategoryTable] = None) -> str:
    words = []
    if params.open_now:
        words.append("open")
    if params.rating is not None:
        words.append(params.rating.spoken)
    if params.price is not None:
        words.append(params.price.spoken)
    for alias in params.categories:
        words.append((table.title(alias) if table else alias).lower())
    words.append("restaurants")
    text = " ".join(words)
    if params.location:
        text += f" in {read_location(params.location)}"
    return text


__all__ = [
    "CARD_TITLE",
    "GENERIC_REPROMPT",
    "ResponseKind",
    "TurnResponse",
    "compose_list",
    "compose_details",
    "format_phone",
    "read_location",
    "describe_query",
]
