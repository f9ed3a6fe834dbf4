"""Domain records and external services for the restaurant finder."""

from .cursor import CHUNK_SIZE, PositionOutOfRange
from .query import CategoryTable, PriceOption, QueryParameters, RatingOption, build_query
from .restaurants import Business, ResultSet
from .state import ActionKind, LastAction, UserState
from .yelp import SearchError, SearchResult, YelpClient

__all__ = [
    "CHUNK_SIZE",
    "PositionOutOfRange",
    "CategoryTable",
    "PriceOption",
    "QueryParameters",
    "RatingOption",
    "build_query",
    "Business",
    "ResultSet",
    "ActionKind",
    "LastAction",
    "UserState",
    "SearchError",
    "SearchResult",
    "YelpClient",
]
