from typing import List, Optional

import pytest

from backend.query import Category, CategoryTable, QueryParameters
from backend.restaurants import Business
from backend.yelp import SearchError, SearchResult


def make_businesses(count: int) -> List[Business]:
    return [
        Business(
            name=f"Restaurant {i}",
            address=f"{i} Pike St",
            city="Seattle",
            rating=4.5,
            review_count=10 * i,
            price=(i % 4) + 1,
            phone=f"+1206555{i:04d}",
        )
        for i in range(1, count + 1)
    ]


class FakeSearch:
    """Stands in for the Yelp client: returns canned businesses and records queries."""

    def __init__(self, businesses: Optional[List[Business]] = None, error: Optional[Exception] = None) -> None:
        self.businesses = list(businesses or [])
        self.error = error
        self.calls: List[QueryParameters] = []

    def __call__(self, params: QueryParameters) -> SearchResult:
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return SearchResult(total=len(self.businesses), businesses=list(self.businesses))


@pytest.fixture
def categories() -> CategoryTable:
    return CategoryTable([
        Category("chinese", "Chinese"),
        Category("pizza", "Pizza"),
        Category("indpak", "Indian"),
    ])


@pytest.fixture
def twelve() -> List[Business]:
    return make_businesses(12)


@pytest.fixture
def failing_search() -> FakeSearch:
    return FakeSearch(error=SearchError("Unable to call endpoint: HTTP 500"))
