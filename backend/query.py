from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from threading import RLock
from typing import Dict, Iterable, List, Mapping, Optional

DEFAULT_CATEGORIES_PATH = Path(__file__).resolve().parent / "data" / "categories.json"

DESCRIPTOR_SLOTS = ("FirstDescriptor", "SecondDescriptor", "ThirdDescriptor")


@dataclass(frozen=True)
class Category:
    alias: str
    title: str


class CategoryTable:
    """Thread-safe lookup of Yelp category aliases by alias or title."""

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._by_name: Dict[str, Category] = {}
        self._by_alias: Dict[str, Category] = {}
        self._lock = RLock()
        self.upsert(categories)

    # ------------------------------------------------------------------
    def bootstrap_from_file(self, path: Path = DEFAULT_CATEGORIES_PATH) -> None:
        if not path.exists():
            return
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
        self.upsert(
            Category(alias=str(it["alias"]).strip(), title=str(it.get("title") or it["alias"]).strip())
            for it in payload
            if isinstance(it, dict) and it.get("alias")
        )

    # ------------------------------------------------------------------
    def upsert(self, categories: Iterable[Category]) -> None:
        with self._lock:
            for cat in categories:
                self._by_alias[cat.alias] = cat
                self._by_name.setdefault(cat.alias.lower(), cat)
                self._by_name.setdefault(cat.title.lower(), cat)

    # ------------------------------------------------------------------
    def find(self, word: str) -> Optional[Category]:
        with self._lock:
            return self._by_name.get(word.strip().lower())

    def title(self, alias: str) -> str:
        with self._lock:
            cat = self._by_alias.get(alias)
        return cat.title if cat else alias

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_alias)


class PriceOption(str, Enum):
    CHEAP = "1"
    MODERATE = "2"
    SPENDY = "3"
    SPLURGE = "4"
    INEXPENSIVE = "1,2"
    EXPENSIVE = "3,4"

    @property
    def spoken(self) -> str:
        return self.name.lower()


class RatingOption(Enum):
    GOOD = (3.0, 5.0)
    GREAT = (4.0, 5.0)
    BAD = (0.0, 2.5)
    TERRIBLE = (0.0, 2.0)

    @property
    def spoken(self) -> str:
        return self.name.lower()

    def accepts(self, rating: float) -> bool:
        low, high = self.value
        return low <= rating <= high


_PRICE_WORDS = {
    "cheap": PriceOption.CHEAP,
    "moderate": PriceOption.MODERATE,
    "spendy": PriceOption.SPENDY,
    "splurge": PriceOption.SPLURGE,
    "inexpensive": PriceOption.INEXPENSIVE,
    "expensive": PriceOption.EXPENSIVE,
    "costly": PriceOption.SPLURGE,
    "pricey": PriceOption.EXPENSIVE,
}

_RATING_WORDS = {
    "good": RatingOption.GOOD,
    "great": RatingOption.GREAT,
    "bad": RatingOption.BAD,
    "terrible": RatingOption.TERRIBLE,
}

_OPEN_WORDS = {"open", "open now"}


@dataclass
class QueryParameters:
    """Search filters assembled from the slots of one turn."""

    location: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    open_now: bool = False
    price: Optional[PriceOption] = None
    rating: Optional[RatingOption] = None

    def add_descriptor(self, word: str, table: CategoryTable) -> bool:
        """Fold one spoken descriptor into the filters. Returns False if it was not understood."""
        value = word.strip().lower()
        if not value:
            return False
        category = table.find(value)
        if category:
            if category.alias not in self.categories:
                self.categories.append(category.alias)
        elif value in _OPEN_WORDS:
            self.open_now = True
        elif value in _PRICE_WORDS:
            self.price = _PRICE_WORDS[value]
        elif value in _RATING_WORDS:
            self.rating = _RATING_WORDS[value]
        else:
            return False
        return True

    def to_request_params(self) -> Dict[str, str]:
        """Query-string fields for the provider. Rating is a post-filter and never sent."""
        params: Dict[str, str] = {}
        if self.location:
            params["location"] = self.location
        if self.categories:
            params["categories"] = ",".join(self.categories)
        if self.open_now:
            params["open_now"] = "true"
        if self.price is not None:
            params["price"] = self.price.value
        return params


def is_zip_code(value: Optional[str]) -> bool:
    return bool(value) and len(value) == 5 and value.isdigit()


def location_from_slots(slots: Mapping[str, str]) -> Optional[str]:
    """City from ``Location``, else a 5-character ``LocationZIP``."""
    location = (slots.get("Location") or "").strip()
    if location:
        return location
    zip_code = (slots.get("LocationZIP") or "").strip()
    if len(zip_code) == 5:
        return zip_code
    return None


def build_query(slots: Mapping[str, str], table: CategoryTable) -> QueryParameters:
    params = QueryParameters(location=location_from_slots(slots))
    for slot in DESCRIPTOR_SLOTS:
        value = slots.get(slot)
        if value:
            params.add_descriptor(value, table)
    return params


__all__ = [
    "Category",
    "CategoryTable",
    "PriceOption",
    "RatingOption",
    "QueryParameters",
    "DESCRIPTOR_SLOTS",
    "is_zip_code",
    "location_from_slots",
    "build_query",
]
