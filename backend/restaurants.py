from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Iterable, Optional, Tuple


@dataclass(frozen=True)
class Business:
    """A single restaurant as returned by the search provider."""

    name: str
    address: str = ""
    city: str = ""
    rating: float = 0.0
    review_count: int = 0
    price: int = 0
    is_closed: bool = False
    distance: float = 0.0
    phone: str = ""
    url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Business":
        return cls(
            name=str(data.get("name", "")).strip(),
            address=str(data.get("address") or ""),
            city=str(data.get("city") or ""),
            rating=float(data.get("rating", 0) or 0),
            review_count=int(data.get("review_count", 0) or 0),
            price=int(data.get("price", 0) or 0),
            is_closed=bool(data.get("is_closed", False)),
            distance=float(data.get("distance", 0) or 0),
            phone=str(data.get("phone") or ""),
            url=str(data.get("url") or ""),
        )

    @classmethod
    def from_yelp(cls, data: Dict[str, Any]) -> "Business":
        location = data.get("location") or {}
        price = data.get("price") or ""
        return cls(
            name=str(data.get("name", "")).strip(),
            address=str(location.get("address1") or ""),
            city=str(location.get("city") or ""),
            rating=float(data.get("rating", 0) or 0),
            review_count=int(data.get("review_count", 0) or 0),
            price=min(len(price), 4),
            is_closed=bool(data.get("is_closed", False)),
            distance=float(data.get("distance", 0) or 0),
            phone=str(data.get("phone") or ""),
            url=str(data.get("url") or ""),
        )


@dataclass
class ResultSet:
    """Businesses found by one search plus how many of them were read out.

    ``read`` counts the items already narrated, ``0 <= read <= len(self)``.
    The list keeps the provider's ranking and never changes size.
    """

    businesses: Tuple[Business, ...] = field(default_factory=tuple)
    read: int = 0

    def __post_init__(self) -> None:
        self.businesses = tuple(self.businesses)
        if not 0 <= self.read <= len(self.businesses):
            raise ValueError(f"read={self.read} outside [0, {len(self.businesses)}]")

    def __len__(self) -> int:
        return len(self.businesses)

    def __getitem__(self, index: int) -> Business:
        return self.businesses[index]

    def names(self, start: int, count: int) -> Iterable[str]:
        return (b.name for b in self.businesses[start:start + count])

    def with_read(self, read: int) -> "ResultSet":
        return replace(self, read=read)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "read": self.read,
            "restaurants": [b.to_dict() for b in self.businesses],
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ResultSet"]:
        if not data:
            return None
        businesses = tuple(Business.from_dict(b) for b in data.get("restaurants") or [])
        read = int(data.get("read", 0) or 0)
        return cls(businesses=businesses, read=max(0, min(read, len(businesses))))


__all__ = ["Business", "ResultSet"]
