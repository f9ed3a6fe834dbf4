from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

from .query import QueryParameters
from .restaurants import Business

logger = logging.getLogger(__name__)

SEARCH_PATH = "/v3/businesses/search"
CATEGORIES_PATH = "/v3/categories"


class SearchError(RuntimeError):
    """The search provider could not be reached or returned an unusable answer."""


@dataclass
class SearchResult:
    total: int
    businesses: List[Business] = field(default_factory=list)


class YelpClient:
    """Thin wrapper for the Yelp Fusion business search.

    Uses environment variables:
      - YELP_API_KEY
      - YELP_API_URL (default: https://api.yelp.com)
      - YELP_SEARCH_LIMIT (default: 50, the API maximum)
      - YELP_TIMEOUT (seconds, default: 8)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = (api_key if api_key is not None else os.getenv("YELP_API_KEY") or "").strip()
        self.base_url = (base_url or os.getenv("YELP_API_URL") or "https://api.yelp.com").strip().rstrip("/")
        self.limit = int(os.getenv("YELP_SEARCH_LIMIT") or 50)
        self.timeout = float(os.getenv("YELP_TIMEOUT") or 8)
        self._http = session or requests.Session()

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def __call__(self, params: QueryParameters) -> SearchResult:
        return self.search(params)

    # ------------------------------------------------------------------
    def search(self, params: QueryParameters) -> SearchResult:
        query: Dict[str, Any] = {"term": "restaurants", "limit": self.limit}
        query.update(params.to_request_params())
        payload = self._get(SEARCH_PATH, query)

        raw = payload.get("businesses")
        if not isinstance(raw, list):
            raise SearchError("search response has no business list")

        businesses: List[Business] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            business = Business.from_yelp(item)
            if params.rating is not None and not params.rating.accepts(business.rating):
                continue
            businesses.append(business)

        logger.info(
            "yelp search %s -> %d of %s businesses",
            query, len(businesses), payload.get("total"),
        )
        return SearchResult(total=len(businesses), businesses=businesses)

    def categories(self) -> List[Dict[str, Any]]:
        payload = self._get(CATEGORIES_PATH, {})
        return [c for c in payload.get("categories") or [] if isinstance(c, dict)]

    # ------------------------------------------------------------------
    def _get(self, path: str, query: Dict[str, Any]) -> Dict[str, Any]:
        if not self.available:
            raise SearchError("Yelp API key not configured")
        url = f"{self.base_url}{path}"
        try:
            r = self._http.get(
                url,
                params=query,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise SearchError(f"Unable to call endpoint: {exc}") from exc
        if r.status_code != 200:
            raise SearchError(f"Unable to call endpoint: HTTP {r.status_code}")
        try:
            payload = r.json()
        except ValueError as exc:
            raise SearchError("endpoint returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise SearchError("endpoint returned unexpected payload")
        return payload


def restaurant_categories(categories: List[Dict[str, Any]], parents: Tuple[str, ...] = ("restaurants", "food")) -> List[Dict[str, str]]:
    """Keep the categories that hang under one of ``parents``, as alias/title pairs."""
    out: List[Dict[str, str]] = []
    seen = set()
    for cat in categories:
        alias = str(cat.get("alias") or "").strip()
        if not alias or alias in seen:
            continue
        if not set(cat.get("parent_aliases") or []) & set(parents):
            continue
        seen.add(alias)
        out.append({"alias": alias, "title": str(cat.get("title") or alias).strip()})
    out.sort(key=lambda c: c["alias"])
    return out


__all__ = ["YelpClient", "SearchResult", "SearchError", "restaurant_categories"]
