import json

from backend.query import CategoryTable
from backend.yelp import SearchError
from tools import fetch_categories

RAW = [
    {"alias": "ramen", "title": "Ramen", "parent_aliases": ["japanese"]},
    {"alias": "japanese", "title": "Japanese", "parent_aliases": ["restaurants"]},
    {"alias": "donuts", "title": "Donuts", "parent_aliases": ["food"]},
    {"alias": "gyms", "title": "Gyms", "parent_aliases": ["fitness"]},
]


class FakeClient:
    def __init__(self, api_key=None, error=None):
        self.api_key = api_key
        self.error = error

    @property
    def available(self):
        return bool(self.api_key)

    def categories(self):
        if self.error:
            raise self.error
        return RAW


def test_writes_table_the_agent_can_load(tmp_path, monkeypatch):
    monkeypatch.setattr(fetch_categories, "YelpClient", FakeClient)
    out = tmp_path / "categories.json"

    assert fetch_categories.main(["--api-key", "k", "--out", str(out)]) == 0

    assert json.loads(out.read_text(encoding="utf-8")) == [
        {"alias": "donuts", "title": "Donuts"},
        {"alias": "japanese", "title": "Japanese"},
    ]
    table = CategoryTable()
    table.bootstrap_from_file(out)
    assert table.find("japanese").alias == "japanese"


def test_extra_parent(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(fetch_categories, "YelpClient", FakeClient)
    assert fetch_categories.main(["--api-key", "k", "--dry-run", "--parent", "japanese"]) == 0
    printed = json.loads(capsys.readouterr().out)
    assert printed == [{"alias": "ramen", "title": "Ramen"}]


def test_missing_key(monkeypatch):
    monkeypatch.setattr(fetch_categories, "YelpClient", FakeClient)
    assert fetch_categories.main([]) == 2


def test_provider_failure(monkeypatch):
    monkeypatch.setattr(
        fetch_categories, "YelpClient",
        lambda api_key=None: FakeClient(api_key="k", error=SearchError("HTTP 500")),
    )
    assert fetch_categories.main(["--dry-run"]) == 1
