import json
import logging

import pytest

from agent import build_agent
from agent.stores import InMemorySessionStore, JsonSessionStore, SessionStoreError
from agent.turns import Intent, IntentName
from backend.restaurants import ResultSet
from backend.state import LastAction, UserState

from conftest import FakeSearch, make_businesses


def sample_state():
    return UserState(
        location="98101",
        last_action=LastAction.read_list(5),
        results=ResultSet(tuple(make_businesses(7)), read=7),
    )


def test_unknown_user_gets_default_state():
    state = InMemorySessionStore().load("amzn1.ask.account.NEW")
    assert state == UserState()


def test_memory_store_returns_independent_copies():
    store = InMemorySessionStore()
    state = sample_state()
    store.save("u1", state)
    state.location = "changed"

    loaded = store.load("u1")
    assert loaded == sample_state()
    loaded.results = None
    assert store.load("u1").results is not None


def test_back_limit_is_never_stored():
    store = InMemorySessionStore()
    store.save("u1", UserState(last_action=LastAction.back_limit()))
    assert store.load("u1").last_action == LastAction.none()


def test_json_store_survives_restart(tmp_path):
    path = tmp_path / "sessions.json"
    JsonSessionStore(path).save("u1", sample_state())

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["u1"]["lastAction"] == {"kind": "ReadList", "value": 5}
    assert raw["u1"]["lastResponse"]["read"] == 7

    assert JsonSessionStore(path).load("u1") == sample_state()


def test_json_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "sessions.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonSessionStore(path)
    assert store.load("u1") == UserState()


def test_json_store_save_failure_raises(tmp_path):
    path = tmp_path / "sessions.json"
    path.mkdir()
    store = JsonSessionStore(path)
    with pytest.raises(SessionStoreError):
        store.save("u1", sample_state())
    assert store.load("u1") == UserState()


class BrokenStore(InMemorySessionStore):
    def __init__(self, fail_load=False):
        super().__init__()
        self.fail_load = fail_load

    def load(self, user_id):
        if self.fail_load:
            raise SessionStoreError("db down")
        return super().load(user_id)

    def save(self, user_id, state):
        raise SessionStoreError("db down")


def test_agent_still_answers_when_save_fails(caplog):
    agent = build_agent(search=FakeSearch(make_businesses(3)), store=BrokenStore())
    with caplog.at_level(logging.ERROR):
        response = agent.handle("u1", Intent(IntentName.SET_LOCATION.value, {"Location": "Denver"}))
    assert response.speech.startswith("Preferred location set to Denver.")
    assert "could not save state for user=u1" in caplog.text


def test_agent_reports_load_failure():
    agent = build_agent(search=FakeSearch(), store=BrokenStore(fail_load=True))
    response = agent.handle("u1", Intent(IntentName.READ_LIST.value))
    assert response.reprompt == "What else can I help with?"


def test_agent_persists_between_turns():
    store = InMemorySessionStore()
    agent = build_agent(search=FakeSearch(make_businesses(12)), store=store)

    agent.handle("u1", Intent(IntentName.SET_LOCATION.value, {"Location": "Seattle"}))
    agent.handle("u1", Intent(IntentName.FIND_RESTAURANT.value, {"FirstDescriptor": "thai"}))
    agent.handle("u1", Intent(IntentName.READ_LIST.value))
    response = agent.handle("u1", Intent(IntentName.DETAILS.value, {"RestaurantID": "2"}))

    assert response.speech.startswith("Restaurant 2 is located")
    state = store.load("u1")
    assert state.location == "Seattle"
    assert state.last_action == LastAction.details(2)
    assert state.results.read == 5
    assert store.load("someone-else") == UserState()
