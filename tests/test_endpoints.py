import pytest
from fastapi.testclient import TestClient

import fastapi_app.main as main
from agent import InMemorySessionStore, build_agent

from conftest import FakeSearch, make_businesses

client = TestClient(main.app)

APP_ID = "amzn1.ask.skill.test"


def envelope(request, user="amzn1.ask.account.A"):
    return {
        "version": "1.0",
        "session": {
            "new": False,
            "sessionId": "amzn1.echo-api.session.1",
            "application": {"applicationId": APP_ID},
            "user": {"userId": user},
        },
        "request": request,
    }


def intent_request(name, **slots):
    return envelope({
        "type": "IntentRequest",
        "requestId": "req-1",
        "intent": {
            "name": name,
            "slots": {k: {"name": k, "value": v} for k, v in slots.items()},
        },
    })


@pytest.fixture(autouse=True)
def fresh_agent(monkeypatch):
    monkeypatch.delenv("ALEXA_APP_ID", raising=False)
    agent = build_agent(search=FakeSearch(make_businesses(8)), store=InMemorySessionStore())
    monkeypatch.setattr(main, "agent", agent)
    return agent


def test_health_ok():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_launch_asks_question_without_card():
    r = client.post("/alexa", json=envelope({"type": "LaunchRequest", "requestId": "req-0"}))
    assert r.status_code == 200
    body = r.json()["response"]
    assert body["outputSpeech"]["text"].startswith("Welcome to Restaurant Finder.")
    assert body["reprompt"]["outputSpeech"]["text"] == "For instructions on what you can say, please say help me."
    assert body["shouldEndSession"] is False
    assert "card" not in body


def test_search_then_read_then_details():
    r = client.post("/alexa", json=intent_request("FindRestaurantIntent", Location="Seattle", FirstDescriptor="pizza"))
    body = r.json()["response"]
    assert body["outputSpeech"]["text"].startswith("I found 8 pizza restaurants in Seattle.")
    assert body["card"] == {"type": "Simple", "title": "Restaurant Finder", "content": body["outputSpeech"]["text"]}
    assert body["shouldEndSession"] is False

    r = client.post("/alexa", json=intent_request("ReadListIntent"))
    assert "5 ... Restaurant 5." in r.json()["response"]["outputSpeech"]["text"]

    r = client.post("/alexa", json=intent_request("DetailsIntent", RestaurantID="4"))
    body = r.json()["response"]
    assert body["outputSpeech"]["text"].startswith("Restaurant 4 is located at 4 Pike St in Seattle.")
    assert body["shouldEndSession"] is True
    assert "reprompt" not in body


def test_empty_slot_values_are_dropped():
    r = client.post("/alexa", json=intent_request("SetLocationIntent", Location="", LocationZIP="94103"))
    assert r.json()["response"]["outputSpeech"]["text"] == "Preferred location set to 9 4 1 0 3."


def test_error_shape_has_generic_reprompt():
    r = client.post("/alexa", json=intent_request("DetailsIntent"))
    body = r.json()["response"]
    assert body["reprompt"]["outputSpeech"]["text"] == "What else can I help with?"
    assert body["shouldEndSession"] is False
    assert "card" not in body


def test_session_ended_gets_empty_response():
    r = client.post("/alexa", json=envelope({"type": "SessionEndedRequest", "reason": "USER_INITIATED"}))
    assert r.json() == {"version": "1.0", "response": {"shouldEndSession": True}}


def test_application_id_is_checked(monkeypatch):
    monkeypatch.setenv("ALEXA_APP_ID", "amzn1.ask.skill.other")
    r = client.post("/alexa", json=intent_request("AMAZON.HelpIntent"))
    assert r.status_code == 400

    monkeypatch.setenv("ALEXA_APP_ID", APP_ID)
    r = client.post("/alexa", json=intent_request("AMAZON.HelpIntent"))
    assert r.status_code == 200


def test_malformed_envelope_is_rejected():
    r = client.post("/alexa", json={"session": {}})
    assert r.status_code == 422
