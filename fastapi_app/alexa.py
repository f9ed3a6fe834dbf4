"""Alexa skill request parsing and response rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from agent import Intent, IntentName, TurnResponse

LAUNCH_REQUEST = "LaunchRequest"
INTENT_REQUEST = "IntentRequest"
SESSION_ENDED_REQUEST = "SessionEndedRequest"


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------
class Slot(BaseModel):
    name: str = ""
    value: Optional[str] = None


class IntentPayload(BaseModel):
    name: str
    slots: Dict[str, Slot] = Field(default_factory=dict)


class RequestPayload(BaseModel):
    type: str
    requestId: Optional[str] = None
    intent: Optional[IntentPayload] = None


class Application(BaseModel):
    applicationId: str = ""


class User(BaseModel):
    userId: str = ""


class Session(BaseModel):
    sessionId: Optional[str] = None
    new: bool = False
    application: Application = Field(default_factory=Application)
    user: User = Field(default_factory=User)


class AlexaRequest(BaseModel):
    version: str = "1.0"
    session: Session = Field(default_factory=Session)
    request: RequestPayload


@dataclass(frozen=True)
class Turn:
    user_id: str
    application_id: str
    intent: Optional[Intent]


# ---------------------------------------------------------------------------
# Parsing / rendering
# ---------------------------------------------------------------------------
def parse_turn(envelope: AlexaRequest) -> Turn:
    """Extract the user and intent. ``intent`` is None when there is nothing to answer."""
    session = envelope.session
    req = envelope.request
    intent: Optional[Intent] = None
    if req.type == LAUNCH_REQUEST:
        intent = Intent(IntentName.LAUNCH.value)
    elif req.type == INTENT_REQUEST and req.intent is not None:
        slots = {
            key: slot.value.strip()
            for key, slot in req.intent.slots.items()
            if slot.value and slot.value.strip()
        }
        intent = Intent(req.intent.name, slots)
    return Turn(
        user_id=session.user.userId,
        application_id=session.application.applicationId,
        intent=intent,
    )


def _speech(text: str) -> Dict[str, str]:
    return {"type": "PlainText", "text": text}


def render(response: Optional[TurnResponse]) -> Dict[str, Any]:
    if response is None:
        return {"version": "1.0", "response": {"shouldEndSession": True}}
    body: Dict[str, Any] = {
        "outputSpeech": _speech(response.speech),
        "shouldEndSession": response.ends_session,
    }
    if response.reprompt:
        body["reprompt"] = {"outputSpeech": _speech(response.reprompt)}
    if response.card_title:
        body["card"] = {
            "type": "Simple",
            "title": response.card_title,
            "content": response.card_content or response.speech,
        }
    return {"version": "1.0", "response": body}


__all__ = ["AlexaRequest", "Turn", "parse_turn", "render"]
