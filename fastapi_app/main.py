from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, HTTPException

from agent import RestaurantFinderAgent, build_agent
from fastapi_app.alexa import AlexaRequest, parse_turn, render

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Restaurant Finder API", version="1.0.0")

agent: RestaurantFinderAgent = build_agent()


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@app.get("/health")
def health() -> Dict[str, Any]:
    return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}


@app.post("/alexa")
def alexa_webhook(envelope: AlexaRequest) -> Dict[str, Any]:
    turn = parse_turn(envelope)
    expected = (os.getenv("ALEXA_APP_ID") or "").strip()
    if expected and turn.application_id != expected:
        logger.warning("rejected request for application %r", turn.application_id)
        raise HTTPException(status_code=400, detail="invalid applicationId")
    if turn.intent is None:
        return render(None)
    response = agent.handle(turn.user_id, turn.intent)
    return render(response)


def run() -> None:
    import uvicorn

    uvicorn.run(
        "fastapi_app.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


# Entry for local dev
# uvicorn fastapi_app.main:app --reload --port 8000
if __name__ == "__main__":
    run()
