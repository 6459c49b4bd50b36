from __future__ import annotations

import logging
from io import BytesIO

from fastapi import FastAPI, File, HTTPException, UploadFile
from PIL import Image

from orasu.calculator import calculate_win_conditions, max_ron_allowed
from orasu.config import settings
from orasu.rules import RULES
from orasu.schemas import (
    ConditionsResponse,
    GameState,
    ImageMeta,
    MaxRonRequest,
    MaxRonResponse,
    RuleInfo,
    ScoreRecognitionResponse,
)
from orasu.score_extraction import extract_scores_from_image
from orasu.validators import validate_game_state

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="All-Last Win Condition Calculator", version="0.1.0")


@app.get("/")
def root() -> dict[str, str]:
    return {
        "message": "All-Last Win Condition Calculator API",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/v1/rules", response_model=list[RuleInfo])
def list_rules() -> list[RuleInfo]:
    return [
        RuleInfo(
            key=rule.key,
            name=rule.name,
            description=rule.description,
            starting_points=rule.starting_points,
            return_points=rule.return_points,
        )
        for rule in RULES.values()
    ]


@app.post("/api/v1/conditions", response_model=ConditionsResponse)
def conditions(state: GameState) -> ConditionsResponse:
    validate_game_state(state)
    logger.info("calculating conditions: rule=%s dealer=%s", state.rule.value, state.dealer_index)
    return ConditionsResponse(rule=state.rule, players=calculate_win_conditions(state))


@app.post("/api/v1/max-ron", response_model=MaxRonResponse)
def max_ron(req: MaxRonRequest) -> MaxRonResponse:
    validate_game_state(req.game_state)
    limits = max_ron_allowed(req.game_state, req.player_index)
    return MaxRonResponse(player_index=req.player_index, limits=limits)


@app.post("/api/v1/recognize-scores", response_model=ScoreRecognitionResponse)
async def recognize_scores(image: UploadFile = File(...)) -> ScoreRecognitionResponse:
    image_bytes = await image.read()
    if not image_bytes:
        raise HTTPException(status_code=400, detail="image is required")

    try:
        img = Image.open(BytesIO(image_bytes))
        width, height = img.size
    except Exception as exc:
        raise HTTPException(status_code=400, detail="invalid image file") from exc

    payload = extract_scores_from_image(image_bytes)
    return ScoreRecognitionResponse(
        image=ImageMeta(width=width, height=height),
        scores=payload["scores"],
        raw_text=payload["raw_text"],
        warnings=payload["warnings"],
    )
