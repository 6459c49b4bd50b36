from fastapi import HTTPException

from orasu.calculator import RIICHI_STICK
from orasu.schemas import GameState

TABLE_TOTAL = 120000


def _check_hundreds(label: str, values: list[int]) -> None:
    for value in values:
        if value % 100 != 0:
            raise HTTPException(status_code=422, detail=f"{label} must be multiples of 100: {value}")


def validate_game_state(state: GameState) -> None:
    _check_hundreds("current_scores", state.current_scores)
    _check_hundreds("carried_totals", state.carried_totals)

    deposited = state.riichi_sticks * RIICHI_STICK
    expected = TABLE_TOTAL - deposited
    total = sum(state.current_scores)
    if total != expected:
        detail = f"current_scores must sum to {expected} (got {total})"
        if deposited:
            detail += f"; {state.riichi_sticks} riichi sticks ({deposited} points) are on the table"
        raise HTTPException(status_code=422, detail=detail)
