from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, conint


class RuleKey(str, Enum):
    official = "official"
    wrc = "wrc"
    wrc_r = "wrcR"


class ScoreTableRule(str, Enum):
    official = "official"
    wrc = "wrc"


class GameState(BaseModel):
    players: list[str] = Field(default_factory=lambda: ["東家", "南家", "西家", "北家"], min_length=4, max_length=4)
    carried_totals: list[int] = Field(min_length=4, max_length=4)
    current_scores: list[int] = Field(min_length=4, max_length=4)
    dealer_index: conint(ge=0, le=3) = 0
    riichi_sticks: conint(ge=0) = 0
    honba_sticks: conint(ge=0) = 0
    rule: RuleKey = RuleKey.official


class HandCandidate(BaseModel):
    fu: int
    han: int
    score: int

    model_config = ConfigDict(frozen=True)


class TsumoPayment(BaseModel):
    all_payment: int | None = None
    ko_payment: int | None = None
    oya_payment: int | None = None

    @property
    def total(self) -> int:
        if self.all_payment is not None:
            return self.all_payment * 3
        return self.ko_payment * 2 + self.oya_payment


class SimulatedTotal(BaseModel):
    player_index: int
    total: float
    rank_point: float


class CurrentTotal(BaseModel):
    player_index: int
    current_score: int
    carried_total: int
    rank_point: float
    total: float


class ConditionResult(BaseModel):
    possible: bool
    from_player_index: int | None = None
    fu: int | None = None
    han: int | None = None
    description: str | None = None
    payment: TsumoPayment | None = None
    score: int | None = None
    winner_gain: int | None = None
    reason: str | None = None

    @classmethod
    def unattainable(cls, reason: str, from_player_index: int | None = None) -> ConditionResult:
        return cls(possible=False, reason=reason, from_player_index=from_player_index)


class TargetCondition(BaseModel):
    possible: bool
    tsumo: ConditionResult
    ron: list[ConditionResult] = Field(default_factory=list)


class PlayerConditions(BaseModel):
    to_first: TargetCondition
    from_third_to_second: TargetCondition | None = None
    from_fourth_to_second: TargetCondition | None = None


class PlayerReport(BaseModel):
    player_index: int
    player_name: str
    current_score: int
    carried_total: int
    rank_point: float
    projected_total_score: float
    current_rank: int
    is_dealer: bool
    conditions: PlayerConditions


class RonLimitResult(BaseModel):
    winner_index: int
    max_allowed: int
    can_survive: bool


class RuleInfo(BaseModel):
    key: RuleKey
    name: str
    description: str
    starting_points: int
    return_points: int


class ConditionsResponse(BaseModel):
    status: str = "ok"
    rule: RuleKey
    players: list[PlayerReport]


class MaxRonRequest(BaseModel):
    game_state: GameState
    player_index: conint(ge=0, le=3)


class MaxRonResponse(BaseModel):
    status: str = "ok"
    player_index: int
    limits: list[RonLimitResult]


class ImageMeta(BaseModel):
    width: int
    height: int


class ScoreRecognitionResponse(BaseModel):
    status: str = "ok"
    image: ImageMeta
    scores: list[int]
    raw_text: str = ""
    warnings: list[str] = Field(default_factory=list)
