from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from orasu.schemas import RuleKey, ScoreTableRule

RETURN_POINTS = 30000

# floater count -> rank points for 1st..4th
OFFICIAL_TABLES = {
    1: (12.0, -1.0, -3.0, -8.0),
    2: (8.0, 4.0, -4.0, -8.0),
    3: (8.0, 3.0, 1.0, -12.0),
}
WRC_TABLE = (15.0, 5.0, -5.0, -15.0)
WRC_R_TABLE = (30.0, 15.0, -15.0, -30.0)


@dataclass(frozen=True)
class PlayerScore:
    player_index: int
    segment_score: int
    total_score: int


@dataclass(frozen=True)
class RankPoint:
    player_index: int
    rank: int
    rank_points: float
    is_tied: bool


def _split_ties(
    ordered: list[PlayerScore], key: Callable[[PlayerScore], int], table: tuple[float, ...]
) -> list[RankPoint]:
    """Walk players best-first; tied players share the points of the places they occupy."""
    results: list[RankPoint] = []
    rank = 1
    i = 0
    while i < len(ordered):
        group = [ordered[i]]
        i += 1
        while i < len(ordered) and key(ordered[i]) == key(group[0]):
            group.append(ordered[i])
            i += 1
        share = sum(table[rank - 1 : rank - 1 + len(group)]) / len(group)
        for player in group:
            results.append(
                RankPoint(player_index=player.player_index, rank=rank, rank_points=share, is_tied=len(group) > 1)
            )
        rank += len(group)
    return results


def official_rank_points(scores: list[PlayerScore], return_points: int = RETURN_POINTS) -> list[RankPoint]:
    """Rank points decided by the final game alone, sized by how many players float."""

    def segment(p: PlayerScore) -> int:
        return p.segment_score

    ordered = sorted(scores, key=segment, reverse=True)
    floaters = sum(1 for p in scores if p.segment_score >= return_points)
    # everyone level at the return points (or nobody reaching it) falls back to a lone floater
    table = OFFICIAL_TABLES.get(floaters, OFFICIAL_TABLES[1])
    return _split_ties(ordered, segment, table)


def fixed_rank_points(table: tuple[float, ...]) -> Callable[[list[PlayerScore]], list[RankPoint]]:
    def calculate(scores: list[PlayerScore]) -> list[RankPoint]:
        def total(p: PlayerScore) -> int:
            return p.total_score

        return _split_ties(sorted(scores, key=total, reverse=True), total, table)

    return calculate


@dataclass(frozen=True)
class RuleConfig:
    key: RuleKey
    name: str
    description: str
    starting_points: int
    return_points: int
    score_table_rule: ScoreTableRule
    calculate_rank_points: Callable[[list[PlayerScore]], list[RankPoint]]


RULES: dict[RuleKey, RuleConfig] = {
    RuleKey.official: RuleConfig(
        key=RuleKey.official,
        name="日本プロ麻雀連盟公式ルール",
        description="12点加減方式",
        starting_points=30000,
        return_points=RETURN_POINTS,
        score_table_rule=ScoreTableRule.official,
        calculate_rank_points=official_rank_points,
    ),
    RuleKey.wrc: RuleConfig(
        key=RuleKey.wrc,
        name="WRCルール",
        description="順位点：1着+15、2着+5、3着-5、4着-15",
        starting_points=30000,
        return_points=RETURN_POINTS,
        score_table_rule=ScoreTableRule.wrc,
        calculate_rank_points=fixed_rank_points(WRC_TABLE),
    ),
    RuleKey.wrc_r: RuleConfig(
        key=RuleKey.wrc_r,
        name="WRC-Rルール",
        description="順位点：1着+30、2着+15、3着-15、4着-30",
        starting_points=30000,
        return_points=RETURN_POINTS,
        score_table_rule=ScoreTableRule.wrc,
        calculate_rank_points=fixed_rank_points(WRC_R_TABLE),
    ),
}


def get_rule(key: RuleKey | str) -> RuleConfig:
    try:
        return RULES[RuleKey(key)]
    except ValueError as exc:
        raise KeyError(f"Unknown rule: {key}") from exc
