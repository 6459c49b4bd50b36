from __future__ import annotations

import logging
from collections.abc import Sequence

from orasu.rules import PlayerScore, RuleConfig, get_rule
from orasu.schemas import (
    ConditionResult,
    CurrentTotal,
    GameState,
    PlayerConditions,
    PlayerReport,
    RonLimitResult,
    SimulatedTotal,
    TargetCondition,
)
from orasu.score_table import YAKUMAN_RON, all_hands, format_hand, ron_payment, tsumo_payment

logger = logging.getLogger(__name__)

RIICHI_STICK = 1000
HONBA_RON = 300
HONBA_TSUMO_EACH = 100
RANK_POINT_UNIT = 1000
SURVIVAL_RANK = 2
UNATTAINABLE = "unattainable even at the maximal tier"


def _rank_points(current_scores: Sequence[int], carried_totals: Sequence[int], rule: RuleConfig) -> dict[int, float]:
    scores = [
        PlayerScore(player_index=i, segment_score=score, total_score=carried_totals[i] + score)
        for i, score in enumerate(current_scores)
    ]
    return {rp.player_index: rp.rank_points * RANK_POINT_UNIT for rp in rule.calculate_rank_points(scores)}


def current_totals(current_scores: Sequence[int], carried_totals: Sequence[int], rule: RuleConfig) -> list[CurrentTotal]:
    rank_points = _rank_points(current_scores, carried_totals, rule)
    return [
        CurrentTotal(
            player_index=i,
            current_score=score,
            carried_total=carried_totals[i],
            rank_point=rank_points[i],
            total=carried_totals[i] + score + rank_points[i],
        )
        for i, score in enumerate(current_scores)
    ]


def simulate_outcome(
    current_scores: Sequence[int],
    carried_totals: Sequence[int],
    winner_index: int,
    winner_gain: int,
    losers: dict[int, int],
    rule: RuleConfig,
) -> list[SimulatedTotal]:
    """Final totals after one win. The inputs are never modified."""
    scores = list(current_scores)
    scores[winner_index] += winner_gain
    for loser_index, payment in losers.items():
        scores[loser_index] -= payment

    rank_points = _rank_points(scores, carried_totals, rule)
    return [
        SimulatedTotal(player_index=i, total=carried_totals[i] + score + rank_points[i], rank_point=rank_points[i])
        for i, score in enumerate(scores)
    ]


def rank_by_total(totals: Sequence[CurrentTotal | SimulatedTotal], player_index: int) -> int:
    mine = totals[player_index].total
    return sum(1 for t in totals if t.total > mine) + 1


def check_rank(outcome: Sequence[SimulatedTotal], winner_index: int, target_rank: int) -> bool:
    """True only when the winner is at or above target_rank and shares the total with nobody."""
    winner_total = outcome[winner_index].total
    tied = any(o.total == winner_total for o in outcome if o.player_index != winner_index)
    return rank_by_total(outcome, winner_index) <= target_rank and not tied


def tsumo_condition(state: GameState, winner_index: int, target_rank: int, rule: RuleConfig) -> ConditionResult:
    is_dealer = winner_index == state.dealer_index
    stick_bonus = state.riichi_sticks * RIICHI_STICK + state.honba_sticks * HONBA_RON
    honba_each = state.honba_sticks * HONBA_TSUMO_EACH

    for hand in all_hands(is_dealer, True, rule.score_table_rule):
        payment = tsumo_payment(hand.fu, hand.han, is_dealer, rule.score_table_rule)
        winner_gain = payment.total + stick_bonus
        losers: dict[int, int] = {}
        for i in range(4):
            if i == winner_index:
                continue
            if payment.all_payment is not None:
                losers[i] = payment.all_payment + honba_each
            elif i == state.dealer_index:
                losers[i] = payment.oya_payment + honba_each
            else:
                losers[i] = payment.ko_payment + honba_each

        outcome = simulate_outcome(
            state.current_scores, state.carried_totals, winner_index, winner_gain, losers, rule
        )
        if check_rank(outcome, winner_index, target_rank):
            return ConditionResult(
                possible=True,
                fu=hand.fu,
                han=hand.han,
                description=format_hand(hand.fu, hand.han),
                payment=payment,
                winner_gain=winner_gain,
            )
    return ConditionResult.unattainable(UNATTAINABLE)


def ron_condition(
    state: GameState, winner_index: int, loser_index: int, target_rank: int, rule: RuleConfig
) -> ConditionResult:
    is_dealer = winner_index == state.dealer_index
    honba_bonus = state.honba_sticks * HONBA_RON

    for hand in all_hands(is_dealer, False, rule.score_table_rule):
        score = ron_payment(hand.fu, hand.han, is_dealer, rule.score_table_rule)
        winner_gain = score + state.riichi_sticks * RIICHI_STICK + honba_bonus
        outcome = simulate_outcome(
            state.current_scores,
            state.carried_totals,
            winner_index,
            winner_gain,
            {loser_index: score + honba_bonus},
            rule,
        )
        if check_rank(outcome, winner_index, target_rank):
            return ConditionResult(
                possible=True,
                from_player_index=loser_index,
                fu=hand.fu,
                han=hand.han,
                description=format_hand(hand.fu, hand.han),
                score=score,
                winner_gain=winner_gain,
            )
    return ConditionResult.unattainable(UNATTAINABLE, from_player_index=loser_index)


def condition_for(
    state: GameState, player_index: int, target_rank: int, rule: RuleConfig | None = None
) -> TargetCondition:
    rule = rule or get_rule(state.rule)
    logger.debug("searching conditions: player=%s target_rank=%s rule=%s", player_index, target_rank, rule.key.value)

    tsumo = tsumo_condition(state, player_index, target_rank, rule)
    ron = [
        ron_condition(state, player_index, loser_index, target_rank, rule)
        for loser_index in range(4)
        if loser_index != player_index
    ]
    possible = tsumo.possible or any(r.possible for r in ron)
    if not possible:
        logger.info("player %s cannot reach rank %s with any single win", player_index, target_rank)
    return TargetCondition(possible=possible, tsumo=tsumo, ron=ron)


def calculate_win_conditions(state: GameState) -> list[PlayerReport]:
    rule = get_rule(state.rule)
    totals = current_totals(state.current_scores, state.carried_totals, rule)

    reports: list[PlayerReport] = []
    for i in range(4):
        current_rank = rank_by_total(totals, i)
        conditions = PlayerConditions(
            to_first=condition_for(state, i, 1, rule),
            from_third_to_second=condition_for(state, i, 2, rule) if current_rank == 3 else None,
            from_fourth_to_second=condition_for(state, i, 2, rule) if current_rank == 4 else None,
        )
        reports.append(
            PlayerReport(
                player_index=i,
                player_name=state.players[i],
                current_score=state.current_scores[i],
                carried_total=state.carried_totals[i],
                rank_point=totals[i].rank_point,
                projected_total_score=totals[i].total,
                current_rank=current_rank,
                is_dealer=i == state.dealer_index,
                conditions=conditions,
            )
        )
    return reports


def survives(state: GameState, loser_index: int, winner_index: int, payment: int, rule: RuleConfig) -> bool:
    """Whether the payer is still guaranteed 2nd or better after dealing in for payment."""
    outcome = simulate_outcome(
        state.current_scores,
        state.carried_totals,
        winner_index,
        payment + state.riichi_sticks * RIICHI_STICK,
        {loser_index: payment},
        rule,
    )
    mine = outcome[loser_index].total
    at_or_above = sum(1 for o in outcome if o.player_index != loser_index and o.total >= mine)
    return at_or_above + 1 <= SURVIVAL_RANK


def max_ron_allowed(state: GameState, losing_player_index: int) -> list[RonLimitResult]:
    rule = get_rule(state.rule)
    limits: list[RonLimitResult] = []
    for winner_index in range(4):
        if winner_index == losing_player_index:
            continue
        if not survives(state, losing_player_index, winner_index, 0, rule):
            limits.append(RonLimitResult(winner_index=winner_index, max_allowed=0, can_survive=False))
            continue

        ceiling = YAKUMAN_RON[winner_index == state.dealer_index]
        if survives(state, losing_player_index, winner_index, ceiling, rule):
            limits.append(RonLimitResult(winner_index=winner_index, max_allowed=ceiling, can_survive=True))
            continue

        # paying more never improves the payer's rank: lo always survives, hi never does
        lo, hi = 0, ceiling
        while hi - lo > 100:
            mid = (lo + hi) // 2 // 100 * 100
            if survives(state, losing_player_index, winner_index, mid, rule):
                lo = mid
            else:
                hi = mid
        logger.debug("player %s can pay player %s up to %s", losing_player_index, winner_index, lo)
        limits.append(RonLimitResult(winner_index=winner_index, max_allowed=lo, can_survive=True))
    return limits
