from __future__ import annotations

from orasu.schemas import HandCandidate, ScoreTableRule, TsumoPayment

ALLOWED_FU = (20, 25, 30, 40, 50, 60, 70)
TSUMO_FU = (20, 30, 40, 50, 60, 70)
RON_FU = (25, 30, 40, 50, 60, 70)
MAX_HAN = 39

YAKUMAN_RON = {True: 48000, False: 32000}
MANGAN_THRESHOLD = {True: 12000, False: 8000}

# han -> (dealer, non-dealer)
_LIMIT_RON = {
    5: (12000, 8000),
    6: (18000, 12000),
    7: (18000, 12000),
    8: (24000, 16000),
    9: (24000, 16000),
    10: (24000, 16000),
    11: (36000, 24000),
    12: (36000, 24000),
}
# han -> (non-dealer pay, dealer pay); a dealer win is paid as the dealer pay by everyone
_LIMIT_TSUMO = {
    5: (2000, 4000),
    6: (3000, 6000),
    7: (3000, 6000),
    8: (4000, 8000),
    9: (4000, 8000),
    10: (4000, 8000),
    11: (6000, 12000),
    12: (6000, 12000),
}

_YAKUMAN_NAMES = {1: "役満", 2: "二倍役満", 3: "三倍役満"}
_LIMIT_NAMES = {5: "満貫", 6: "跳満", 7: "跳満", 8: "倍満", 9: "倍満", 10: "倍満", 11: "三倍満", 12: "三倍満"}


def round_up(points: int) -> int:
    return ((points + 99) // 100) * 100


def _check_hand(fu: int, han: int) -> None:
    if fu not in ALLOWED_FU:
        raise ValueError(f"Unsupported fu: {fu}")
    if not 1 <= han <= MAX_HAN:
        raise ValueError(f"han must be between 1 and {MAX_HAN}: {han}")


def _base_points(fu: int, han: int) -> int:
    return fu * (2 ** (han + 2))


def mangan_ron_payment(han: int, is_dealer: bool) -> int:
    dealer, non_dealer = _LIMIT_RON.get(han, (YAKUMAN_RON[True], YAKUMAN_RON[False]))
    return dealer if is_dealer else non_dealer


def mangan_tsumo_payment(han: int, is_dealer: bool) -> TsumoPayment:
    ko, oya = _LIMIT_TSUMO.get(han, (8000, 16000))
    if is_dealer:
        return TsumoPayment(all_payment=oya)
    return TsumoPayment(ko_payment=ko, oya_payment=oya)


def ron_payment(fu: int, han: int, is_dealer: bool, rule: ScoreTableRule = ScoreTableRule.official) -> int:
    _check_hand(fu, han)
    if han >= 13:
        return YAKUMAN_RON[is_dealer] * (han // 13)
    if han >= 5:
        return mangan_ron_payment(han, is_dealer)

    if fu == 30 and han == 4:
        if rule == ScoreTableRule.wrc:
            return 12000 if is_dealer else 8000
        return 11600 if is_dealer else 7700

    points = round_up(_base_points(fu, han) * (6 if is_dealer else 4))
    # 1-4 han never pays more than mangan
    return min(points, MANGAN_THRESHOLD[is_dealer])


def tsumo_payment(fu: int, han: int, is_dealer: bool, rule: ScoreTableRule = ScoreTableRule.official) -> TsumoPayment:
    _check_hand(fu, han)
    if han >= 13:
        multiplier = han // 13
        if is_dealer:
            return TsumoPayment(all_payment=16000 * multiplier)
        return TsumoPayment(ko_payment=8000 * multiplier, oya_payment=16000 * multiplier)
    if han >= 5:
        return mangan_tsumo_payment(han, is_dealer)

    if fu == 30 and han == 4:
        oya = 4000 if rule == ScoreTableRule.wrc else 3900
        if is_dealer:
            return TsumoPayment(all_payment=oya)
        return TsumoPayment(ko_payment=2000, oya_payment=oya)

    base = _base_points(fu, han)
    if is_dealer:
        payment = TsumoPayment(all_payment=round_up(base * 2))
    else:
        payment = TsumoPayment(ko_payment=round_up(base), oya_payment=round_up(base * 2))

    if payment.total >= MANGAN_THRESHOLD[is_dealer]:
        return mangan_tsumo_payment(5, is_dealer)
    return payment


def all_hands(is_dealer: bool, is_tsumo: bool, rule: ScoreTableRule = ScoreTableRule.official) -> list[HandCandidate]:
    """Every distinct payout in ascending order, each with its cheapest (han, fu)."""
    candidates: list[HandCandidate] = []
    for han in range(1, MAX_HAN + 1):
        for fu in TSUMO_FU if is_tsumo else RON_FU:
            # pinfu tsumo and chiitoitsu need a second han
            if fu in (20, 25) and han < 2:
                continue
            if is_tsumo:
                score = tsumo_payment(fu, han, is_dealer, rule).total
            else:
                score = ron_payment(fu, han, is_dealer, rule)
            candidates.append(HandCandidate(fu=fu, han=han, score=score))

    candidates.sort(key=lambda c: (c.score, c.han, c.fu))
    seen: set[int] = set()
    unique: list[HandCandidate] = []
    for candidate in candidates:
        if candidate.score in seen:
            continue
        seen.add(candidate.score)
        unique.append(candidate)
    return unique


def find_minimum_hands(
    target_score: int, is_dealer: bool, is_tsumo: bool, rule: ScoreTableRule = ScoreTableRule.official
) -> list[HandCandidate]:
    return [c for c in all_hands(is_dealer, is_tsumo, rule) if c.score >= target_score]


def format_hand(fu: int, han: int) -> str:
    if han >= 13:
        count = han // 13
        return _YAKUMAN_NAMES.get(count, f"{count}倍役満")
    if han in _LIMIT_NAMES:
        return _LIMIT_NAMES[han]
    return f"{fu}符{han}翻"
