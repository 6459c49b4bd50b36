import pytest
from pydantic import ValidationError

from orasu.schemas import ScoreTableRule
from orasu.score_table import (
    RON_FU,
    all_hands,
    find_minimum_hands,
    format_hand,
    ron_payment,
    round_up,
    tsumo_payment,
)


def test_round_up_to_hundreds():
    assert round_up(960) == 1000
    assert round_up(1000) == 1000
    assert round_up(1001) == 1100


def test_ron_general_formula():
    assert ron_payment(30, 1, False) == 1000
    assert ron_payment(40, 1, False) == 1300
    assert ron_payment(25, 2, False) == 1600
    assert ron_payment(30, 1, True) == 1500
    assert ron_payment(60, 3, False) == 7700


def test_ron_clamps_to_mangan():
    assert ron_payment(40, 4, False) == 8000
    assert ron_payment(70, 3, False) == 8000
    assert ron_payment(70, 3, True) == 12000


def test_ron_limit_hands():
    assert ron_payment(30, 5, False) == 8000
    assert ron_payment(30, 6, True) == 18000
    assert ron_payment(30, 10, False) == 16000
    assert ron_payment(30, 12, True) == 36000
    assert ron_payment(30, 13, False) == 32000
    assert ron_payment(30, 26, False) == 64000
    assert ron_payment(30, 39, True) == 144000


def test_thirty_fu_four_han_depends_on_rule():
    assert ron_payment(30, 4, False, ScoreTableRule.official) == 7700
    assert ron_payment(30, 4, True, ScoreTableRule.official) == 11600
    assert ron_payment(30, 4, False, ScoreTableRule.wrc) == 8000
    assert ron_payment(30, 4, True, ScoreTableRule.wrc) == 12000

    official = tsumo_payment(30, 4, False, ScoreTableRule.official)
    assert (official.ko_payment, official.oya_payment) == (2000, 3900)
    assert tsumo_payment(30, 4, True, ScoreTableRule.official).all_payment == 3900
    wrc = tsumo_payment(30, 4, False, ScoreTableRule.wrc)
    assert (wrc.ko_payment, wrc.oya_payment) == (2000, 4000)
    assert tsumo_payment(30, 4, True, ScoreTableRule.wrc).all_payment == 4000


def test_tsumo_general_formula():
    payment = tsumo_payment(30, 1, False)
    assert payment.all_payment is None
    assert (payment.ko_payment, payment.oya_payment) == (300, 500)
    assert payment.total == 1100

    pinfu = tsumo_payment(20, 2, False)
    assert (pinfu.ko_payment, pinfu.oya_payment) == (400, 700)

    dealer = tsumo_payment(60, 3, True)
    assert dealer.all_payment == 3900
    assert dealer.total == 11700


def test_tsumo_clamps_to_mangan_on_total_income():
    non_dealer = tsumo_payment(70, 3, False)
    assert (non_dealer.ko_payment, non_dealer.oya_payment) == (2000, 4000)
    assert tsumo_payment(70, 3, True).all_payment == 4000
    below = tsumo_payment(60, 3, False)
    assert (below.ko_payment, below.oya_payment) == (2000, 3900)


def test_tsumo_yakuman_multiples():
    assert tsumo_payment(30, 13, True).all_payment == 16000
    double = tsumo_payment(30, 26, False)
    assert (double.ko_payment, double.oya_payment) == (16000, 32000)


@pytest.mark.parametrize("fu,han", [(10, 3), (35, 2), (30, 0), (30, 40)])
def test_invalid_hand_fails_loudly(fu, han):
    with pytest.raises(ValueError):
        ron_payment(fu, han, False)
    with pytest.raises(ValueError):
        tsumo_payment(fu, han, False)


def test_payments_are_multiples_of_100_and_tsumo_tracks_ron():
    for rule in ScoreTableRule:
        for is_dealer in (True, False):
            for han in range(1, 40):
                for fu in RON_FU[1:]:
                    ron = ron_payment(fu, han, is_dealer, rule)
                    tsumo = tsumo_payment(fu, han, is_dealer, rule)
                    paid = [p for p in (tsumo.all_payment, tsumo.ko_payment, tsumo.oya_payment) if p is not None]
                    assert ron > 0 and ron % 100 == 0
                    assert all(p > 0 and p % 100 == 0 for p in paid)
                    if han >= 5:
                        assert tsumo.total == ron
                    else:
                        assert abs(tsumo.total - ron) <= 300


@pytest.mark.parametrize("is_dealer", [True, False])
@pytest.mark.parametrize("is_tsumo", [True, False])
def test_all_hands_strictly_ascending(is_dealer, is_tsumo):
    hands = all_hands(is_dealer, is_tsumo)
    scores = [h.score for h in hands]
    assert scores == sorted(set(scores))


def test_all_hands_keeps_cheapest_combination():
    hands = all_hands(False, False)
    assert [(h.fu, h.han, h.score) for h in hands[:4]] == [(30, 1, 1000), (40, 1, 1300), (50, 1, 1600), (60, 1, 2000)]
    assert hands[-1].score == 32000 * 3
    assert all(h.fu != 25 or h.han >= 2 for h in hands)


def test_all_hands_tsumo_skips_one_han_pinfu():
    hands = all_hands(False, True)
    assert hands[0].fu == 30 and hands[0].han == 1
    assert all(h.fu != 20 or h.han >= 2 for h in hands)


def test_find_minimum_hands_filters_by_target():
    hands = find_minimum_hands(7700, False, False)
    assert hands[0].score == 7700
    assert all(h.score >= 7700 for h in hands)


def test_format_hand():
    assert format_hand(30, 2) == "30符2翻"
    assert format_hand(30, 5) == "満貫"
    assert format_hand(30, 7) == "跳満"
    assert format_hand(30, 10) == "倍満"
    assert format_hand(30, 11) == "三倍満"
    assert format_hand(30, 13) == "役満"
    assert format_hand(30, 26) == "二倍役満"
    assert format_hand(30, 39) == "三倍役満"


def test_hand_candidates_are_immutable():
    candidate = all_hands(False, False)[0]
    with pytest.raises(ValidationError):
        candidate.score = 0
