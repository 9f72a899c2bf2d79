"""Unit tests for the mean-proximity winner selection."""

import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from fractions import Fraction
from itertools import permutations

import pytest

from weldbid.award import scaled_distance, select_winner

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@dataclass
class FakeBid:
    id: str
    amount_cents: int
    created_at: datetime


def bid(bid_id, dollars, minute=0):
    return FakeBid(id=bid_id, amount_cents=int(round(dollars * 100)), created_at=T0 + timedelta(minutes=minute))


class TestSelectWinner:
    def test_empty_bid_set_has_no_winner(self):
        assert select_winner([]) is None

    def test_single_bid_wins(self):
        only = bid("a", 420)
        selection = select_winner([only])
        assert selection.bid is only
        assert selection.scaled_distance == 0

    def test_bid_equal_to_mean_wins(self):
        bids = [bid("low", 100, 0), bid("mid", 200, 1), bid("high", 300, 2)]
        selection = select_winner(bids)
        assert selection.bid.id == "mid"
        assert selection.total_cents == 60000
        assert selection.bid_count == 3

    def test_closest_to_mean_not_lowest(self):
        # mean = 260, 250 is closest
        bids = [bid("a", 100, 0), bid("b", 250, 1), bid("c", 300, 2), bid("d", 390, 3)]
        assert select_winner(bids).bid.id == "b"

    def test_two_way_tie_goes_to_earlier_bid(self):
        # mean = 175, both 75 away
        early = bid("z-early", 250, 0)
        late = bid("a-late", 100, 5)
        for order in permutations([early, late]):
            assert select_winner(list(order)).bid is early

    def test_tie_on_time_goes_to_smallest_id(self):
        b1 = bid("bbb", 100, 0)
        b2 = bid("aaa", 300, 0)
        for order in permutations([b1, b2]):
            assert select_winner(list(order)).bid.id == "aaa"

    def test_tie_break_independent_of_listing_order(self):
        bids = [bid("w", 100, 3), bid("x", 300, 1), bid("y", 150, 4), bid("z", 250, 2)]
        # mean = 200: x,w tie at 100 away; y,z tie at 50 away -> z is earlier
        winners = {select_winner(list(p)).bid.id for p in permutations(bids)}
        assert winners == {"z"}

    def test_cent_amounts_compare_exactly(self):
        # 0.10 + 0.20 + 0.30 is 0.6000000000000001 in binary floats
        bids = [
            FakeBid("a", 10, T0),
            FakeBid("b", 20, T0 + timedelta(seconds=1)),
            FakeBid("c", 30, T0 + timedelta(seconds=2)),
        ]
        assert select_winner(bids).bid.id == "b"

    def test_non_integer_mean(self):
        # mean = (1 + 2 + 4) / 3 = 2.33 cents
        bids = [
            FakeBid("a", 1, T0),
            FakeBid("b", 2, T0 + timedelta(seconds=1)),
            FakeBid("c", 4, T0 + timedelta(seconds=2)),
        ]
        assert select_winner(bids).bid.id == "b"

    @pytest.mark.parametrize("seed", range(25))
    def test_winner_is_never_farther_from_mean_than_any_bid(self, seed):
        rng = random.Random(seed)
        count = rng.randint(1, 12)
        bids = [
            FakeBid(
                id=f"bid-{i:02d}",
                amount_cents=rng.randint(1, 500_000),
                created_at=T0 + timedelta(seconds=rng.randint(0, 5)),
            )
            for i in range(count)
        ]
        mean = Fraction(sum(b.amount_cents for b in bids), count)

        winner = select_winner(bids).bid

        winner_distance = abs(winner.amount_cents - mean)
        for other in bids:
            assert winner_distance <= abs(other.amount_cents - mean)


def test_scaled_distance_is_n_times_distance_to_mean():
    amounts = [10000, 25000]
    total = sum(amounts)
    assert scaled_distance(10000, total, 2) == 15000
    assert scaled_distance(25000, total, 2) == 15000
