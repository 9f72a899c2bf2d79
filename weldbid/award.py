'''
weldbid.award의 Docstring
낙찰 규칙 (평균가 낙찰): 입찰가 평균에 가장 가까운 입찰이 이깁니다.
DB도 HTTP도 모르는 순수 계산만 합니다.

나눗셈을 하지 않습니다. 입찰 n개, 합계 total일 때
|amount - total/n| 대신 |n*amount - total| (= n배 거리)를 정수 센트로 비교.
동점이면 먼저 낸 입찰(created_at), 그래도 같으면 bid id 사전순으로 작은 쪽.
'''

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, Sequence


class BidLike(Protocol):
    id: str
    amount_cents: int
    created_at: datetime


@dataclass(frozen=True)
class Selection:
    bid: BidLike
    total_cents: int
    bid_count: int

    @property
    def scaled_distance(self) -> int:
        return scaled_distance(self.bid.amount_cents, self.total_cents, self.bid_count)


def scaled_distance(amount_cents: int, total_cents: int, bid_count: int) -> int:
    return abs(bid_count * amount_cents - total_cents)


def _sort_key(bid: BidLike, total_cents: int, bid_count: int):
    return (
        scaled_distance(bid.amount_cents, total_cents, bid_count),
        bid.created_at,
        bid.id,
    )


def select_winner(bids: Sequence[BidLike]) -> Selection | None:
    """평균에 가장 가까운 입찰을 고릅니다. 입찰이 없으면 None."""
    if not bids:
        return None
    total = sum(b.amount_cents for b in bids)
    count = len(bids)
    winner = min(bids, key=lambda b: _sort_key(b, total, count))
    return Selection(bid=winner, total_cents=total, bid_count=count)
