'''
weldbid.money
금액은 DB에 정수 센트(amount_cents)로 저장합니다. float 쓰지 않음.
API 쪽은 Decimal 달러 금액(소수점 2자리까지)을 주고받습니다.
'''

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from weldbid.errors import InvalidAmount

CENT = Decimal("0.01")

# 입찰 상한 $1,000,000.00 (amount_cents는 INTEGER 컬럼이라 int4 범위 안에 있어야 함)
MAX_AMOUNT_CENTS = 100_000_000
MAX_AMOUNT = Decimal(MAX_AMOUNT_CENTS) / 100


def to_cents(amount: Decimal | int | str) -> int:
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise InvalidAmount(f"Invalid amount: {amount!r}")

    if not value.is_finite():
        raise InvalidAmount(f"Invalid amount: {amount!r}")
    if value <= 0:
        raise InvalidAmount("Bid amount must be greater than 0")
    if value > MAX_AMOUNT:
        raise InvalidAmount(f"Bid amount cannot exceed {MAX_AMOUNT:.2f}")

    try:
        quantized = value.quantize(CENT)
    except InvalidOperation:
        raise InvalidAmount(f"Invalid amount: {amount!r}")
    if value != quantized:
        raise InvalidAmount("Bid amount cannot have more than 2 decimal places")

    return int(quantized * 100)


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


def mean_of_cents(amounts: list[int]) -> Decimal | None:
    """
    센트 금액들의 평균을 달러로 반환 (센트 단위 half-even 반올림).
    화면 표시용. 낙찰 계산에는 쓰지 않음.
    """
    if not amounts:
        return None
    mean_cents = Decimal(sum(amounts)) / Decimal(len(amounts))
    return (mean_cents / 100).quantize(CENT, rounding=ROUND_HALF_EVEN)
