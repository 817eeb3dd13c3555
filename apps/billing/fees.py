# billing/fees.py
from decimal import Decimal, ROUND_CEILING

# GP: platform fee paid by the customer on top of the freelancer's price
PLATFORM_FEE_RATE = Decimal("0.03")


def _as_decimal(value):
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 0.1 from dragging binary noise into the fee
    return Decimal(str(value or 0))


def calculate_fee(base_price) -> Decimal:
    """
    Platform fee for a quoted price, always rounded up to a whole baht.
    Example: 350 -> 11 (10.5 rounded up), 1000 -> 30.
    """
    price = _as_decimal(base_price)
    if price <= 0:
        return Decimal("0")
    return (price * PLATFORM_FEE_RATE).to_integral_value(rounding=ROUND_CEILING)


def quote_price(base_price) -> dict:
    """
    Fee breakdown used by every screen that shows a price.
    ``display`` is False when there is nothing to quote yet.
    """
    price = _as_decimal(base_price)
    fee = calculate_fee(price)
    return {
        "base_price": price,
        "fee_amount": fee,
        "total": price + fee,
        "fee_rate": PLATFORM_FEE_RATE,
        "display": price > 0,
    }
