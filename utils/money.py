from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Exact two-decimal amount from a Decimal, int or numeric string.

    Floats go through ``str`` so their binary noise never reaches a sum.
    """
    if value is None:
        raise ValueError("missing money value")
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"invalid money value: {value!r}") from exc


def parse_money(value: str) -> Decimal:
    if value is None:
        raise ValueError("missing money value")

    normalized = value.strip()
    if not normalized:
        raise ValueError("empty money value")

    is_negative = normalized.startswith("(") and normalized.endswith(")")
    normalized = normalized.replace("R$", "").replace("$", "").replace(",", "")

    if is_negative:
        normalized = normalized[1:-1]

    amount = to_money(normalized.strip())
    return -amount if is_negative else amount


def sum_money(amounts) -> Decimal:
    return sum((to_money(a) for a in amounts), ZERO)


def format_money(amount: Decimal) -> str:
    return str(to_money(amount))
