from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal('0.01')


def to_decimal(value):
    """Convert value to Decimal, raising ValueError for anything non-numeric."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a number: {value!r}")
    try:
        # str() keeps floats like 0.1 from dragging binary noise along
        result = Decimal(str(value).strip())
    except (InvalidOperation, TypeError):
        raise ValueError(f"Not a number: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Not a number: {value!r}")
    return result


def money(value):
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def non_negative_decimal(value):
    """Form coercion: invalid input becomes 0, negatives are clamped to 0."""
    try:
        return max(to_decimal(value), Decimal('0'))
    except ValueError:
        return Decimal('0')


def non_negative_int(value):
    try:
        return max(int(to_decimal(value)), 0)
    except ValueError:
        return 0
