import math


def round_half_up(value, digits=0):
    """
    Round halves towards positive infinity, so 2.5 -> 3 and -2.5 -> -2.

    Python's round() uses banker's rounding; dashboards expect the
    schoolbook behaviour. Returns an int when ``digits`` is 0.
    """
    if value is None:
        return None
    if digits == 0:
        return int(math.floor(value + 0.5))
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def percentage(part, whole):
    """Whole-number share of ``whole``; 0 when there is nothing to share"""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)


def plain_number(value):
    """Drop a trailing .0 so amounts read 150 rather than 150.0 in messages"""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
