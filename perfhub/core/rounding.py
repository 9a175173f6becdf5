from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, float]


def round_half_up(value: Number, places: int = 0) -> Number:
    """
    Round with ties going up, the way the dashboard displays numbers.

    Builtin ``round`` sends ties to the even neighbour (``round(4.25, 1)``
    is 4.2); every KPI and report figure here expects 4.3.

    Returns:
        An int when ``places`` is 0, otherwise a float
    """
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


def format_one_decimal(value: Number) -> str:
    """Fixed one-decimal text, ties rounded up (``6.25`` -> ``"6.3"``)."""
    return f"{round_half_up(value, 1):.1f}"
