from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

RATING_PLACES = Decimal("0.001")


def compute_rating(likes: int, viewers: int) -> float:
    """likes / viewers rounded half-up to 3 places; 0.0 when nobody viewed.

    Mirrors the generated ``users.rating`` column (``ROUND(numeric, 3)``).
    """
    if viewers <= 0:
        return 0.0
    ratio = Decimal(likes) / Decimal(viewers)
    return float(ratio.quantize(RATING_PLACES, rounding=ROUND_HALF_UP))
