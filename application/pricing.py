"""Total price resolution"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from domain.errors import ValidationError
from domain.value_objects import DateRange

CENTS = Decimal("0.01")


def count_nights(start_date, end_date) -> int:
    """Nights between two UTC calendar days; rejects anything below one"""
    if end_date <= start_date:
        raise ValidationError("End date must be after the start date.")
    return DateRange(start_date=start_date, end_date=end_date).nights()


def resolve_total_price(
    nights: int,
    nightly_rate: Optional[Decimal] = None,
    total_price: Optional[Decimal] = None,
    price: Optional[Decimal] = None
) -> Optional[Decimal]:
    """Price to persist for a stay.

    Precedence: explicit total_price (zero included), then the legacy price
    field, then nightly_rate x nights rounded to cents, else None.
    """
    if nights < 1:
        raise ValidationError("End date must be after the start date.")
    if total_price is not None:
        return total_price
    if price is not None:
        return price
    if nightly_rate is not None:
        try:
            return (nightly_rate * nights).quantize(CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValidationError('Field "nightly_rate" is too large.')
    return None
