"""
Money coercion shared by services.

Amounts are ``Decimal`` end to end: columns map ``Decimal`` to
``Numeric(38, 9)`` (see ``db.base``) and service inputs go through
``to_money`` before they are validated or stored.  Floats are refused.
"""

from decimal import Decimal, InvalidOperation

ZERO = Decimal("0")


def to_money(value: Decimal | int | str | None) -> Decimal:
    """
    Coerce an input amount to ``Decimal``; ``None`` becomes zero.

    Raises:
        TypeError: for floats, or for strings that are not numbers.
    """
    if value is None:
        return ZERO
    if isinstance(value, float):
        raise TypeError("float amounts are not accepted; use Decimal or str")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        raise TypeError(f"not a monetary amount: {value!r}") from exc
