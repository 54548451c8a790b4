"""
Membership Pricing

Derived state for membership plans:

- price lookup: the ``costo`` a plan charges for one billing cadence, or
  ``None`` when the plan has no matching option ("contact for price");
- end-date derivation: the date a membership started on ``fecha_inicio``
  with a given cadence runs out;
- the write-path rule that keeps a company's stored end date consistent
  with its start date and cadence.

Everything here is pure; no database access.
"""

import calendar
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional

MONTHLY = "mensual"
YEARLY = "anual"

_PERIOD_SUFFIX = {MONTHLY: "mes", YEARLY: "año"}

# Company fields involved in end-date derivation
START_FIELD = "fecha_inicio_membresia"
END_FIELD = "fecha_fin_membresia"
PERIOD_FIELD = "membership_periodicidad"


def _normalize_period(periodicidad: Any) -> Optional[str]:
    if periodicidad is None:
        return None
    # Enum members carry the wire value
    value = getattr(periodicidad, "value", periodicidad)
    if not isinstance(value, str):
        return None
    return value.strip().lower() or None


def _option_field(option: Any, name: str) -> Any:
    if isinstance(option, Mapping):
        return option.get(name)
    return getattr(option, name, None)


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def find_price(opciones_precios: Optional[Iterable[Any]], periodicidad: Any) -> Optional[Decimal]:
    """Price of the option whose cadence matches ``periodicidad``.

    Matching is case-insensitive. Options may be dicts (as stored) or
    ``PriceOption`` schemas. Returns ``None`` for an empty option list, an
    unknown cadence or an unreadable price.
    """
    wanted = _normalize_period(periodicidad)
    if wanted is None or not opciones_precios:
        return None
    for option in opciones_precios:
        if _normalize_period(_option_field(option, "periodicidad")) == wanted:
            return _to_decimal(_option_field(option, "costo"))
    return None


def first_price(opciones_precios: Optional[Iterable[Any]]) -> Optional[Decimal]:
    """Price of the first option, used when a company has no cadence set."""
    for option in opciones_precios or []:
        return _to_decimal(_option_field(option, "costo"))
    return None


def format_amount(amount: Decimal) -> str:
    if amount == amount.to_integral_value():
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def price_label(opciones_precios: Optional[Iterable[Any]]) -> str:
    """Short label for plan cards: ``Sin precios``, ``$99 / mes`` or ``3 opciones``."""
    options = list(opciones_precios or [])
    if not options:
        return "Sin precios"
    if len(options) > 1:
        return f"{len(options)} opciones"

    option = options[0]
    amount = _to_decimal(_option_field(option, "costo"))
    if amount is None:
        return "Sin precios"
    period = _normalize_period(_option_field(option, "periodicidad"))
    suffix = _PERIOD_SUFFIX.get(period, period)
    return f"{format_amount(amount)} / {suffix}" if suffix else format_amount(amount)


def _add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    # Clamp to the last day of the target month (Jan 31 -> Feb 28/29)
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def derive_end_date(start: Optional[date], periodicidad: Any) -> Optional[date]:
    """End date of a membership.

    ``mensual`` adds one calendar month and ``anual`` one calendar year,
    clamping to the end of a shorter target month. Any other cadence, or a
    missing start date, gives ``None``.

        >>> derive_end_date(date(2024, 1, 31), "mensual")
        datetime.date(2024, 2, 29)
        >>> derive_end_date(date(2024, 2, 29), "anual")
        datetime.date(2025, 2, 28)
    """
    if start is None:
        return None
    period = _normalize_period(periodicidad)
    if period == MONTHLY:
        return _add_months(start, 1)
    if period == YEARLY:
        return _add_months(start, 12)
    return None


def apply_membership_dates(current: Mapping[str, Any], changes: dict) -> dict:
    """Fill in ``fecha_fin_membresia`` for a create or partial update.

    ``current`` is the stored company state (empty on create), ``changes``
    the fields the request sets. An end date the request sets explicitly is
    kept as an administrator override. Otherwise, when the request touches
    the start date or cadence and the merged state has both, the end date is
    re-derived. A merged state without a recognised cadence leaves the end
    date as it is.
    """
    if END_FIELD in changes:
        return changes
    if START_FIELD not in changes and PERIOD_FIELD not in changes:
        return changes

    start = changes.get(START_FIELD, current.get(START_FIELD))
    period = changes.get(PERIOD_FIELD, current.get(PERIOD_FIELD))
    derived = derive_end_date(start, period)
    if derived is not None:
        changes[END_FIELD] = derived
    return changes
