"""
ChargeSlab -- one tier of a charge rate chart.

A slab covers the half-open period range ``[from_period, to_period)``.  A
``to_period`` of ``None`` is the open-ended terminal marker: the last slab of
a well-formed chart has no upper bound.

Comparisons assume the caller walks slabs sorted ascending by
``from_period`` (see ``charge_engines.slab_consistency``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from charge_kernel.exceptions import FieldFormatError, UnsupportedParameterError

FROM_PERIOD = "fromPeriod"
TO_PERIOD = "toPeriod"
AMOUNT = "amount"

SLAB_PARAMETERS: frozenset[str] = frozenset({FROM_PERIOD, TO_PERIOD, AMOUNT})


@dataclass(frozen=True)
class ChargeSlab:
    """
    A single rate-chart range.

    Contract:
        from_period is the inclusive lower bound, to_period the exclusive
        upper bound (None = open-ended). amount is the charge for the tier.

    Non-goals:
        - Does NOT validate itself on construction; invalid slabs are
          reported by the slab-set checker so every problem is collected.
    """

    from_period: int | None
    to_period: int | None = None
    amount: Decimal | None = None

    def is_valid(self) -> bool:
        return self.from_period is not None

    @property
    def is_open_ended(self) -> bool:
        return self.to_period is None

    def overlaps(self, other: ChargeSlab) -> bool:
        """True if the two ranges share any period."""
        if self.from_period == other.from_period:
            return True
        self_starts_before_other_ends = (
            other.to_period is None or self.from_period < other.to_period
        )
        other_starts_before_self_ends = (
            self.to_period is None or other.from_period < self.to_period
        )
        return self_starts_before_other_ends and other_starts_before_self_ends

    def has_gap(self, next_slab: ChargeSlab) -> bool:
        """True if periods are left uncovered between this slab and the next."""
        if self.to_period is None:
            return False
        return next_slab.from_period > self.to_period

    def is_not_proper_end(self) -> bool:
        """True when this slab, as the last of a chart, is not open-ended."""
        return not self.is_open_ended

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], path: str = "chart") -> ChargeSlab:
        """Build a slab from a decoded ``fromPeriod``/``toPeriod``/``amount`` mapping."""
        unknown = sorted(k for k in data if k not in SLAB_PARAMETERS)
        if unknown:
            raise UnsupportedParameterError([f"{path}.{k}" for k in unknown])
        return cls(
            from_period=_period(data.get(FROM_PERIOD), f"{path}.{FROM_PERIOD}"),
            to_period=_period(data.get(TO_PERIOD), f"{path}.{TO_PERIOD}"),
            amount=_amount(data.get(AMOUNT), f"{path}.{AMOUNT}"),
        )


def _period(value: Any, parameter: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise FieldFormatError(parameter, value, "integer")
    return value


def _amount(value: Any, parameter: str) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, (bool, float)):
        raise FieldFormatError(parameter, value, "decimal")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise FieldFormatError(parameter, value, "decimal") from None
    if not amount.is_finite():
        raise FieldFormatError(parameter, value, "decimal")
    return amount
