"""
Field Extraction Contract (``charge_kernel.domain.field_source``).

Responsibility
--------------
Lets the validation engines ask "does field X exist, and if so what is its
typed value" without knowing the wire format.  The request-parsing layer
owns decoding, locale handling and number parsing; values arriving here are
already typed.

``FieldSource`` is the abstract contract.  ``MappingFieldSource`` adapts an
already-decoded mapping (e.g. a parsed JSON object) to it.

Invariants enforced
-------------------
* Absence is distinguishable from presence-with-null: ``exists`` is True for
  a key mapped to ``None`` and every ``extract_*`` returns ``None`` for both.
* ``SUPPORTED_PARAMETERS`` is a static, closed set of recognised names.

Failure modes
-------------
* A present value of the wrong shape raises ``FieldFormatError``.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from charge_kernel.domain.charge_slab import ChargeSlab
from charge_kernel.exceptions import FieldFormatError

# ---------------------------------------------------------------------------
# Recognised parameter names
# ---------------------------------------------------------------------------

NAME = "name"
AMOUNT = "amount"
LOCALE = "locale"
CURRENCY_CODE = "currencyCode"
CURRENCY_OPTIONS = "currencyOptions"
CHARGE_APPLIES_TO = "chargeAppliesTo"
CHARGE_TIME_TYPE = "chargeTimeType"
CHARGE_CALCULATION_TYPE = "chargeCalculationType"
CHARGE_CALCULATION_TYPE_OPTIONS = "chargeCalculationTypeOptions"
PENALTY = "penalty"
ACTIVE = "active"
CHARGE_PAYMENT_MODE = "chargePaymentMode"
FEE_ON_MONTH_DAY = "feeOnMonthDay"
FEE_INTERVAL = "feeInterval"
MONTH_DAY_FORMAT = "monthDayFormat"
MIN_CAP = "minCap"
MAX_CAP = "maxCap"
FEE_FREQUENCY = "feeFrequency"
ENABLE_FREE_WITHDRAWAL_CHARGE = "enableFreeWithdrawalCharge"
FREE_WITHDRAWAL_FREQUENCY = "freeWithdrawalFrequency"
RESTART_COUNT_FREQUENCY = "restartCountFrequency"
COUNT_FREQUENCY_TYPE = "countFrequencyType"
PAYMENT_TYPE_ID = "paymentTypeId"
ENABLE_PAYMENT_TYPE = "enablePaymentType"
MIN_AMOUNT = "minAmount"
MAX_AMOUNT = "maxAmount"
CHART = "chart"
GL_ACCOUNT_ID = "incomeAccountId"
TAX_GROUP_ID = "taxGroupId"

SUPPORTED_PARAMETERS: frozenset[str] = frozenset({
    NAME,
    AMOUNT,
    LOCALE,
    CURRENCY_CODE,
    CURRENCY_OPTIONS,
    CHARGE_APPLIES_TO,
    CHARGE_TIME_TYPE,
    CHARGE_CALCULATION_TYPE,
    CHARGE_CALCULATION_TYPE_OPTIONS,
    PENALTY,
    ACTIVE,
    CHARGE_PAYMENT_MODE,
    FEE_ON_MONTH_DAY,
    FEE_INTERVAL,
    MONTH_DAY_FORMAT,
    MIN_CAP,
    MAX_CAP,
    FEE_FREQUENCY,
    ENABLE_FREE_WITHDRAWAL_CHARGE,
    FREE_WITHDRAWAL_FREQUENCY,
    RESTART_COUNT_FREQUENCY,
    COUNT_FREQUENCY_TYPE,
    PAYMENT_TYPE_ID,
    ENABLE_PAYMENT_TYPE,
    MIN_AMOUNT,
    MAX_AMOUNT,
    CHART,
    GL_ACCOUNT_ID,
    TAX_GROUP_ID,
})


# ---------------------------------------------------------------------------
# MonthDay
# ---------------------------------------------------------------------------

_MONTH_DAY_RE = re.compile(r"^(?:--)?(\d{1,2})-(\d{1,2})$")
_DAYS_IN_MONTH = (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


@dataclass(frozen=True, order=True)
class MonthDay:
    """A month and day without a year (e.g. an annual fee date)."""

    month: int
    day: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month out of range: {self.month}")
        if not 1 <= self.day <= _DAYS_IN_MONTH[self.month - 1]:
            raise ValueError(f"day out of range for month {self.month}: {self.day}")

    @classmethod
    def parse(cls, text: str) -> MonthDay:
        """Parse ``MM-DD`` or ISO ``--MM-DD``."""
        match = _MONTH_DAY_RE.match(text.strip())
        if match is None:
            raise ValueError(f"Cannot parse month-day from {text!r}")
        return cls(month=int(match.group(1)), day=int(match.group(2)))

    def __str__(self) -> str:
        return f"--{self.month:02d}-{self.day:02d}"


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------


class FieldSource(ABC):
    """Typed, format-agnostic read access to one request payload."""

    @abstractmethod
    def is_blank(self) -> bool:
        """True when the request carried no payload at all."""

    @abstractmethod
    def field_names(self) -> frozenset[str]:
        """Names of every field present in the payload."""

    @abstractmethod
    def exists(self, name: str) -> bool:
        ...

    @abstractmethod
    def extract_int(self, name: str) -> int | None:
        ...

    @abstractmethod
    def extract_decimal(self, name: str) -> Decimal | None:
        ...

    @abstractmethod
    def extract_bool(self, name: str) -> bool | None:
        ...

    @abstractmethod
    def extract_month_day(self, name: str) -> MonthDay | None:
        ...

    @abstractmethod
    def extract_string(self, name: str) -> str | None:
        ...

    @abstractmethod
    def extract_slabs(self, name: str) -> list[ChargeSlab] | None:
        ...


class MappingFieldSource(FieldSource):
    """
    FieldSource over an already-decoded mapping.

    ``None`` as the whole payload means "blank request".
    """

    def __init__(self, payload: Mapping[str, Any] | None):
        if payload is not None and not isinstance(payload, Mapping):
            raise FieldFormatError("<payload>", payload, "object")
        self._payload: Mapping[str, Any] = payload if payload is not None else {}
        self._blank = payload is None

    def __repr__(self) -> str:
        return f"MappingFieldSource({dict(self._payload)!r})"

    def is_blank(self) -> bool:
        return self._blank

    def field_names(self) -> frozenset[str]:
        return frozenset(self._payload)

    def exists(self, name: str) -> bool:
        return name in self._payload

    def extract_int(self, name: str) -> int | None:
        value = self._payload.get(name)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            raise FieldFormatError(name, value, "integer")
        return value

    def extract_decimal(self, name: str) -> Decimal | None:
        value = self._payload.get(name)
        if value is None:
            return None
        if isinstance(value, (bool, float)):
            raise FieldFormatError(name, value, "decimal")
        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise FieldFormatError(name, value, "decimal") from None
        # NaN and Infinity parse but cannot be compared or stored
        if not amount.is_finite():
            raise FieldFormatError(name, value, "decimal")
        return amount

    def extract_bool(self, name: str) -> bool | None:
        value = self._payload.get(name)
        if value is None:
            return None
        if not isinstance(value, bool):
            raise FieldFormatError(name, value, "boolean")
        return value

    def extract_month_day(self, name: str) -> MonthDay | None:
        value = self._payload.get(name)
        if value is None:
            return None
        if isinstance(value, MonthDay):
            return value
        if isinstance(value, date):
            return MonthDay(month=value.month, day=value.day)
        if isinstance(value, str):
            if not value.strip():
                return None
            try:
                return MonthDay.parse(value)
            except ValueError:
                raise FieldFormatError(name, value, "month-day") from None
        raise FieldFormatError(name, value, "month-day")

    def extract_string(self, name: str) -> str | None:
        value = self._payload.get(name)
        if value is None:
            return None
        if isinstance(value, (Mapping, list, tuple)):
            raise FieldFormatError(name, value, "string")
        return str(value)

    def extract_slabs(self, name: str) -> list[ChargeSlab] | None:
        value = self._payload.get(name)
        if value is None:
            return None
        if not isinstance(value, (list, tuple)):
            raise FieldFormatError(name, value, "list of slabs")
        slabs: list[ChargeSlab] = []
        for i, item in enumerate(value):
            if isinstance(item, ChargeSlab):
                slabs.append(item)
            elif isinstance(item, Mapping):
                slabs.append(ChargeSlab.from_mapping(item, path=f"{name}[{i}]"))
            else:
                raise FieldFormatError(f"{name}[{i}]", item, "slab object")
        return slabs
