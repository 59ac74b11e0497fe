"""
ChargeData -- canonical charge definition carrier.

Responsibility:
    One immutable struct describing a charge definition, with small factories
    for each use-case instead of positional-parameter constructors:

    * ``ChargeData.lookup`` -- minimal reference entry (id, name, penalty).
    * ``ChargeData.from_source`` -- assembled from a validated FieldSource.
    * ``with_slabs`` -- attach a rate chart.

    Also provides the filters the loan product template uses to offer fee
    and penalty options.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Built only from input that has
    already passed ``charge_engines.definition_validator``.

Failure modes:
    - ``UnknownCategoryValueError`` when a category code is unmapped.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from decimal import Decimal
from functools import total_ordering

from charge_kernel.domain import field_source as f
from charge_kernel.domain.charge_slab import ChargeSlab
from charge_kernel.domain.charge_types import (
    ChargeApplicability,
    ChargeCalculationMethod,
    ChargePaymentMode,
    ChargeTiming,
    FeeFrequency,
)
from charge_kernel.domain.field_source import FieldSource, MonthDay


@total_ordering
@dataclass(frozen=True, eq=False)
class ChargeData:
    """
    A charge definition.

    Guarantees:
        - Immutable (frozen dataclass)
        - Equality and hashing by id only
        - Natural ordering is by id, descending

    Non-goals:
        - Does NOT carry dropdown option lists or GL account details.
    """

    id: int | None
    name: str | None
    amount: Decimal | None = None
    currency_code: str | None = None
    applicability: ChargeApplicability | None = None
    timing: ChargeTiming | None = None
    calculation_method: ChargeCalculationMethod | None = None
    payment_mode: ChargePaymentMode | None = None
    penalty: bool = False
    active: bool = False
    fee_on_month_day: MonthDay | None = None
    fee_interval: int | None = None
    fee_frequency: FeeFrequency | None = None
    min_cap: Decimal | None = None
    max_cap: Decimal | None = None
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None
    free_withdrawal: bool = False
    free_withdrawal_frequency: int | None = None
    restart_frequency: int | None = None
    restart_frequency_type: int | None = None
    payment_type_enabled: bool = False
    payment_type_id: int | None = None
    income_account_id: int | None = None
    tax_group_id: int | None = None
    slabs: tuple[ChargeSlab, ...] = field(default_factory=tuple)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def lookup(cls, id: int, name: str, penalty: bool) -> ChargeData:
        return cls(id=id, name=name, penalty=penalty)

    @classmethod
    def from_source(cls, source: FieldSource, id: int | None = None) -> ChargeData:
        """Assemble a charge from a create payload that passed validation."""

        def category(enum_type, name):
            code = source.extract_int(name)
            return enum_type.from_code(code) if code is not None else None

        slabs = source.extract_slabs(f.CHART) or []
        return cls(
            id=id,
            name=source.extract_string(f.NAME),
            amount=source.extract_decimal(f.AMOUNT),
            currency_code=source.extract_string(f.CURRENCY_CODE),
            applicability=category(ChargeApplicability, f.CHARGE_APPLIES_TO),
            timing=category(ChargeTiming, f.CHARGE_TIME_TYPE),
            calculation_method=category(ChargeCalculationMethod, f.CHARGE_CALCULATION_TYPE),
            payment_mode=category(ChargePaymentMode, f.CHARGE_PAYMENT_MODE),
            penalty=bool(source.extract_bool(f.PENALTY)),
            active=bool(source.extract_bool(f.ACTIVE)),
            fee_on_month_day=source.extract_month_day(f.FEE_ON_MONTH_DAY),
            fee_interval=source.extract_int(f.FEE_INTERVAL),
            fee_frequency=category(FeeFrequency, f.FEE_FREQUENCY),
            min_cap=source.extract_decimal(f.MIN_CAP),
            max_cap=source.extract_decimal(f.MAX_CAP),
            min_amount=source.extract_decimal(f.MIN_AMOUNT),
            max_amount=source.extract_decimal(f.MAX_AMOUNT),
            free_withdrawal=bool(source.extract_bool(f.ENABLE_FREE_WITHDRAWAL_CHARGE)),
            free_withdrawal_frequency=source.extract_int(f.FREE_WITHDRAWAL_FREQUENCY),
            restart_frequency=source.extract_int(f.RESTART_COUNT_FREQUENCY),
            restart_frequency_type=source.extract_int(f.COUNT_FREQUENCY_TYPE),
            payment_type_enabled=bool(source.extract_bool(f.ENABLE_PAYMENT_TYPE)),
            payment_type_id=source.extract_int(f.PAYMENT_TYPE_ID),
            income_account_id=source.extract_int(f.GL_ACCOUNT_ID),
            tax_group_id=source.extract_int(f.TAX_GROUP_ID),
            slabs=tuple(sorted(
                slabs,
                key=lambda s: -1 if s.from_period is None else s.from_period,
            )),
        )

    def with_slabs(self, slabs: Iterable[ChargeSlab]) -> ChargeData:
        return replace(self, slabs=tuple(slabs))

    # ------------------------------------------------------------------
    # Behaviour
    # ------------------------------------------------------------------

    @property
    def vary_amounts(self) -> bool:
        """True when the amount comes from a rate chart."""
        return bool(self.slabs)

    @property
    def is_overdue_installment_charge(self) -> bool:
        return self.timing is not None and self.timing.traits.is_overdue_installment

    @property
    def percentage(self) -> Decimal | None:
        """The amount read as a percentage, for percent-of-amount charges."""
        if self.calculation_method is ChargeCalculationMethod.PERCENT_OF_AMOUNT:
            return self.amount
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChargeData):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __lt__(self, other: ChargeData) -> bool:
        # Newest (highest id) first
        if not isinstance(other, ChargeData):
            return NotImplemented
        return (other.id or 0) < (self.id or 0)


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def charges_applicable_to(
    charges: Iterable[ChargeData], applicability: ChargeApplicability
) -> list[ChargeData]:
    return [c for c in charges if c.applicability is applicability]


def loan_applicable_fees(charges: Iterable[ChargeData]) -> list[ChargeData]:
    """Active, non-penalty loan charges, newest first."""
    return sorted(
        c
        for c in charges_applicable_to(charges, ChargeApplicability.LOAN)
        if c.active and not c.penalty
    )


def loan_applicable_penalties(charges: Iterable[ChargeData]) -> list[ChargeData]:
    """Active loan penalties, newest first."""
    return sorted(
        c
        for c in charges_applicable_to(charges, ChargeApplicability.LOAN)
        if c.active and c.penalty
    )
