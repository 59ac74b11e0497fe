"""
Charge Category Enumerations (``charge_kernel.domain.charge_types``).

Responsibility
--------------
Closed sets of categorical values describing a charge definition:

* ``ChargeApplicability`` -- which entity a charge attaches to.
* ``ChargeTiming`` -- the trigger event or schedule for the charge.
* ``ChargeCalculationMethod`` -- how the charge amount is derived.
* ``ChargePaymentMode`` -- collection channel (loan charges only).
* ``FeeFrequency`` -- period unit for recurring fees.

Each category exposes its legal raw codes, a strict ``from_code`` mapping and
a lenient ``lookup``.  Timing classifiers and per-applicability legal subsets
are kept in lookup tables rather than on individual members.

Architecture position
---------------------
**Kernel > Domain** -- pure lookups, ZERO I/O.  Imported by the slab model,
the charge data carrier and the validation engines.

Invariants enforced
-------------------
* Every applicability has a non-empty legal timing subset and a non-empty
  legal calculation-method subset.
* Percent of disbursement amount is legal only with tranche disbursement.

Failure modes
-------------
* ``from_code`` raises ``UnknownCategoryValueError`` for an unmapped code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from charge_kernel.exceptions import UnknownCategoryValueError


class _CodedEnum(int, Enum):
    """Int-valued category with strict and lenient code mapping."""

    @classmethod
    def valid_codes(cls) -> frozenset[int]:
        return frozenset(member.value for member in cls)

    @classmethod
    def from_code(cls, code: int | None):
        """Map a raw code to its variant; unmapped codes are an input error."""
        member = cls.lookup(code)
        if member is None:
            raise UnknownCategoryValueError(cls.__name__, code)
        return member

    @classmethod
    def lookup(cls, code: int | None):
        """Map a raw code to its variant, or None when unmapped."""
        if code is None or isinstance(code, bool):
            return None
        try:
            return cls(code)
        except ValueError:
            return None


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ChargeApplicability(_CodedEnum):
    """Entity type a charge applies to."""
    LOAN = 1
    SAVINGS = 2
    CLIENT = 3
    SHARES = 4


class ChargeTiming(_CodedEnum):
    """When a charge is triggered."""
    DISBURSEMENT = 1
    SPECIFIED_DUE_DATE = 2
    SAVINGS_ACTIVATION = 3
    SAVINGS_CLOSURE = 4
    WITHDRAWAL_FEE = 5
    ANNUAL_FEE = 6
    MONTHLY_FEE = 7
    INSTALMENT_FEE = 8
    OVERDUE_INSTALLMENT = 9
    OVERDRAFT_FEE = 10
    WEEKLY_FEE = 11
    TRANCHE_DISBURSEMENT = 12
    SHAREACCOUNT_ACTIVATION = 13
    SHARE_PURCHASE = 14
    SHARE_REDEEM = 15
    SAVINGS_NOACTIVITY_FEE = 16

    @property
    def traits(self) -> TimingTraits:
        return _TIMING_TRAITS[self]

    def is_allowed_for(self, applicability: ChargeApplicability) -> bool:
        return self in valid_timings_for(applicability)


class ChargeCalculationMethod(_CodedEnum):
    """How the charge amount is calculated."""
    FLAT = 1
    PERCENT_OF_AMOUNT = 2
    PERCENT_OF_AMOUNT_AND_INTEREST = 3
    PERCENT_OF_INTEREST = 4
    PERCENT_OF_DISBURSEMENT_AMOUNT = 5

    @property
    def is_flat(self) -> bool:
        return self is ChargeCalculationMethod.FLAT

    @property
    def is_percentage_based(self) -> bool:
        return not self.is_flat


class ChargePaymentMode(_CodedEnum):
    """Collection channel for loan charges."""
    REGULAR = 0
    ACCOUNT_TRANSFER = 1


class FeeFrequency(_CodedEnum):
    """Period unit for recurring fees."""
    DAYS = 0
    WEEKS = 1
    MONTHS = 2
    YEARS = 3


# ---------------------------------------------------------------------------
# Timing classifiers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimingTraits:
    """Boolean classifiers for a single ChargeTiming value."""
    is_disbursement: bool = False
    is_on_specified_due_date: bool = False
    is_savings_activation: bool = False
    is_savings_closure: bool = False
    is_withdrawal_fee: bool = False
    is_annual_fee: bool = False
    is_monthly_fee: bool = False
    is_weekly_fee: bool = False
    is_instalment_fee: bool = False
    is_overdue_installment: bool = False
    is_overdraft_fee: bool = False
    is_tranche_disbursement: bool = False
    is_share_account_activation: bool = False
    is_share_purchase: bool = False
    is_share_redeem: bool = False
    is_savings_no_activity_fee: bool = False


_TIMING_TRAITS: dict[ChargeTiming, TimingTraits] = {
    ChargeTiming.DISBURSEMENT: TimingTraits(is_disbursement=True),
    ChargeTiming.SPECIFIED_DUE_DATE: TimingTraits(is_on_specified_due_date=True),
    ChargeTiming.SAVINGS_ACTIVATION: TimingTraits(is_savings_activation=True),
    ChargeTiming.SAVINGS_CLOSURE: TimingTraits(is_savings_closure=True),
    ChargeTiming.WITHDRAWAL_FEE: TimingTraits(is_withdrawal_fee=True),
    ChargeTiming.ANNUAL_FEE: TimingTraits(is_annual_fee=True),
    ChargeTiming.MONTHLY_FEE: TimingTraits(is_monthly_fee=True),
    ChargeTiming.INSTALMENT_FEE: TimingTraits(is_instalment_fee=True),
    ChargeTiming.OVERDUE_INSTALLMENT: TimingTraits(is_overdue_installment=True),
    ChargeTiming.OVERDRAFT_FEE: TimingTraits(is_overdraft_fee=True),
    ChargeTiming.WEEKLY_FEE: TimingTraits(is_weekly_fee=True),
    ChargeTiming.TRANCHE_DISBURSEMENT: TimingTraits(is_tranche_disbursement=True),
    ChargeTiming.SHAREACCOUNT_ACTIVATION: TimingTraits(is_share_account_activation=True),
    ChargeTiming.SHARE_PURCHASE: TimingTraits(is_share_purchase=True),
    ChargeTiming.SHARE_REDEEM: TimingTraits(is_share_redeem=True),
    ChargeTiming.SAVINGS_NOACTIVITY_FEE: TimingTraits(is_savings_no_activity_fee=True),
}


# ---------------------------------------------------------------------------
# Legal subsets
# ---------------------------------------------------------------------------

_TIMINGS_BY_APPLICABILITY: dict[ChargeApplicability, tuple[ChargeTiming, ...]] = {
    ChargeApplicability.LOAN: (
        ChargeTiming.DISBURSEMENT,
        ChargeTiming.TRANCHE_DISBURSEMENT,
        ChargeTiming.SPECIFIED_DUE_DATE,
        ChargeTiming.INSTALMENT_FEE,
        ChargeTiming.OVERDUE_INSTALLMENT,
    ),
    ChargeApplicability.SAVINGS: (
        ChargeTiming.SPECIFIED_DUE_DATE,
        ChargeTiming.SAVINGS_ACTIVATION,
        ChargeTiming.SAVINGS_CLOSURE,
        ChargeTiming.WITHDRAWAL_FEE,
        ChargeTiming.ANNUAL_FEE,
        ChargeTiming.MONTHLY_FEE,
        ChargeTiming.WEEKLY_FEE,
        ChargeTiming.OVERDRAFT_FEE,
        ChargeTiming.SAVINGS_NOACTIVITY_FEE,
    ),
    ChargeApplicability.CLIENT: (
        ChargeTiming.SPECIFIED_DUE_DATE,
    ),
    ChargeApplicability.SHARES: (
        ChargeTiming.SHAREACCOUNT_ACTIVATION,
        ChargeTiming.SHARE_PURCHASE,
        ChargeTiming.SHARE_REDEEM,
    ),
}

_METHODS_BY_APPLICABILITY: dict[
    ChargeApplicability, tuple[ChargeCalculationMethod, ...]
] = {
    ChargeApplicability.LOAN: (
        ChargeCalculationMethod.FLAT,
        ChargeCalculationMethod.PERCENT_OF_AMOUNT,
        ChargeCalculationMethod.PERCENT_OF_AMOUNT_AND_INTEREST,
        ChargeCalculationMethod.PERCENT_OF_INTEREST,
        ChargeCalculationMethod.PERCENT_OF_DISBURSEMENT_AMOUNT,
    ),
    ChargeApplicability.SAVINGS: (
        ChargeCalculationMethod.FLAT,
        ChargeCalculationMethod.PERCENT_OF_AMOUNT,
    ),
    ChargeApplicability.CLIENT: (
        ChargeCalculationMethod.FLAT,
    ),
    ChargeApplicability.SHARES: (
        ChargeCalculationMethod.FLAT,
        ChargeCalculationMethod.PERCENT_OF_AMOUNT,
    ),
}

_SHARE_ACCOUNT_ACTIVATION_METHODS: tuple[ChargeCalculationMethod, ...] = (
    ChargeCalculationMethod.FLAT,
)

_TRANCHE_DISBURSEMENT_METHODS: tuple[ChargeCalculationMethod, ...] = (
    ChargeCalculationMethod.FLAT,
    ChargeCalculationMethod.PERCENT_OF_DISBURSEMENT_AMOUNT,
)


def valid_timings_for(applicability: ChargeApplicability) -> tuple[ChargeTiming, ...]:
    """Legal timing values for charges of the given applicability."""
    return _TIMINGS_BY_APPLICABILITY[applicability]


def all_valid_timings() -> tuple[ChargeTiming, ...]:
    """Union of legal timings across every applicability, in first-seen order."""
    seen: dict[ChargeTiming, None] = {}
    for timings in _TIMINGS_BY_APPLICABILITY.values():
        for timing in timings:
            seen.setdefault(timing, None)
    return tuple(seen)


def valid_calculation_methods_for(
    applicability: ChargeApplicability,
) -> tuple[ChargeCalculationMethod, ...]:
    """Legal calculation methods for charges of the given applicability."""
    return _METHODS_BY_APPLICABILITY[applicability]


def all_valid_calculation_methods() -> tuple[ChargeCalculationMethod, ...]:
    seen: dict[ChargeCalculationMethod, None] = {}
    for methods in _METHODS_BY_APPLICABILITY.values():
        for method in methods:
            seen.setdefault(method, None)
    return tuple(seen)


def valid_calculation_methods_for_share_account_activation() -> tuple[ChargeCalculationMethod, ...]:
    return _SHARE_ACCOUNT_ACTIVATION_METHODS


def valid_calculation_methods_for_tranche_disbursement() -> tuple[ChargeCalculationMethod, ...]:
    return _TRANCHE_DISBURSEMENT_METHODS


def codes(members: tuple[_CodedEnum, ...]) -> tuple[int, ...]:
    """Raw codes of a member subset, for membership checks on raw input."""
    return tuple(m.value for m in members)
