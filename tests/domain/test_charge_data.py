"""Tests for the ChargeData carrier and the loan product charge filters."""

from decimal import Decimal

import pytest

from charge_kernel.domain.charge_data import (
    ChargeData,
    charges_applicable_to,
    loan_applicable_fees,
    loan_applicable_penalties,
)
from charge_kernel.domain.charge_slab import ChargeSlab
from charge_kernel.domain.charge_types import (
    ChargeApplicability,
    ChargeCalculationMethod,
    ChargePaymentMode,
    ChargeTiming,
)
from charge_kernel.domain.field_source import MappingFieldSource, MonthDay
from charge_kernel.exceptions import UnknownCategoryValueError


def _charge(id, applicability=ChargeApplicability.LOAN, active=True, penalty=False):
    return ChargeData(
        id=id,
        name=f"charge-{id}",
        applicability=applicability,
        active=active,
        penalty=penalty,
    )


class TestFromSource:

    def test_loan_payload(self, loan_payload):
        charge = ChargeData.from_source(MappingFieldSource(loan_payload), id=7)
        assert charge.id == 7
        assert charge.name == "Loan processing fee"
        assert charge.amount == Decimal("25.00")
        assert charge.applicability is ChargeApplicability.LOAN
        assert charge.timing is ChargeTiming.DISBURSEMENT
        assert charge.calculation_method is ChargeCalculationMethod.FLAT
        assert charge.payment_mode is ChargePaymentMode.REGULAR
        assert charge.active is True
        assert charge.penalty is False
        assert charge.slabs == ()
        assert not charge.vary_amounts

    def test_month_day_and_chart(self, savings_payload):
        payload = dict(
            savings_payload,
            chargeTimeType=ChargeTiming.ANNUAL_FEE.value,
            feeOnMonthDay="--06-30",
            chart=[{"fromPeriod": 10, "amount": "2"}, {"fromPeriod": 0, "toPeriod": 10}],
        )
        charge = ChargeData.from_source(MappingFieldSource(payload))
        assert charge.fee_on_month_day == MonthDay(6, 30)
        assert [s.from_period for s in charge.slabs] == [0, 10]
        assert charge.vary_amounts

    def test_unknown_code_raises(self, loan_payload):
        payload = dict(loan_payload, chargeTimeType=77)
        with pytest.raises(UnknownCategoryValueError):
            ChargeData.from_source(MappingFieldSource(payload))


class TestBehaviour:

    def test_lookup(self):
        charge = ChargeData.lookup(3, "Late fee", True)
        assert (charge.id, charge.name, charge.penalty) == (3, "Late fee", True)
        assert charge.amount is None

    def test_with_slabs(self):
        charge = ChargeData.lookup(1, "Tiered", False).with_slabs([ChargeSlab(0)])
        assert charge.slabs == (ChargeSlab(0),)

    def test_overdue_installment(self):
        assert ChargeData(1, "x", timing=ChargeTiming.OVERDUE_INSTALLMENT).is_overdue_installment_charge
        assert not ChargeData(1, "x", timing=ChargeTiming.DISBURSEMENT).is_overdue_installment_charge
        assert not ChargeData(1, "x").is_overdue_installment_charge

    def test_percentage(self):
        pct = ChargeData(
            1, "x", amount=Decimal("2.5"),
            calculation_method=ChargeCalculationMethod.PERCENT_OF_AMOUNT,
        )
        flat = ChargeData(
            2, "y", amount=Decimal("2.5"), calculation_method=ChargeCalculationMethod.FLAT
        )
        assert pct.percentage == Decimal("2.5")
        assert flat.percentage is None

    def test_equality_by_id(self):
        assert ChargeData.lookup(5, "a", False) == ChargeData.lookup(5, "b", True)
        assert len({ChargeData.lookup(5, "a", False), ChargeData.lookup(5, "b", True)}) == 1

    def test_sorted_newest_first(self):
        charges = [_charge(2), _charge(9), _charge(4)]
        assert [c.id for c in sorted(charges)] == [9, 4, 2]


class TestFilters:

    @pytest.fixture
    def charges(self):
        return [
            _charge(1),
            _charge(2, penalty=True),
            _charge(3, active=False),
            _charge(4, applicability=ChargeApplicability.SAVINGS),
            _charge(5),
            _charge(6, penalty=True, active=False),
        ]

    def test_applicable_to(self, charges):
        assert [c.id for c in charges_applicable_to(charges, ChargeApplicability.SAVINGS)] == [4]

    def test_loan_fees(self, charges):
        assert [c.id for c in loan_applicable_fees(charges)] == [5, 1]

    def test_loan_penalties(self, charges):
        assert [c.id for c in loan_applicable_penalties(charges)] == [2]
