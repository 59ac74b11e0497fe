"""
Tests for ChargeDefinitionValidator.validate_for_update.

Update payloads are partial: only fields that are present are checked, and
enumerations are checked against the applicability in the same payload or,
when it is absent, against the union of every applicability's legal values.
"""

import pytest

from charge_engines.definition_validator import validate_for_update
from charge_kernel.domain.charge_types import (
    ChargeApplicability,
    ChargeCalculationMethod,
    ChargeTiming,
)
from charge_kernel.domain.field_source import MappingFieldSource
from charge_kernel.exceptions import (
    AggregateValidationError,
    EmptyInputError,
    MinExceedsMaxError,
    UnsupportedParameterError,
)

PREFIX = "validation.msg.charge"

LOAN = ChargeApplicability.LOAN.value
SAVINGS = ChargeApplicability.SAVINGS.value
SHARES = ChargeApplicability.SHARES.value


def _update(validator, **payload):
    validator.validate_for_update(MappingFieldSource(payload))


def _codes(exc_info) -> list[str]:
    return [e.code for e in exc_info.value.errors]


class TestPartialPayloads:

    def test_blank_payload_rejected(self, validator):
        with pytest.raises(EmptyInputError):
            validator.validate_for_update(MappingFieldSource(None))

    def test_unsupported_field_rejected(self, validator):
        with pytest.raises(UnsupportedParameterError) as exc_info:
            _update(validator, name="Renamed", chargeType=1)
        assert exc_info.value.parameters == ("chargeType",)

    def test_single_field_update(self, validator):
        _update(validator, name="Renamed fee")

    def test_absent_fields_not_required(self, validator):
        _update(validator, active=False)

    def test_module_level_entrypoint(self):
        validate_for_update(MappingFieldSource({"amount": "12.5"}))

    def test_present_null_name(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(validator, name=None)
        assert _codes(exc_info) == [f"{PREFIX}.name.cannot.be.blank"]

    def test_currency_too_long(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(validator, currencyCode="EURO")
        assert _codes(exc_info) == [f"{PREFIX}.currencyCode.exceeds.max.length"]

    def test_amount_must_be_positive(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(validator, amount="0")
        assert _codes(exc_info) == [f"{PREFIX}.amount.not.greater.than.zero"]

    def test_present_null_month_day(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(validator, feeOnMonthDay=None)
        assert _codes(exc_info) == [f"{PREFIX}.feeOnMonthDay.cannot.be.blank"]

    def test_fee_frequency_range(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(validator, feeFrequency=5)
        assert _codes(exc_info) == [f"{PREFIX}.feeFrequency.is.not.within.expected.range"]

    def test_fee_interval_positive(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(validator, feeInterval=-2)
        assert _codes(exc_info) == [f"{PREFIX}.feeInterval.not.greater.than.zero"]

    def test_income_account_positive(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(validator, incomeAccountId=0)
        assert _codes(exc_info) == [f"{PREFIX}.incomeAccountId.not.greater.than.zero"]

    def test_payment_type_checked_without_applicability(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(validator, enablePaymentType=True)
        assert _codes(exc_info) == [f"{PREFIX}.paymentTypeId.cannot.be.blank"]

    def test_chart_overlap(self, validator):
        chart = [{"fromPeriod": 0, "toPeriod": 10}, {"fromPeriod": 5}]
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(validator, chart=chart)
        assert _codes(exc_info) == [f"{PREFIX}.chart.slabs.range.overlapping"]


class TestEnumerationsWithoutApplicability:

    def test_any_known_timing_accepted(self, validator):
        _update(validator, chargeTimeType=ChargeTiming.SHARE_REDEEM.value)

    def test_unknown_timing_rejected(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(validator, chargeTimeType=99)
        assert _codes(exc_info) == [f"{PREFIX}.chargeTimeType.is.not.one.of.expected.enumerations"]

    def test_unknown_method_rejected(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(validator, chargeCalculationType=0)
        assert _codes(exc_info) == [
            f"{PREFIX}.chargeCalculationType.is.not.one.of.expected.enumerations"
        ]

    def test_cross_check_runs(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(
                validator,
                chargeTimeType=ChargeTiming.DISBURSEMENT.value,
                chargeCalculationType=ChargeCalculationMethod.PERCENT_OF_DISBURSEMENT_AMOUNT.value,
            )
        assert _codes(exc_info) == [
            f"{PREFIX}.chargeCalculationType.is.one.of.unwanted.enumerations"
        ]

    def test_method_alone_not_cross_checked(self, validator):
        _update(
            validator,
            chargeCalculationType=ChargeCalculationMethod.PERCENT_OF_DISBURSEMENT_AMOUNT.value,
        )

    def test_min_max_skipped(self, validator):
        _update(validator, minAmount="10", maxAmount="5")


class TestEnumerationsWithApplicability:

    def test_unknown_applicability(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(validator, chargeAppliesTo=7, chargeTimeType=99)
        # Timing falls back to the union once applicability is rejected
        assert _codes(exc_info) == [
            f"{PREFIX}.chargeAppliesTo.is.not.one.of.expected.enumerations",
            f"{PREFIX}.chargeTimeType.is.not.one.of.expected.enumerations",
        ]

    def test_timing_checked_against_applicability(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(
                validator,
                chargeAppliesTo=SAVINGS,
                chargeTimeType=ChargeTiming.DISBURSEMENT.value,
            )
        assert _codes(exc_info) == [f"{PREFIX}.chargeTimeType.is.not.one.of.expected.enumerations"]

    def test_method_checked_against_applicability(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(
                validator,
                chargeAppliesTo=SAVINGS,
                chargeCalculationType=ChargeCalculationMethod.PERCENT_OF_INTEREST.value,
            )
        assert _codes(exc_info) == [
            f"{PREFIX}.chargeCalculationType.is.not.one.of.expected.enumerations"
        ]

    def test_share_activation_flat_only(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(
                validator,
                chargeAppliesTo=SHARES,
                chargeTimeType=ChargeTiming.SHAREACCOUNT_ACTIVATION.value,
                chargeCalculationType=ChargeCalculationMethod.PERCENT_OF_AMOUNT.value,
            )
        assert _codes(exc_info) == [
            f"{PREFIX}.chargeCalculationType.is.not.one.of.expected.enumerations"
        ]

    def test_savings_monthly_interval_range(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(
                validator,
                chargeAppliesTo=SAVINGS,
                chargeTimeType=ChargeTiming.MONTHLY_FEE.value,
                feeInterval=13,
            )
        assert _codes(exc_info) == [f"{PREFIX}.feeInterval.is.not.within.expected.range"]

    def test_savings_monthly_absent_fields_not_required(self, validator):
        _update(
            validator,
            chargeAppliesTo=SAVINGS,
            chargeTimeType=ChargeTiming.MONTHLY_FEE.value,
        )

    def test_savings_weekly_rejects_month_day(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(
                validator,
                chargeAppliesTo=SAVINGS,
                chargeTimeType=ChargeTiming.WEEKLY_FEE.value,
                feeOnMonthDay="--01-01",
            )
        assert _codes(exc_info) == [
            f"{PREFIX}.feeOnMonthDay.cannot.also.be.provided.when.chargeTimeType.is.11"
        ]

    def test_loan_min_above_max(self, validator):
        with pytest.raises(MinExceedsMaxError):
            _update(
                validator,
                chargeAppliesTo=LOAN,
                chargeTimeType=ChargeTiming.DISBURSEMENT.value,
                chargeCalculationType=ChargeCalculationMethod.PERCENT_OF_AMOUNT.value,
                minAmount="10",
                maxAmount="5",
            )

    def test_min_max_policy_needs_timing(self, validator):
        with pytest.raises(AggregateValidationError) as exc_info:
            _update(validator, chargeAppliesTo=LOAN, minAmount="1", maxAmount="2")
        assert _codes(exc_info) == [f"{PREFIX}.chargeTimeType.cannot.be.blank"]
