"""
Tests for charge category enumerations.

Covers:
- Strict and lenient code mapping
- Per-applicability legal subsets (never empty)
- Timing classifiers
- Activation / tranche calculation-method subsets
"""

import pytest

from charge_kernel.domain.charge_types import (
    ChargeApplicability,
    ChargeCalculationMethod,
    ChargePaymentMode,
    ChargeTiming,
    FeeFrequency,
    TimingTraits,
    all_valid_calculation_methods,
    all_valid_timings,
    codes,
    valid_calculation_methods_for,
    valid_calculation_methods_for_share_account_activation,
    valid_calculation_methods_for_tranche_disbursement,
    valid_timings_for,
)
from charge_kernel.exceptions import UnknownCategoryValueError


class TestCodeMapping:

    def test_valid_codes(self):
        assert ChargeApplicability.valid_codes() == frozenset({1, 2, 3, 4})
        assert ChargePaymentMode.valid_codes() == frozenset({0, 1})
        assert FeeFrequency.valid_codes() == frozenset({0, 1, 2, 3})
        assert ChargeCalculationMethod.valid_codes() == frozenset(range(1, 6))
        assert ChargeTiming.valid_codes() == frozenset(range(1, 17))

    def test_from_code(self):
        assert ChargeTiming.from_code(11) is ChargeTiming.WEEKLY_FEE
        assert ChargeApplicability.from_code(4) is ChargeApplicability.SHARES

    @pytest.mark.parametrize("code", [0, 17, -1, None])
    def test_from_code_unknown_raises(self, code):
        with pytest.raises(UnknownCategoryValueError) as exc_info:
            ChargeTiming.from_code(code)
        assert exc_info.value.category == "ChargeTiming"
        assert exc_info.value.value == code
        assert exc_info.value.code == "UNKNOWN_CATEGORY_VALUE"

    def test_lookup_is_lenient(self):
        assert ChargeCalculationMethod.lookup(99) is None
        assert ChargeCalculationMethod.lookup(None) is None
        assert ChargeCalculationMethod.lookup(2) is ChargeCalculationMethod.PERCENT_OF_AMOUNT

    def test_bool_is_not_a_code(self):
        assert ChargePaymentMode.lookup(True) is None


class TestLegalSubsets:

    @pytest.mark.parametrize("applicability", list(ChargeApplicability))
    def test_subsets_never_empty(self, applicability):
        assert valid_timings_for(applicability)
        assert valid_calculation_methods_for(applicability)

    @pytest.mark.parametrize("applicability", list(ChargeApplicability))
    @pytest.mark.parametrize("timing", list(ChargeTiming))
    def test_is_allowed_for_matches_subset(self, applicability, timing):
        assert timing.is_allowed_for(applicability) == (
            timing.value in codes(valid_timings_for(applicability))
        )

    def test_loan_timings(self):
        assert set(valid_timings_for(ChargeApplicability.LOAN)) == {
            ChargeTiming.DISBURSEMENT,
            ChargeTiming.TRANCHE_DISBURSEMENT,
            ChargeTiming.SPECIFIED_DUE_DATE,
            ChargeTiming.INSTALMENT_FEE,
            ChargeTiming.OVERDUE_INSTALLMENT,
        }

    def test_specified_due_date_shared_across_applicabilities(self):
        for applicability in (
            ChargeApplicability.LOAN,
            ChargeApplicability.SAVINGS,
            ChargeApplicability.CLIENT,
        ):
            assert ChargeTiming.SPECIFIED_DUE_DATE.is_allowed_for(applicability)
        assert not ChargeTiming.SPECIFIED_DUE_DATE.is_allowed_for(ChargeApplicability.SHARES)

    def test_union_covers_every_timing_once(self):
        union = all_valid_timings()
        assert len(union) == len(set(union))
        assert set(union) == set(ChargeTiming)

    def test_union_of_methods(self):
        assert set(all_valid_calculation_methods()) == set(ChargeCalculationMethod)

    def test_client_methods_flat_only(self):
        assert valid_calculation_methods_for(ChargeApplicability.CLIENT) == (
            ChargeCalculationMethod.FLAT,
        )

    def test_activation_and_tranche_subsets(self):
        assert valid_calculation_methods_for_share_account_activation() == (
            ChargeCalculationMethod.FLAT,
        )
        assert set(valid_calculation_methods_for_tranche_disbursement()) == {
            ChargeCalculationMethod.FLAT,
            ChargeCalculationMethod.PERCENT_OF_DISBURSEMENT_AMOUNT,
        }

    def test_percent_of_disbursement_only_legal_for_loans(self):
        method = ChargeCalculationMethod.PERCENT_OF_DISBURSEMENT_AMOUNT
        legal_for = [
            a for a in ChargeApplicability if method in valid_calculation_methods_for(a)
        ]
        assert legal_for == [ChargeApplicability.LOAN]


class TestTimingTraits:

    def test_every_timing_has_traits(self):
        for timing in ChargeTiming:
            assert isinstance(timing.traits, TimingTraits)

    def test_each_timing_sets_exactly_one_classifier(self):
        for timing in ChargeTiming:
            flags = [v for v in vars(timing.traits).values() if v]
            assert len(flags) == 1, timing

    def test_specific_classifiers(self):
        assert ChargeTiming.WEEKLY_FEE.traits.is_weekly_fee
        assert ChargeTiming.MONTHLY_FEE.traits.is_monthly_fee
        assert ChargeTiming.ANNUAL_FEE.traits.is_annual_fee
        assert ChargeTiming.WITHDRAWAL_FEE.traits.is_withdrawal_fee
        assert ChargeTiming.SPECIFIED_DUE_DATE.traits.is_on_specified_due_date
        assert ChargeTiming.OVERDUE_INSTALLMENT.traits.is_overdue_installment
        assert not ChargeTiming.DISBURSEMENT.traits.is_on_specified_due_date

    def test_method_flags(self):
        assert ChargeCalculationMethod.FLAT.is_flat
        assert not ChargeCalculationMethod.FLAT.is_percentage_based
        assert ChargeCalculationMethod.PERCENT_OF_INTEREST.is_percentage_based
