"""
Charge Definition Validator (``charge_engines.definition_validator``).

Responsibility
--------------
Decides whether a proposed charge definition is internally consistent:
applicability, timing, calculation method, amounts and caps, the min/max
amount policy and, when supplied, the rate-chart slabs.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O.  Reads its input
through the ``FieldSource`` contract and its limits from an injected
``ChargeRuleSettings``.

Invariants enforced
-------------------
* Closed schema: unknown field names are rejected before any semantic check.
* Structural field errors are accumulated and raised once per call as
  ``AggregateValidationError``.
* Min/max amount policy violations are raised immediately
  (``MinExceedsMaxError`` / ``MinMaxNotSupportedError``) and never mixed
  with accumulated errors.
* Percent of disbursement amount is only legal with tranche disbursement.
* Stateless: each call builds its own ``ValidationCollector``.

Failure modes
-------------
* ``EmptyInputError`` -- blank payload.
* ``UnsupportedParameterError`` -- field outside ``SUPPORTED_PARAMETERS``.
* ``FieldFormatError`` -- value of the wrong shape (from the field source).
* ``UnknownCategoryValueError`` -- unmapped raw code passed to
  ``validate_timing_and_calculation_method``.  Inside create/update,
  unmapped codes are reported as enumeration errors through the collector.
* ``AggregateValidationError`` -- one or more structural errors.
* ``ChargeDomainRuleError`` subclasses -- min/max policy contradictions.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from pathlib import Path

from charge_config import get_active_settings
from charge_config.schema import ChargeRuleSettings
from charge_engines.slab_consistency import check_slab_set
from charge_kernel.domain import field_source as f
from charge_kernel.domain.charge_slab import ChargeSlab
from charge_kernel.domain.charge_types import (
    ChargeApplicability,
    ChargeCalculationMethod,
    ChargePaymentMode,
    ChargeTiming,
    all_valid_calculation_methods,
    all_valid_timings,
    codes,
    valid_calculation_methods_for,
    valid_calculation_methods_for_share_account_activation,
    valid_calculation_methods_for_tranche_disbursement,
    valid_timings_for,
)
from charge_kernel.domain.field_source import SUPPORTED_PARAMETERS, FieldSource
from charge_kernel.domain.validation import ValidationCollector
from charge_kernel.exceptions import (
    AggregateValidationError,
    ChargeDomainRuleError,
    EmptyInputError,
    MinExceedsMaxError,
    MinMaxNotSupportedError,
    UnsupportedParameterError,
)
from charge_kernel.logging_config import LogContext, get_logger

logger = get_logger("engines.definition_validator")


class ChargeDefinitionValidator:
    """
    Validation rule engine for charge definitions.

    Contract:
        validate_* methods return None on success and raise on failure.
        The instance holds only immutable settings.
    """

    def __init__(self, settings: ChargeRuleSettings | None = None):
        self.settings = settings or ChargeRuleSettings()

    @classmethod
    def from_active_settings(cls, path: Path | None = None) -> ChargeDefinitionValidator:
        return cls(get_active_settings(path))

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def validate_for_create(self, source: FieldSource) -> None:
        """Validate a complete charge definition for creation."""
        self._run("create", source, self._create_checks)

    def validate_for_update(self, source: FieldSource, charge_id: int | None = None) -> None:
        """Validate the subset of fields present in an update request.

        ``charge_id`` identifies the stored charge in log records only.
        """
        self._run("update", source, self._update_checks, charge_id)

    def validate_timing_and_calculation_method(
        self,
        timing: ChargeTiming | int,
        calculation_method: ChargeCalculationMethod | int,
    ) -> None:
        """Cross-check a timing against a calculation method.

        Raw integer codes are resolved strictly; an unmapped code raises
        UnknownCategoryValueError before any rule runs.
        """
        timing = ChargeTiming.from_code(timing)
        calculation_method = ChargeCalculationMethod.from_code(calculation_method)
        collector = self._collector()
        self._check_timing_and_method(collector, timing, calculation_method)
        collector.raise_if_errors()

    def validate_slab_set(self, slabs: Iterable[ChargeSlab]) -> None:
        collector = self._collector()
        check_slab_set(slabs, collector, self.settings)
        collector.raise_if_errors()

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    def _collector(self) -> ValidationCollector:
        return ValidationCollector(self.settings.resource)

    def _check_input_shape(self, source: FieldSource | None) -> None:
        if source is None or source.is_blank():
            raise EmptyInputError()
        unsupported = sorted(source.field_names() - SUPPORTED_PARAMETERS)
        if unsupported:
            logger.warning(
                "charge_unsupported_parameters",
                extra={"parameters": unsupported},
            )
            raise UnsupportedParameterError(unsupported)

    def _run(self, mode, source, checks, charge_id=None) -> None:
        with LogContext.bind(validation_mode=mode, charge_id=charge_id):
            self._check_input_shape(source)
            logger.debug(
                "charge_validation_started",
                extra={"fields": sorted(source.field_names())},
            )
            collector = self._collector()
            try:
                checks(source, collector)
                collector.raise_if_errors()
            except AggregateValidationError as exc:
                logger.warning(
                    "charge_validation_failed",
                    extra={
                        "error_count": len(exc.errors),
                        "error_codes": list(exc.error_codes),
                    },
                )
                raise
            except ChargeDomainRuleError as exc:
                logger.warning(
                    "charge_domain_rule_violated",
                    extra={"rule_code": exc.code, "detail": str(exc)},
                )
                raise
            logger.info("charge_validation_passed")

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def _create_checks(self, source: FieldSource, collector: ValidationCollector) -> None:
        applies_to = source.extract_int(f.CHARGE_APPLIES_TO)
        if collector.not_null(f.CHARGE_APPLIES_TO, applies_to):
            collector.one_of(
                f.CHARGE_APPLIES_TO, applies_to, sorted(ChargeApplicability.valid_codes())
            )

        calculation_type = source.extract_int(f.CHARGE_CALCULATION_TYPE)
        collector.not_null(f.CHARGE_CALCULATION_TYPE, calculation_type)

        fee_interval = source.extract_int(f.FEE_INTERVAL)
        collector.integer_greater_than_zero(f.FEE_INTERVAL, fee_interval)

        fee_frequency = source.extract_int(f.FEE_FREQUENCY)
        self._check_fee_frequency(collector, fee_frequency)

        self._check_free_withdrawal(source, collector)
        self._check_payment_type(source, collector)

        if fee_frequency is not None:
            collector.not_null(f.FEE_INTERVAL, fee_interval)

        applicability = ChargeApplicability.lookup(applies_to)
        if applicability is ChargeApplicability.LOAN:
            self._create_loan_checks(source, collector, calculation_type)
        elif applicability is ChargeApplicability.SAVINGS:
            self._create_savings_checks(source, collector, calculation_type, fee_interval)
        elif applicability is ChargeApplicability.CLIENT:
            self._create_client_checks(source, collector, calculation_type)
        elif applicability is ChargeApplicability.SHARES:
            self._create_share_checks(source, collector, calculation_type)

        name = source.extract_string(f.NAME)
        collector.not_blank(f.NAME, name)
        collector.not_exceeding_length(f.NAME, name, self.settings.name_max_length)

        currency_code = source.extract_string(f.CURRENCY_CODE)
        collector.not_blank(f.CURRENCY_CODE, currency_code)
        collector.not_exceeding_length(
            f.CURRENCY_CODE, currency_code, self.settings.currency_code_max_length
        )

        if source.exists(f.CHART):
            slabs = source.extract_slabs(f.CHART)
            if collector.not_null(f.CHART, slabs):
                check_slab_set(slabs, collector, self.settings)
        else:
            amount = source.extract_decimal(f.AMOUNT)
            if collector.not_null(f.AMOUNT, amount):
                collector.positive_amount(f.AMOUNT, amount)

        self._check_optional_flags_and_caps(source, collector)

        if source.exists(f.TAX_GROUP_ID):
            self._check_positive_id(source, collector, f.TAX_GROUP_ID)

        self._check_min_max_policy(source, collector, calculation_type, applicability)

    def _create_loan_checks(self, source, collector, calculation_type) -> None:
        time_type = self._required_timing(
            source, collector, valid_timings_for(ChargeApplicability.LOAN)
        )

        payment_mode = source.extract_int(f.CHARGE_PAYMENT_MODE)
        if collector.not_null(f.CHARGE_PAYMENT_MODE, payment_mode):
            collector.one_of(
                f.CHARGE_PAYMENT_MODE, payment_mode, sorted(ChargePaymentMode.valid_codes())
            )

        self._check_method_for(collector, calculation_type, ChargeApplicability.LOAN)
        self._cross_check_raw(collector, time_type, calculation_type)

    def _create_savings_checks(self, source, collector, calculation_type, fee_interval) -> None:
        time_type = self._required_timing(
            source, collector, valid_timings_for(ChargeApplicability.SAVINGS)
        )
        timing = ChargeTiming.lookup(time_type)
        if timing is not None:
            self._check_savings_schedule(source, collector, timing, time_type, fee_interval, required=True)
        self._check_method_for(collector, calculation_type, ChargeApplicability.SAVINGS)

    def _create_client_checks(self, source, collector, calculation_type) -> None:
        self._required_timing(
            source, collector, valid_timings_for(ChargeApplicability.CLIENT)
        )
        self._check_method_for(collector, calculation_type, ChargeApplicability.CLIENT)
        if source.exists(f.GL_ACCOUNT_ID):
            self._check_positive_id(source, collector, f.GL_ACCOUNT_ID)

    def _create_share_checks(self, source, collector, calculation_type) -> None:
        time_type = self._required_timing(
            source, collector, valid_timings_for(ChargeApplicability.SHARES)
        )
        self._check_method_for(collector, calculation_type, ChargeApplicability.SHARES)
        if time_type == ChargeTiming.SHAREACCOUNT_ACTIVATION.value:
            collector.one_of(
                f.CHARGE_CALCULATION_TYPE,
                calculation_type,
                codes(valid_calculation_methods_for_share_account_activation()),
            )

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def _update_checks(self, source: FieldSource, collector: ValidationCollector) -> None:
        if source.exists(f.NAME):
            name = source.extract_string(f.NAME)
            collector.not_blank(f.NAME, name)
            collector.not_exceeding_length(f.NAME, name, self.settings.name_max_length)

        if source.exists(f.CURRENCY_CODE):
            currency_code = source.extract_string(f.CURRENCY_CODE)
            collector.not_blank(f.CURRENCY_CODE, currency_code)
            collector.not_exceeding_length(
                f.CURRENCY_CODE, currency_code, self.settings.currency_code_max_length
            )

        if source.exists(f.AMOUNT):
            amount = source.extract_decimal(f.AMOUNT)
            if collector.not_null(f.AMOUNT, amount):
                collector.positive_amount(f.AMOUNT, amount)

        if source.exists(f.CHART):
            slabs = source.extract_slabs(f.CHART)
            if collector.not_null(f.CHART, slabs):
                check_slab_set(slabs, collector, self.settings)

        applicability: ChargeApplicability | None = None
        if source.exists(f.CHARGE_APPLIES_TO):
            applies_to = source.extract_int(f.CHARGE_APPLIES_TO)
            if collector.not_null(f.CHARGE_APPLIES_TO, applies_to) and collector.one_of(
                f.CHARGE_APPLIES_TO, applies_to, sorted(ChargeApplicability.valid_codes())
            ):
                applicability = ChargeApplicability.from_code(applies_to)

        self._check_free_withdrawal(source, collector)
        self._check_payment_type(source, collector)

        time_type: int | None = None
        if source.exists(f.CHARGE_TIME_TYPE):
            time_type = source.extract_int(f.CHARGE_TIME_TYPE)
            allowed = (
                valid_timings_for(applicability)
                if applicability is not None
                else all_valid_timings()
            )
            if collector.not_null(f.CHARGE_TIME_TYPE, time_type):
                collector.one_of(f.CHARGE_TIME_TYPE, time_type, codes(allowed))

        if source.exists(f.FEE_ON_MONTH_DAY):
            collector.not_null(f.FEE_ON_MONTH_DAY, source.extract_month_day(f.FEE_ON_MONTH_DAY))

        fee_interval: int | None = None
        if source.exists(f.FEE_INTERVAL):
            fee_interval = source.extract_int(f.FEE_INTERVAL)
            collector.integer_greater_than_zero(f.FEE_INTERVAL, fee_interval)

        calculation_type: int | None = None
        if source.exists(f.CHARGE_CALCULATION_TYPE):
            calculation_type = source.extract_int(f.CHARGE_CALCULATION_TYPE)
            allowed_methods = (
                valid_calculation_methods_for(applicability)
                if applicability is not None
                else all_valid_calculation_methods()
            )
            if collector.not_null(f.CHARGE_CALCULATION_TYPE, calculation_type):
                collector.one_of(
                    f.CHARGE_CALCULATION_TYPE, calculation_type, codes(allowed_methods)
                )

        if source.exists(f.CHARGE_PAYMENT_MODE):
            payment_mode = source.extract_int(f.CHARGE_PAYMENT_MODE)
            if collector.not_null(f.CHARGE_PAYMENT_MODE, payment_mode):
                collector.one_of(
                    f.CHARGE_PAYMENT_MODE, payment_mode, sorted(ChargePaymentMode.valid_codes())
                )

        self._check_optional_flags_and_caps(source, collector)

        if source.exists(f.FEE_FREQUENCY):
            self._check_fee_frequency(collector, source.extract_int(f.FEE_FREQUENCY))

        for id_parameter in (f.GL_ACCOUNT_ID, f.TAX_GROUP_ID):
            if source.exists(id_parameter):
                self._check_positive_id(source, collector, id_parameter)

        timing = ChargeTiming.lookup(time_type)
        if applicability is ChargeApplicability.SAVINGS and timing is not None:
            self._check_savings_schedule(source, collector, timing, time_type, fee_interval, required=False)
        if (
            applicability is ChargeApplicability.SHARES
            and timing is ChargeTiming.SHAREACCOUNT_ACTIVATION
        ):
            collector.one_of(
                f.CHARGE_CALCULATION_TYPE,
                calculation_type,
                codes(valid_calculation_methods_for_share_account_activation()),
            )
        if applicability in (None, ChargeApplicability.LOAN):
            self._cross_check_raw(collector, time_type, calculation_type)

        if applicability is not None:
            self._check_min_max_policy(source, collector, calculation_type, applicability)

    # ------------------------------------------------------------------
    # Shared rules
    # ------------------------------------------------------------------

    def _required_timing(self, source, collector, allowed: tuple[ChargeTiming, ...]) -> int | None:
        time_type = source.extract_int(f.CHARGE_TIME_TYPE)
        if collector.not_null(f.CHARGE_TIME_TYPE, time_type):
            collector.one_of(f.CHARGE_TIME_TYPE, time_type, codes(allowed))
        return time_type

    def _check_method_for(self, collector, calculation_type, applicability) -> None:
        collector.one_of(
            f.CHARGE_CALCULATION_TYPE,
            calculation_type,
            codes(valid_calculation_methods_for(applicability)),
        )

    def _check_fee_frequency(self, collector, fee_frequency: int | None) -> None:
        rng = self.settings.fee_frequency
        collector.in_range(f.FEE_FREQUENCY, fee_frequency, rng.minimum, rng.maximum)

    def _check_savings_schedule(
        self,
        source: FieldSource,
        collector: ValidationCollector,
        timing: ChargeTiming,
        time_type: int,
        fee_interval: int | None,
        required: bool,
    ) -> None:
        """Month-day and interval rules for recurring savings fees."""
        traits = timing.traits
        if traits.is_weekly_fee:
            collector.must_be_blank_when(
                f.FEE_ON_MONTH_DAY,
                source.extract_string(f.FEE_ON_MONTH_DAY),
                f.CHARGE_TIME_TYPE,
                time_type,
            )
        if traits.is_monthly_fee:
            if required or source.exists(f.FEE_ON_MONTH_DAY):
                collector.not_null(f.FEE_ON_MONTH_DAY, source.extract_month_day(f.FEE_ON_MONTH_DAY))
            if required or source.exists(f.FEE_INTERVAL):
                rng = self.settings.monthly_fee_interval
                if collector.not_null(f.FEE_INTERVAL, fee_interval):
                    collector.in_range(f.FEE_INTERVAL, fee_interval, rng.minimum, rng.maximum)
        if traits.is_annual_fee and (required or source.exists(f.FEE_ON_MONTH_DAY)):
            collector.not_null(f.FEE_ON_MONTH_DAY, source.extract_month_day(f.FEE_ON_MONTH_DAY))

    def _check_free_withdrawal(self, source, collector) -> None:
        if not source.exists(f.ENABLE_FREE_WITHDRAWAL_CHARGE):
            return
        enabled = source.extract_bool(f.ENABLE_FREE_WITHDRAWAL_CHARGE)
        if collector.not_null(f.ENABLE_FREE_WITHDRAWAL_CHARGE, enabled) and enabled:
            for parameter in (f.FREE_WITHDRAWAL_FREQUENCY, f.RESTART_COUNT_FREQUENCY):
                value = source.extract_int(parameter)
                if collector.not_null(parameter, value):
                    collector.integer_greater_than_zero(parameter, value)
            # Frequency type code is accepted as-is
            source.extract_int(f.COUNT_FREQUENCY_TYPE)

    def _check_payment_type(self, source, collector) -> None:
        if not source.exists(f.ENABLE_PAYMENT_TYPE):
            return
        enabled = source.extract_bool(f.ENABLE_PAYMENT_TYPE)
        if collector.not_null(f.ENABLE_PAYMENT_TYPE, enabled) and enabled:
            payment_type_id = source.extract_int(f.PAYMENT_TYPE_ID)
            if collector.not_null(f.PAYMENT_TYPE_ID, payment_type_id):
                collector.integer_greater_than_zero(f.PAYMENT_TYPE_ID, payment_type_id)

    def _check_optional_flags_and_caps(self, source, collector) -> None:
        for parameter in (f.PENALTY, f.ACTIVE):
            if source.exists(parameter):
                collector.not_null(parameter, source.extract_bool(parameter))
        for parameter in (f.MIN_CAP, f.MAX_CAP):
            if source.exists(parameter):
                value = source.extract_decimal(parameter)
                if collector.not_null(parameter, value):
                    collector.positive_amount(parameter, value)

    def _check_positive_id(self, source, collector, parameter: str) -> None:
        value = source.extract_int(parameter)
        if collector.not_null(parameter, value):
            collector.integer_greater_than_zero(parameter, value)

    def _cross_check_raw(self, collector, time_type: int | None, calculation_type: int | None) -> None:
        timing = ChargeTiming.lookup(time_type)
        method = ChargeCalculationMethod.lookup(calculation_type)
        if timing is not None and method is not None:
            self._check_timing_and_method(collector, timing, method)

    def _check_timing_and_method(
        self,
        collector: ValidationCollector,
        timing: ChargeTiming,
        method: ChargeCalculationMethod,
    ) -> None:
        if timing is ChargeTiming.SHAREACCOUNT_ACTIVATION:
            collector.one_of(
                f.CHARGE_CALCULATION_TYPE,
                method.value,
                codes(valid_calculation_methods_for_share_account_activation()),
            )
        if timing is ChargeTiming.TRANCHE_DISBURSEMENT:
            collector.one_of(
                f.CHARGE_CALCULATION_TYPE,
                method.value,
                codes(valid_calculation_methods_for_tranche_disbursement()),
            )
        else:
            collector.not_one_of(
                f.CHARGE_CALCULATION_TYPE,
                method.value,
                (ChargeCalculationMethod.PERCENT_OF_DISBURSEMENT_AMOUNT.value,),
            )

    def _check_min_max_policy(
        self,
        source: FieldSource,
        collector: ValidationCollector,
        calculation_type: int | None,
        applicability: ChargeApplicability | None,
    ) -> None:
        """Fail fast when a min/max amount range contradicts the charge type."""
        min_amount = source.extract_decimal(f.MIN_AMOUNT)
        max_amount = source.extract_decimal(f.MAX_AMOUNT)
        if min_amount is None or max_amount is None or applicability is None:
            return

        if applicability not in (ChargeApplicability.LOAN, ChargeApplicability.SAVINGS):
            raise MinMaxNotSupportedError(
                "Minimum and Maximum Amount is only supported on Loans and "
                "Savings Deposits charges",
                applicability=applicability.name,
            )

        time_type = source.extract_int(f.CHARGE_TIME_TYPE)
        if not collector.not_null(f.CHARGE_TIME_TYPE, time_type):
            return
        timing = ChargeTiming.lookup(time_type)
        if timing is None:
            # Already reported as an enumeration error
            return
        method = ChargeCalculationMethod.lookup(calculation_type)

        allowed = (
            applicability is ChargeApplicability.SAVINGS
            and method is ChargeCalculationMethod.PERCENT_OF_AMOUNT
            and timing.traits.is_withdrawal_fee
        ) or (
            applicability is ChargeApplicability.LOAN
            and not timing.traits.is_on_specified_due_date
            and method is not ChargeCalculationMethod.FLAT
        )
        if allowed:
            _check_min_not_above_max(min_amount, max_amount)
            return

        method_name = method.name if method is not None else None
        raise MinMaxNotSupportedError(
            "Minimum and Maximum Amount is not supported with given settings of "
            f"[Applies To: {applicability.name}, charge time type: {timing.name}, "
            f"and Charge Calculation Type: {method_name}]",
            applicability=applicability.name,
            timing=timing.name,
            calculation_method=method_name,
        )


def _check_min_not_above_max(min_amount: Decimal, max_amount: Decimal) -> None:
    if max_amount < min_amount:
        raise MinExceedsMaxError(min_amount, max_amount)


# ---------------------------------------------------------------------------
# Module-level entry points (active settings, resolved per call)
# ---------------------------------------------------------------------------


def validate_for_create(source: FieldSource) -> None:
    ChargeDefinitionValidator.from_active_settings().validate_for_create(source)


def validate_for_update(source: FieldSource, charge_id: int | None = None) -> None:
    ChargeDefinitionValidator.from_active_settings().validate_for_update(source, charge_id)


def validate_timing_and_calculation_method(
    timing: ChargeTiming | int,
    calculation_method: ChargeCalculationMethod | int,
) -> None:
    ChargeDefinitionValidator.from_active_settings().validate_timing_and_calculation_method(
        timing, calculation_method
    )


def validate_slab_set(slabs: Iterable[ChargeSlab]) -> None:
    ChargeDefinitionValidator.from_active_settings().validate_slab_set(slabs)
