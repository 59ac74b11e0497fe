"""
Pytest fixtures for the charge kernel test suite.

Provides:
- A validator built from default settings
- Baseline valid create payloads per applicability (fresh dict per test)
- A source factory wrapping payload dicts in MappingFieldSource
"""

import pytest

from charge_config.schema import ChargeRuleSettings
from charge_engines.definition_validator import ChargeDefinitionValidator
from charge_kernel.domain.charge_types import (
    ChargeApplicability,
    ChargeCalculationMethod,
    ChargePaymentMode,
    ChargeTiming,
)
from charge_kernel.domain.field_source import MappingFieldSource
from charge_kernel.logging_config import LogContext, reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def settings() -> ChargeRuleSettings:
    return ChargeRuleSettings()


@pytest.fixture
def validator(settings) -> ChargeDefinitionValidator:
    return ChargeDefinitionValidator(settings)


@pytest.fixture
def make_source():
    """Build a MappingFieldSource from a base payload plus overrides.

    An override value of ``...`` removes the key.
    """

    def _make(base: dict, **overrides) -> MappingFieldSource:
        payload = dict(base)
        for key, value in overrides.items():
            if value is ...:
                payload.pop(key, None)
            else:
                payload[key] = value
        return MappingFieldSource(payload)

    return _make


@pytest.fixture
def loan_payload() -> dict:
    return {
        "name": "Loan processing fee",
        "currencyCode": "USD",
        "locale": "en",
        "chargeAppliesTo": ChargeApplicability.LOAN.value,
        "chargeTimeType": ChargeTiming.DISBURSEMENT.value,
        "chargeCalculationType": ChargeCalculationMethod.FLAT.value,
        "chargePaymentMode": ChargePaymentMode.REGULAR.value,
        "amount": "25.00",
        "active": True,
        "penalty": False,
    }


@pytest.fixture
def savings_payload() -> dict:
    return {
        "name": "Withdrawal fee",
        "currencyCode": "USD",
        "chargeAppliesTo": ChargeApplicability.SAVINGS.value,
        "chargeTimeType": ChargeTiming.WITHDRAWAL_FEE.value,
        "chargeCalculationType": ChargeCalculationMethod.PERCENT_OF_AMOUNT.value,
        "amount": "1.5",
        "active": True,
    }


@pytest.fixture
def client_payload() -> dict:
    return {
        "name": "Membership fee",
        "currencyCode": "KES",
        "chargeAppliesTo": ChargeApplicability.CLIENT.value,
        "chargeTimeType": ChargeTiming.SPECIFIED_DUE_DATE.value,
        "chargeCalculationType": ChargeCalculationMethod.FLAT.value,
        "amount": "100",
    }


@pytest.fixture
def share_payload() -> dict:
    return {
        "name": "Share activation fee",
        "currencyCode": "EUR",
        "chargeAppliesTo": ChargeApplicability.SHARES.value,
        "chargeTimeType": ChargeTiming.SHAREACCOUNT_ACTIVATION.value,
        "chargeCalculationType": ChargeCalculationMethod.FLAT.value,
        "amount": "10",
    }
