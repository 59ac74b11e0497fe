"""
Settings Validator (``charge_config.validator``).

Checks a parsed ``ChargeRuleSettings`` before it is handed to the engines.

Invariants enforced
-------------------
* Length limits are positive.
* Ranges are non-empty (minimum <= maximum).
* The monthly fee interval never allows zero or negative months.

Failure modes
-------------
* Errors (``SettingsValidationResult.errors``) -> settings MUST NOT be used.
* Warnings -> settings usable but should be reviewed.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from charge_config.schema import ChargeRuleSettings, IntRange


@dataclass
class SettingsValidationResult:
    """Result of settings validation. ``is_valid`` only when no errors."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_settings(settings: ChargeRuleSettings) -> SettingsValidationResult:
    result = SettingsValidationResult()

    if not settings.resource.strip():
        result.add_error("resource must not be blank")

    for name in ("name_max_length", "currency_code_max_length"):
        value = getattr(settings, name)
        if value < 1:
            result.add_error(f"{name} must be positive, got {value}")

    _validate_range("fee_frequency", settings.fee_frequency, result)
    _validate_range("monthly_fee_interval", settings.monthly_fee_interval, result)

    if settings.monthly_fee_interval.minimum < 1:
        result.add_error(
            "monthly_fee_interval must start at 1 or more, got "
            f"{settings.monthly_fee_interval.minimum}"
        )
    if settings.currency_code_max_length != 3:
        result.add_warning(
            f"currency_code_max_length is {settings.currency_code_max_length}; "
            "ISO 4217 codes are 3 characters"
        )
    return result


def _validate_range(name: str, value: IntRange, result: SettingsValidationResult) -> None:
    if value.minimum > value.maximum:
        result.add_error(
            f"{name} is empty: minimum {value.minimum} > maximum {value.maximum}"
        )
