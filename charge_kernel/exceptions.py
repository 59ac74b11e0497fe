"""
Typed Exception Hierarchy for the Charge Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers translate charge validation outcomes into their own transport format
(HTTP 4xx bodies, command results). Parsing message strings for that is
fragile, so every failure carries:
  1. A TYPED exception class (catch by type, not message)
  2. A CODE class attribute (machine-readable, API-safe)
  3. Structured DATA attributes (not just a message string)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from ChargeKernelError:

    ChargeKernelError (base)
    |
    +-- InputShapeError
    |   +-- EmptyInputError
    |   +-- UnsupportedParameterError
    |   +-- UnknownCategoryValueError
    |   +-- FieldFormatError
    |
    +-- AggregateValidationError
    |
    +-- ChargeDomainRuleError
        +-- MinExceedsMaxError
        +-- MinMaxNotSupportedError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Input shape     | EMPTY_INPUT                 | No payload at all
                | UNSUPPORTED_PARAMETER       | Field outside the closed field set
                | UNKNOWN_CATEGORY_VALUE      | Raw code maps to no category variant
                | FIELD_FORMAT                | Field value has the wrong shape
----------------|-----------------------------|-----------------------------------------
Validation      | VALIDATION_FAILED           | One or more accumulated field errors
----------------|-----------------------------|-----------------------------------------
Domain rule     | MIN_EXCEEDS_MAX             | minAmount greater than maxAmount
                | MIN_MAX_NOT_SUPPORTED       | min/max range on an unsupported charge

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        validator.validate_for_create(source)
    except AggregateValidationError as e:
        # Every structural problem at once
        return {"errors": [err.to_dict() for err in e.errors]}
    except ChargeDomainRuleError as e:
        # One blocking business-rule contradiction
        return {"error": e.code, "message": str(e)}

Accumulated errors and domain-rule errors are never mixed in one outcome.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from charge_kernel.domain.dtos import ParameterError


class ChargeKernelError(Exception):
    """
    Base exception for all charge kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "CHARGE_KERNEL_ERROR"


# Input-shape exceptions


class InputShapeError(ChargeKernelError):
    """Base exception for malformed input, raised before any semantic check."""

    code: str = "INPUT_SHAPE_ERROR"


class EmptyInputError(InputShapeError):
    """The request carried no payload."""

    code: str = "EMPTY_INPUT"

    def __init__(self) -> None:
        super().__init__("Charge payload is blank")


class UnsupportedParameterError(InputShapeError):
    """The payload contains field names outside the supported set."""

    code: str = "UNSUPPORTED_PARAMETER"

    def __init__(self, parameters: list[str]):
        self.parameters = tuple(parameters)
        super().__init__(
            f"Unsupported parameter(s): {', '.join(self.parameters)}"
        )


class UnknownCategoryValueError(InputShapeError):
    """A raw code does not map to any variant of a category."""

    code: str = "UNKNOWN_CATEGORY_VALUE"

    def __init__(self, category: str, value: Any):
        self.category = category
        self.value = value
        super().__init__(f"Unknown {category} value: {value!r}")


class FieldFormatError(InputShapeError):
    """A field value cannot be read as the requested type."""

    code: str = "FIELD_FORMAT"

    def __init__(self, parameter: str, value: Any, expected: str):
        self.parameter = parameter
        self.value = value
        self.expected = expected
        super().__init__(
            f"Parameter '{parameter}' expected {expected}, got {value!r}"
        )


# Accumulated validation


class AggregateValidationError(ChargeKernelError):
    """
    One or more structural field errors.

    Raised exactly once per validation call, carrying every accumulated
    ParameterError in the order they were recorded.
    """

    code: str = "VALIDATION_FAILED"

    def __init__(self, errors: list[ParameterError] | tuple[ParameterError, ...]):
        self.errors = tuple(errors)
        super().__init__(
            f"Validation errors exist: {len(self.errors)} error(s)"
        )

    @property
    def error_codes(self) -> tuple[str, ...]:
        return tuple(e.code for e in self.errors)


# Domain-rule exceptions (fail fast)


class ChargeDomainRuleError(ChargeKernelError):
    """Base exception for cross-field business-rule contradictions."""

    code: str = "CHARGE_DOMAIN_RULE"


class MinExceedsMaxError(ChargeDomainRuleError):
    """minAmount is greater than maxAmount on a charge that supports both."""

    code: str = "MIN_EXCEEDS_MAX"

    def __init__(self, min_amount: Decimal, max_amount: Decimal):
        self.min_amount = min_amount
        self.max_amount = max_amount
        super().__init__(
            f"Minimum Amount [ {min_amount} ] can not be greater than "
            f"Maximum Amount [ {max_amount} ]"
        )


class MinMaxNotSupportedError(ChargeDomainRuleError):
    """The charge combination does not support a min/max amount range."""

    code: str = "MIN_MAX_NOT_SUPPORTED"

    def __init__(
        self,
        message: str,
        applicability: str | None = None,
        timing: str | None = None,
        calculation_method: str | None = None,
    ):
        self.applicability = applicability
        self.timing = timing
        self.calculation_method = calculation_method
        super().__init__(message)
