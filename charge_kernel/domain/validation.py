"""
Field validation accumulator (kernel primitive).

``ValidationCollector`` owns the transient error list for one validation
call.  Each check records a ``ParameterError`` on failure and returns whether
the value passed, so callers can gate dependent checks.  Checks never raise;
``raise_if_errors`` converts the collected list into a single
``AggregateValidationError`` at the end of the call.

Checks that receive ``None`` pass silently unless they are presence checks
(``not_null`` / ``not_blank``).
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from charge_kernel.domain.dtos import ParameterError
from charge_kernel.exceptions import AggregateValidationError


class ValidationCollector:
    """Per-call ordered collection of ParameterErrors."""

    def __init__(self, resource: str = "charge"):
        self.resource = resource
        self._errors: list[ParameterError] = []

    @property
    def errors(self) -> tuple[ParameterError, ...]:
        return tuple(self._errors)

    @property
    def is_valid(self) -> bool:
        return not self._errors

    def has_error_for(self, parameter: str) -> bool:
        return any(e.parameter == parameter for e in self._errors)

    def raise_if_errors(self) -> None:
        if self._errors:
            raise AggregateValidationError(self._errors)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def fail(
        self,
        parameter: str,
        suffix: str,
        message: str,
        *args: Any,
        dedupe: bool = True,
    ) -> None:
        """Record an error whose code includes the parameter name.

        With ``dedupe=False`` the error is kept even when an identical one was
        already recorded, for checks that run once per element of a set.
        """
        self._add(
            ParameterError(
                resource=self.resource,
                parameter=parameter,
                code=f"validation.msg.{self.resource}.{parameter}.{suffix}",
                message=message,
                args=args,
            ),
            dedupe=dedupe,
        )

    def fail_with_code(
        self, suffix: str, message: str, *args: Any, parameter: str | None = None
    ) -> None:
        """Record an error whose code does not include a parameter name."""
        self._add(
            ParameterError(
                resource=self.resource,
                parameter=parameter,
                code=f"validation.msg.{self.resource}.{suffix}",
                message=message,
                args=args,
            )
        )

    def _add(self, error: ParameterError, dedupe: bool = True) -> None:
        # Identical checks reached from two rule paths report once
        if not dedupe or error not in self._errors:
            self._errors.append(error)

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def not_null(self, parameter: str, value: Any) -> bool:
        if value is None:
            self.fail(
                parameter,
                "cannot.be.blank",
                f"The parameter `{parameter}` is mandatory.",
            )
            return False
        return True

    def not_blank(self, parameter: str, value: str | None) -> bool:
        if value is None or not str(value).strip():
            self.fail(
                parameter,
                "cannot.be.blank",
                f"The parameter `{parameter}` is mandatory.",
            )
            return False
        return True

    def not_exceeding_length(
        self, parameter: str, value: str | None, max_length: int
    ) -> bool:
        if value is not None and len(value) > max_length:
            self.fail(
                parameter,
                "exceeds.max.length",
                f"The parameter `{parameter}` exceeds max length of {max_length}.",
                max_length,
                value,
            )
            return False
        return True

    def integer_greater_than_zero(self, parameter: str, value: int | None) -> bool:
        if value is not None and value < 1:
            self.fail(
                parameter,
                "not.greater.than.zero",
                f"The parameter `{parameter}` must be greater than 0.",
                value,
            )
            return False
        return True

    def positive_amount(self, parameter: str, value: Decimal | None) -> bool:
        if value is not None and not (value.is_finite() and value > Decimal("0")):
            self.fail(
                parameter,
                "not.greater.than.zero",
                f"The parameter `{parameter}` must be greater than 0.",
                value,
            )
            return False
        return True

    def in_range(
        self, parameter: str, value: int | None, minimum: int, maximum: int
    ) -> bool:
        if value is not None and not minimum <= value <= maximum:
            self.fail(
                parameter,
                "is.not.within.expected.range",
                f"The parameter `{parameter}` must be between {minimum} and {maximum}.",
                value,
                minimum,
                maximum,
            )
            return False
        return True

    def one_of(self, parameter: str, value: Any, allowed: Iterable[Any]) -> bool:
        allowed = tuple(allowed)
        if value is not None and value not in allowed:
            self.fail(
                parameter,
                "is.not.one.of.expected.enumerations",
                f"The parameter `{parameter}` must be one of {list(allowed)}.",
                value,
                allowed,
            )
            return False
        return True

    def not_one_of(self, parameter: str, value: Any, unwanted: Iterable[Any]) -> bool:
        unwanted = tuple(unwanted)
        if value is not None and value in unwanted:
            self.fail(
                parameter,
                "is.one.of.unwanted.enumerations",
                f"The parameter `{parameter}` must not be any of {list(unwanted)}.",
                value,
                unwanted,
            )
            return False
        return True

    def must_be_blank_when(
        self,
        parameter: str,
        value: Any,
        provided_parameter: str,
        provided_value: Any,
    ) -> bool:
        if value is not None and str(value).strip():
            self.fail(
                parameter,
                f"cannot.also.be.provided.when.{provided_parameter}.is.{provided_value}",
                f"The parameter `{parameter}` cannot be provided when "
                f"`{provided_parameter}` is {provided_value}.",
                value,
                provided_parameter,
                provided_value,
            )
            return False
        return True
