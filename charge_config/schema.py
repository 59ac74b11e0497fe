"""
ChargeRuleSettings schema.

The human-authored, reviewable settings that parameterise the charge
validation engines.  YAML fragments are parsed into this type by the loader
and checked by the validator before use.

The closed set of recognised field names is NOT configurable; it lives in
``charge_kernel.domain.field_source.SUPPORTED_PARAMETERS``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IntRange:
    """Inclusive integer range."""

    minimum: int
    maximum: int


@dataclass(frozen=True)
class ChargeRuleSettings:
    """Limits and switches used by charge definition validation."""

    resource: str = "charge"
    name_max_length: int = 100
    currency_code_max_length: int = 3
    fee_frequency: IntRange = IntRange(0, 3)
    monthly_fee_interval: IntRange = IntRange(1, 12)
    # Overlap errors repeat from_period where to_period belongs; kept for
    # message compatibility with existing clients.
    legacy_overlap_arguments: bool = True
