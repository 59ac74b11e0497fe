"""
Settings Loader (``charge_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into ``ChargeRuleSettings``.
Callers obtain settings through ``charge_config.get_active_settings()``;
this module is the parsing step behind it.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys or wrongly typed values  -> ``ValueError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from charge_config.schema import ChargeRuleSettings, IntRange

_KNOWN_KEYS = frozenset({
    "resource",
    "name_max_length",
    "currency_code_max_length",
    "fee_frequency",
    "monthly_fee_interval",
    "legacy_overlap_arguments",
})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_range(value: Any, key: str) -> IntRange:
    """Parse an IntRange from ``{min: x, max: y}`` or a two-item list."""
    if isinstance(value, dict):
        lo, hi = value.get("min"), value.get("max")
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        lo, hi = value
    else:
        raise ValueError(f"{key} must be a {{min, max}} mapping, got {value!r}")
    if not isinstance(lo, int) or not isinstance(hi, int):
        raise ValueError(f"{key} bounds must be integers, got {value!r}")
    return IntRange(minimum=lo, maximum=hi)


def _parse_flag(value: Any, key: str) -> bool:
    # YAML quoted "false" is a non-empty string; only real booleans count
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def parse_settings(data: dict[str, Any]) -> ChargeRuleSettings:
    """Parse ChargeRuleSettings from a dict; missing keys keep their defaults."""
    section = data.get("charge_rules", data)
    unknown = sorted(set(section) - _KNOWN_KEYS)
    if unknown:
        raise ValueError(f"Unknown charge_rules setting(s): {', '.join(unknown)}")

    defaults = ChargeRuleSettings()
    return ChargeRuleSettings(
        resource=str(section.get("resource", defaults.resource)),
        name_max_length=int(section.get("name_max_length", defaults.name_max_length)),
        currency_code_max_length=int(
            section.get("currency_code_max_length", defaults.currency_code_max_length)
        ),
        fee_frequency=(
            parse_range(section["fee_frequency"], "fee_frequency")
            if "fee_frequency" in section
            else defaults.fee_frequency
        ),
        monthly_fee_interval=(
            parse_range(section["monthly_fee_interval"], "monthly_fee_interval")
            if "monthly_fee_interval" in section
            else defaults.monthly_fee_interval
        ),
        legacy_overlap_arguments=_parse_flag(
            section.get("legacy_overlap_arguments", defaults.legacy_overlap_arguments),
            "legacy_overlap_arguments",
        ),
    )


def load_settings(path: Path) -> ChargeRuleSettings:
    return parse_settings(load_yaml_file(path))
