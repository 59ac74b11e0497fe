"""
charge_config -- single public entrypoint for charge rule settings.

Responsibility:
    Provides the ONLY way to obtain validation settings at runtime through
    ``get_active_settings()``.  No other component reads settings files or
    environment variables.

Architecture position:
    Configuration -- sits beside ``charge_kernel`` and below
    ``charge_engines``.  The kernel MUST NEVER import from ``charge_config``.

Failure modes:
    - ``FileNotFoundError`` -- the requested settings file does not exist.
    - ``ValueError`` -- unknown keys, bad types or failed validation.
"""

from __future__ import annotations

import os
from pathlib import Path

from charge_config.loader import load_settings
from charge_config.schema import ChargeRuleSettings, IntRange
from charge_config.validator import SettingsValidationResult, validate_settings
from charge_kernel.logging_config import get_logger

__all__ = [
    "ChargeRuleSettings",
    "IntRange",
    "SettingsValidationResult",
    "get_active_settings",
    "validate_settings",
]

_logger = get_logger("config")

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "defaults.yaml"
SETTINGS_PATH_ENV = "CHARGE_RULES_CONFIG"


def get_active_settings(path: Path | None = None) -> ChargeRuleSettings:
    """The ONLY public settings entrypoint.

    Resolution order: explicit ``path``, then the ``CHARGE_RULES_CONFIG``
    environment variable, then the packaged ``defaults.yaml``.

    Raises:
        ValueError: if the settings fail validation.
    """
    if path is None:
        env_path = os.environ.get(SETTINGS_PATH_ENV)
        path = Path(env_path) if env_path else DEFAULT_SETTINGS_PATH

    settings = load_settings(path)
    result = validate_settings(settings)
    for warning in result.warnings:
        _logger.warning(
            "charge_settings_warning",
            extra={"settings_path": str(path), "detail": warning},
        )
    if not result.is_valid:
        raise ValueError(
            f"Invalid charge rule settings in {path}: " + "; ".join(result.errors)
        )

    _logger.info(
        "charge_settings_loaded",
        extra={
            "settings_path": str(path),
            "resource": settings.resource,
            "legacy_overlap_arguments": settings.legacy_overlap_arguments,
        },
    )
    return settings
