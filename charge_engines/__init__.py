"""
Charge Engines -- pure validation engines for charge definitions.

Engines:
    definition_validator: create/update/timing-method rule engine
    slab_consistency:     rate-chart overlap/gap/terminal-range checker

All engines are stateless: every call owns its own error accumulator, so
they are safe for concurrent use on independent inputs.  The module-level
validate_* functions exported here read the active charge rule settings on
each call.
"""

from charge_engines.definition_validator import (
    ChargeDefinitionValidator,
    validate_for_create,
    validate_for_update,
    validate_slab_set,
    validate_timing_and_calculation_method,
)
from charge_engines.slab_consistency import check_slab_set

__all__ = [
    "ChargeDefinitionValidator",
    "check_slab_set",
    "validate_for_create",
    "validate_for_update",
    "validate_slab_set",
    "validate_timing_and_calculation_method",
]
