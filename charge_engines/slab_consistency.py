"""
Slab-Set Consistency Checker (``charge_engines.slab_consistency``).

Responsibility
--------------
Verifies that a charge rate chart forms a single contiguous, non-overlapping
sequence of period ranges ending in an open-ended slab.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O.  Used directly by
callers holding typed slabs and by ``definition_validator`` when a payload
carries a ``chart``.

Algorithm
---------
Slabs are sorted ascending by ``from_period`` and walked pairwise.  Once
sorted, any overlap or gap in the set shows up between immediate neighbours,
so one linear pass after the sort is enough.

Failure modes
-------------
* ``check_slab_set`` records errors into the caller's collector.
* ``validate_slab_set`` raises one ``AggregateValidationError``.
"""

from __future__ import annotations

from collections.abc import Iterable

from charge_config.schema import ChargeRuleSettings
from charge_kernel.domain.charge_slab import AMOUNT, FROM_PERIOD, ChargeSlab
from charge_kernel.domain.validation import ValidationCollector
from charge_kernel.logging_config import get_logger

logger = get_logger("engines.slab_consistency")


def _sort_key(slab: ChargeSlab) -> tuple[int, int]:
    # Invalid slabs (no from_period) sort first; they are reported, not compared
    if slab.from_period is None:
        return (0, 0)
    return (1, slab.from_period)


def check_slab_set(
    slabs: Iterable[ChargeSlab],
    collector: ValidationCollector,
    settings: ChargeRuleSettings | None = None,
) -> None:
    """Record every overlap, gap, blank bound and bad terminal range."""
    settings = settings or ChargeRuleSettings()
    ordered = sorted(slabs, key=_sort_key)

    for i, slab in enumerate(ordered):
        if not slab.is_valid():
            collector.fail(
                FROM_PERIOD,
                "cannot.be.blank",
                f"The parameter `{FROM_PERIOD}` is mandatory.",
                dedupe=False,
            )
        elif slab.amount is not None:
            collector.positive_amount(AMOUNT, slab.amount)

        if i + 1 < len(ordered):
            next_slab = ordered[i + 1]
            if slab.is_valid() and next_slab.is_valid():
                if slab.overlaps(next_slab):
                    second = slab.from_period if settings.legacy_overlap_arguments else slab.to_period
                    collector.fail_with_code(
                        "chart.slabs.range.overlapping",
                        f"Chart slab ranges {slab.from_period}-{slab.to_period} and "
                        f"{next_slab.from_period}-{next_slab.to_period} overlap.",
                        slab.from_period,
                        second,
                        next_slab.from_period,
                        next_slab.to_period,
                    )
                elif slab.has_gap(next_slab):
                    collector.fail_with_code(
                        "chart.slabs.range.has.gap",
                        f"Chart slab ranges {slab.from_period}-{slab.to_period} and "
                        f"{next_slab.from_period}-{next_slab.to_period} leave a gap.",
                        slab.from_period,
                        slab.to_period,
                        next_slab.from_period,
                        next_slab.to_period,
                    )
        elif slab.is_not_proper_end():
            collector.fail_with_code(
                "chart.slabs.range.end.incorrect",
                f"The last chart slab must be open-ended, but ends at {slab.to_period}.",
                slab.to_period,
            )

    logger.debug(
        "slab_set_checked",
        extra={"slab_count": len(ordered), "error_count": len(collector.errors)},
    )


def validate_slab_set(
    slabs: Iterable[ChargeSlab],
    settings: ChargeRuleSettings | None = None,
) -> None:
    """Check a rate chart on its own; raise AggregateValidationError on problems."""
    settings = settings or ChargeRuleSettings()
    collector = ValidationCollector(settings.resource)
    check_slab_set(slabs, collector, settings)
    collector.raise_if_errors()
