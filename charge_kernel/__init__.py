"""
Charge Kernel

Pure domain core for charge (fee/penalty) definitions:
- Category enumerations with per-applicability legal subsets
- Rate-chart slab model
- Field extraction contract for already-decoded request payloads
- Structured error model and typed exceptions
"""

__version__ = "0.1.0"
