"""
Charge domain -- pure value types with zero I/O.

Category enumerations, the rate-chart slab model, the field extraction
contract, error DTOs and the charge data carrier.
"""
