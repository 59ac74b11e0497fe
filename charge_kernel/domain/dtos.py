"""
DTOs -- Pure charge validation data transfer objects.

Responsibility:
    Defines ParameterError, the structured shape every failed field check
    produces. Calling layers translate it into their own transport format
    (e.g. an HTTP 4xx body); this kernel does not perform that translation.

Architecture position:
    Kernel > Domain -- pure, zero I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ParameterError:
    """
    A single field-level validation error.

    Contract:
        resource is the API resource ("charge"), parameter the offending
        field name, code the machine-readable error code
        (``validation.msg.<resource>.<parameter>.<suffix>``), message the
        default English text, and args the values interpolated into it.

    Guarantees:
        - Immutable (frozen dataclass)
        - Equal errors compare equal, so duplicate checks can be collapsed

    Non-goals:
        - Does NOT raise exceptions -- it IS the error representation.
    """

    resource: str
    parameter: str | None
    code: str
    message: str
    args: tuple[Any, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "resource": self.resource,
            "parameter": self.parameter,
            "code": self.code,
            "message": self.message,
            "args": list(self.args),
        }
