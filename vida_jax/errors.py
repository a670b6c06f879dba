# vida_jax/errors.py
"""Exceptions raised by vida_jax."""
from __future__ import annotations


class VidaError(Exception):
    """Base class for all vida_jax errors."""


class InvalidParameter(VidaError, ValueError):
    """A filter was constructed with a parameter outside its declared domain."""

    def __init__(self, kind: str, field: str, value, requirement: str):
        self.kind = kind
        self.field = field
        self.value = value
        self.requirement = requirement
        super().__init__(f"{kind}: {field}={value!r} violates {requirement}")


class ParameterCountMismatch(VidaError, ValueError):
    """A flat parameter vector does not match the size of its filter shape."""

    def __init__(self, kind: str, expected: int, got: int):
        self.kind = kind
        self.expected = expected
        self.got = got
        super().__init__(
            f"{kind}: expected {expected} parameters, got {got}"
        )


class DegenerateDistribution(VidaError, ValueError):
    """An image or filter has zero (or non-finite) total intensity."""


class InvalidBounds(VidaError, ValueError):
    """Lower/upper/initial parameter vectors are inconsistent."""
