# vida_jax/divergence/base.py
"""
Divergence base class, configuration and registry.

Design principles
-----------------
- A Divergence is an immutable value closing over one normalized image; it is
  re-evaluated for arbitrarily many filters and holds no mutable state.
- Every divergence is oriented for minimization and is zero (or at its
  minimum) when the normalized filter equals the image.
- `value(filter)` is pure and differentiable (no host-side checks), so it can
  be jitted, differentiated and vmapped.
- `__call__(filter)` adds the degenerate-distribution check for concrete
  inputs: a filter that sums to zero (or to a non-finite value) over the image
  grid raises instead of returning NaN.
- The filter is sampled at the image's own pixel centers, never on an
  independent grid.
"""
from __future__ import annotations

import warnings
from dataclasses import dataclass

import jax.numpy as jnp
import numpy as np

from ..errors import DegenerateDistribution
from ..filters.base import is_traced
from ..images import NormalizedImage


_REGISTRY = {}


def register(name, cls):
    if name in _REGISTRY:
        raise KeyError(f"Divergence '{name}' already registered.")
    _REGISTRY[name] = cls


def get(name):
    try:
        return _REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"Unknown divergence '{name}'. "
            f"Available: {list(_REGISTRY.keys())}"
        )


@dataclass(frozen=True)
class DivergenceCFG:
    """Configuration shared by all divergences."""
    jit: bool = True
    image_floor: float = 1e-50  # lower bound on image pixels inside logarithms
    normalization_rtol: float = 1e-6  # warn and renormalize beyond this


def check_total(total, what: str = "Filter"):
    """Raise DegenerateDistribution for a concrete zero or non-finite total."""
    if is_traced(total):
        return
    value = float(total)
    if not np.isfinite(value) or value <= 0:
        raise DegenerateDistribution(
            f"{what} has total intensity {value} over the image grid; "
            f"the divergence is undefined."
        )


@dataclass(frozen=True, eq=False)
class Divergence:
    """
    Discrepancy between a normalized image I and a filter F.

    Subclasses implement `compare(F, I)` for normalized (ny, nx) arrays.
    """
    image: NormalizedImage
    cfg: DivergenceCFG = DivergenceCFG()

    def __post_init__(self):
        total = self.image.total
        check_total(total, "Image")
        if abs(float(total) - 1.0) > self.cfg.normalization_rtol:
            warnings.warn(
                f"Image total intensity is {float(total):.6g}, not 1; renormalizing.",
                RuntimeWarning,
            )
            object.__setattr__(self, "image", self.image.normalized())
        X, Y = self.image.grid()
        object.__setattr__(self, "_X", X)
        object.__setattr__(self, "_Y", Y)

    @property
    def name(self) -> str:
        return type(self).__name__

    def compare(self, F: jnp.ndarray, I: jnp.ndarray) -> jnp.ndarray:
        raise NotImplementedError

    def distribution(self, filt):
        """Filter sampled at the image pixel centers, normalized, and its raw total."""
        F = jnp.broadcast_to(filt(self._X, self._Y), self._X.shape)
        total = jnp.sum(F)
        return F / total, total

    def value(self, filt) -> jnp.ndarray:
        F, _ = self.distribution(filt)
        return self.compare(F, self.image.data)

    def __call__(self, filt) -> jnp.ndarray:
        F, total = self.distribution(filt)
        check_total(total)
        return self.compare(F, self.image.data)
