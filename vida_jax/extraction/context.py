# vida_jax/extraction/context.py
"""
ExtractionContext: the typed adapter between a divergence and an optimizer.

It is not an optimizer. It fixes the filter family (shape), the box
[lower, upper] and the initial guess, validates them once, and exposes flat
vectors plus `objective(p)` to any external minimizer.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import jax.numpy as jnp
import numpy as np

from ..divergence import Divergence, make_objective, make_value_and_grad
from ..errors import InvalidBounds
from ..filters import Filter, FilterShape, pack, unpack


def _describe(shape: FilterShape) -> str:
    """kind[size], with static data and children spelled out."""
    out = f"{shape.kind}[{shape.size}]"
    if shape.meta:
        out += f" meta={shape.meta!r}"
    if shape.children:
        out += "(" + ", ".join(_describe(child) for child in shape.children) + ")"
    return out


@dataclass(frozen=True, eq=False)
class ExtractionContext:
    """
    Divergence + bounds + initial guess for one (image, filter family) pair.

    divergence: Divergence bound to the image
    lower, upper: filters of the same shape giving componentwise bounds
    initial: filter of the same shape inside [lower, upper]

    Example
    -------
    >>> ctx = ExtractionContext(
    ...     Bhattacharyya(image),
    ...     lower=GaussianRing(5.0, 1.0, -20.0, -20.0),
    ...     upper=GaussianRing(40.0, 15.0, 20.0, 20.0),
    ...     initial=GaussianRing(20.0, 5.0, 0.0, 0.0),
    ... )
    >>> ctx.objective(ctx.initial_guess)
    """
    divergence: Divergence
    lower: Filter
    upper: Filter
    initial: Filter

    def __post_init__(self):
        shape = self.initial.shape
        for name in ("lower", "upper"):
            other = getattr(self, name).shape
            if other != shape:
                raise InvalidBounds(
                    f"{name} filter has shape {_describe(other)}, initial has {_describe(shape)}"
                )

        lo = np.asarray(pack(self.lower))
        hi = np.asarray(pack(self.upper))
        p0 = np.asarray(pack(self.initial))
        labels = self.initial.labels()
        for i in range(shape.size):
            if not lo[i] <= hi[i]:
                raise InvalidBounds(f"coordinate {i} ({labels[i]}): lower {lo[i]} > upper {hi[i]}")
            if not lo[i] <= p0[i] <= hi[i]:
                raise InvalidBounds(
                    f"coordinate {i} ({labels[i]}): initial {p0[i]} outside [{lo[i]}, {hi[i]}]"
                )

        object.__setattr__(self, "_lower", lo)
        object.__setattr__(self, "_upper", hi)
        object.__setattr__(self, "_initial", p0)
        object.__setattr__(self, "_objective", make_objective(self.divergence, shape))
        object.__setattr__(self, "_value_and_grad", make_value_and_grad(self.divergence, shape))

    # -- flat vectors --------------------------------------------------------

    @property
    def shape(self) -> FilterShape:
        return self.initial.shape

    @property
    def size(self) -> int:
        return self.shape.size

    @property
    def lower_bounds(self) -> np.ndarray:
        return self._lower.copy()

    @property
    def upper_bounds(self) -> np.ndarray:
        return self._upper.copy()

    @property
    def initial_guess(self) -> np.ndarray:
        return self._initial.copy()

    @property
    def bounds(self) -> List[Tuple[float, float]]:
        """(lo, hi) pairs, the form scipy-style optimizers expect."""
        return [(float(lo), float(hi)) for lo, hi in zip(self._lower, self._upper)]

    @property
    def labels(self) -> List[str]:
        return self.initial.labels()

    # -- optimizer boundary --------------------------------------------------

    def objective(self, p) -> jnp.ndarray:
        """Divergence of the filter encoded by `p` (to be minimized)."""
        return self._objective(p)

    def __call__(self, p) -> jnp.ndarray:
        return self._objective(p)

    def value_and_grad(self, p):
        """(objective(p), d objective / dp)."""
        return self._value_and_grad(p)

    def reconstruct(self, p) -> Filter:
        """Turn a flat result back into a (validated) filter."""
        return unpack(np.asarray(p, dtype=float), self.shape)
