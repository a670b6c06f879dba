# vida_jax/extraction/base.py
"""
Optimizer boundary.

Design principles
-----------------
- A Minimizer consumes a black-box `objective(p) -> scalar` plus box bounds
  and an initial vector; it MUST NOT inspect the objective beyond calling it
  (gradient-based minimizers may differentiate it with JAX).
- Which algorithm runs (local gradient, global stochastic, multi-start) is the
  minimizer's business; the context only guarantees the objective is
  re-entrant.
- Optimizer trouble (no convergence, budget exhausted) is reported through
  `converged=False` and the iteration count, never raised.
"""
from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, runtime_checkable

import numpy as np

from ..errors import InvalidBounds
from ..filters import Filter
from .context import ExtractionContext


@dataclass
class MinimizeResult:
    """What a Minimizer hands back."""
    x: np.ndarray
    fun: float
    converged: bool
    iterations: int
    diagnostics: Dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class Minimizer(Protocol):
    """
    Protocol for pluggable optimizers.

    minimize(objective, lower, upper, initial, options) -> MinimizeResult
    """

    def minimize(
        self,
        objective: Callable,
        lower: np.ndarray,
        upper: np.ndarray,
        initial: np.ndarray,
        options: Optional[Dict[str, Any]] = None,
    ) -> MinimizeResult:
        ...


@dataclass
class ExtractionRun:
    """Result of one extraction: the fitted filter and how we got there."""
    filter: Filter
    params: np.ndarray
    value: float
    converged: bool
    iterations: int
    diagnostics: Dict[str, Any] = field(default_factory=dict)


def extract(
    context: ExtractionContext,
    minimizer: Minimizer,
    initial=None,
    **options,
) -> ExtractionRun:
    """
    Run one minimizer against a context.

    Args:
        context: ExtractionContext holding the divergence and the box
        minimizer: Any object implementing the Minimizer protocol
        initial: Optional flat starting point (defaults to the context's
                 initial guess); must lie inside the bounds
        **options: Passed through to `minimizer.minimize`

    Returns:
        ExtractionRun with the reconstructed filter
    """
    lower = context.lower_bounds
    upper = context.upper_bounds
    p0 = context.initial_guess if initial is None else np.asarray(initial, dtype=float)
    if p0.shape != lower.shape:
        raise ValueError(f"initial has shape {p0.shape}, expected {lower.shape}")
    outside = np.flatnonzero((p0 < lower) | (p0 > upper))
    if outside.size:
        i = int(outside[0])
        raise InvalidBounds(
            f"coordinate {i} ({context.labels[i]}): initial {p0[i]} outside [{lower[i]}, {upper[i]}]"
        )

    res = minimizer.minimize(context.objective, lower, upper, p0, options or None)
    if not res.converged:
        warnings.warn(
            f"{type(minimizer).__name__} did not converge after {res.iterations} iterations "
            f"(objective {float(res.fun):.6g}).",
            RuntimeWarning,
        )

    params = np.asarray(res.x, dtype=float)
    return ExtractionRun(
        filter=context.reconstruct(params),
        params=params,
        value=float(res.fun),
        converged=bool(res.converged),
        iterations=int(res.iterations),
        diagnostics=dict(res.diagnostics),
    )


def best_of(runs: Sequence[ExtractionRun]) -> ExtractionRun:
    """Best-of reduction for multi-start extraction: lowest objective wins."""
    if len(runs) == 0:
        raise ValueError("best_of requires at least one run")
    return min(runs, key=lambda run: run.value)
