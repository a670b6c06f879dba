# vida_jax/divergence/objective.py
"""
Flat-vector objectives for external optimizers.

objective(p) = divergence(unpack(p, shape))

The returned callables are re-entrant: they close over the (immutable)
divergence and shape only, so any number of optimizer threads can call them
concurrently, each with its own parameter buffer.
"""
from __future__ import annotations

from typing import Callable, Optional

import jax
import jax.numpy as jnp

from ..filters import FilterShape, unpack
from .base import Divergence, check_total


def _core(divergence: Divergence, shape: FilterShape):
    def value_and_total(p):
        F, total = divergence.distribution(unpack(p, shape))
        return divergence.compare(F, divergence.image.data), total
    return value_and_total


def make_objective(
    divergence: Divergence,
    shape: FilterShape,
    jit: Optional[bool] = None,
) -> Callable:
    """
    Create `objective(p) -> scalar` for the filter family described by `shape`.

    Args:
        divergence: Divergence bound to the image being fitted
        shape: Filter shape; `p` must have length `shape.size`
        jit: Compile the evaluation (defaults to `divergence.cfg.jit`)

    Returns:
        Function p -> scalar divergence (to be minimized). Raises
        ParameterCountMismatch for a wrong-length `p` and DegenerateDistribution
        when the filter has zero total intensity over the image grid.
    """
    core = _core(divergence, shape)
    if divergence.cfg.jit if jit is None else jit:
        core = jax.jit(core)

    def objective(p):
        val, total = core(jnp.asarray(p, dtype=float))
        check_total(total)
        return val

    return objective


def make_value_and_grad(
    divergence: Divergence,
    shape: FilterShape,
    jit: Optional[bool] = None,
) -> Callable:
    """Create `p -> (value, gradient)` for gradient-based optimizers."""
    core = _core(divergence, shape)
    fn = jax.value_and_grad(lambda p: core(p)[0])
    if divergence.cfg.jit if jit is None else jit:
        fn = jax.jit(fn)

    def value_and_grad(p):
        return fn(jnp.asarray(p, dtype=float))

    return value_and_grad
