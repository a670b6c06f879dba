# vida_jax/extraction/projected.py
"""
Projected first-order minimizer (reference Minimizer plug-in).

The search runs in unit-box coordinates u in [0, 1]^n, p = lower + u (upper -
lower), so that a single learning rate suits parameters of very different
scales (radii in pixels, angles in radians, relative weights). After every
optax update u is projected back onto the box. Coordinates with
lower == upper are held fixed.

The minimizer returns the best point seen and declares convergence when the
objective has not improved by more than `tol` for `patience` steps.
"""
from __future__ import annotations

import warnings
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Literal, Optional

import jax
import jax.numpy as jnp
import numpy as np
import optax

from .base import MinimizeResult


@dataclass(frozen=True)
class ProjectedGradientCFG:
    """Configuration for projected gradient minimization."""
    steps: int = 500
    lr: float = 1e-2
    optimizer: Literal["sgd", "adam", "rmsprop"] = "adam"
    tol: float = 1e-10
    patience: int = 20
    jit: bool = True


class ProjectedGradient:
    """
    Box-constrained optax minimizer implementing the Minimizer protocol.

    Examples:
        >>> method = ProjectedGradient(ProjectedGradientCFG(steps=300, lr=2e-2))
        >>> run = extract(ctx, method)
        >>> run.filter, run.value, run.converged
    """

    def __init__(self, cfg: ProjectedGradientCFG = ProjectedGradientCFG()):
        self.cfg = cfg

    def _get_optimizer(self, cfg: ProjectedGradientCFG):
        """Get optimizer based on configuration."""
        if cfg.optimizer == "sgd":
            return optax.sgd(cfg.lr)
        elif cfg.optimizer == "adam":
            return optax.adam(cfg.lr)
        elif cfg.optimizer == "rmsprop":
            return optax.rmsprop(cfg.lr)
        else:
            raise ValueError(f"Unknown optimizer: {cfg.optimizer}")

    def minimize(
        self,
        objective: Callable,
        lower,
        upper,
        initial,
        options: Optional[Dict[str, Any]] = None,
    ) -> MinimizeResult:
        """
        Minimize `objective` over the box [lower, upper] starting at `initial`.

        Args:
            objective: p -> scalar, differentiable with JAX
            lower, upper: Box bounds (1-D)
            initial: Starting point inside the box
            options: Overrides for ProjectedGradientCFG fields

        Returns:
            MinimizeResult with the best point seen and a `value_trace`
            diagnostic
        """
        cfg = replace(self.cfg, **options) if options else self.cfg

        lower = jnp.asarray(lower, dtype=float)
        upper = jnp.asarray(upper, dtype=float)
        width = upper - lower
        fixed = width <= 0
        safe_width = jnp.where(fixed, 1.0, width)

        def to_params(u):
            return jnp.where(fixed, lower, lower + jnp.clip(u, 0.0, 1.0) * safe_width)

        def energy_fn(u):
            return objective(to_params(u))

        value_and_grad_fn = jax.value_and_grad(energy_fn)
        if cfg.jit:
            value_and_grad_fn = jax.jit(value_and_grad_fn)

        optimizer = self._get_optimizer(cfg)
        u = jnp.where(fixed, 0.0, (jnp.asarray(initial, dtype=float) - lower) / safe_width)
        opt_state = optimizer.init(u)

        best_u = u
        best_val = np.inf
        trace = []
        stall = 0
        converged = False
        iterations = 0
        nonfinite_grads = 0

        for _ in range(cfg.steps):
            val, grad = value_and_grad_fn(u)
            val = float(val)
            iterations += 1
            if not np.isfinite(val):
                warnings.warn(
                    f"Non-finite objective at iteration {iterations}; stopping at the best point seen.",
                    RuntimeWarning,
                )
                break
            trace.append(val)

            if val < best_val - cfg.tol:
                best_val = val
                best_u = u
                stall = 0
            else:
                stall += 1
                if stall >= cfg.patience:
                    converged = True
                    break

            bad = ~jnp.isfinite(grad)
            if bool(jnp.any(bad & ~fixed)):
                if nonfinite_grads == 0:
                    warnings.warn(
                        f"Non-finite gradient at iteration {iterations}; those coordinates do not move this step.",
                        RuntimeWarning,
                    )
                nonfinite_grads += 1
            grad = jnp.where(fixed | bad, 0.0, grad)
            updates, opt_state = optimizer.update(grad, opt_state, params=u)
            u = jnp.clip(optax.apply_updates(u, updates), 0.0, 1.0)

        return MinimizeResult(
            x=np.asarray(to_params(best_u)),
            fun=best_val,
            converged=converged,
            iterations=iterations,
            diagnostics={"value_trace": np.asarray(trace), "nonfinite_grad_steps": nonfinite_grads},
        )
