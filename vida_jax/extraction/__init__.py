# vida_jax/extraction/__init__.py
"""
Extraction boundary.

This module provides:
- ExtractionContext: divergence + bounds + initial guess as flat vectors
- Minimizer protocol, MinimizeResult, ExtractionRun, extract, best_of
- ProjectedGradient: reference box-constrained optax minimizer

Search strategies (global, stochastic, multi-start, threaded) are plugged in
from outside through the Minimizer protocol.
"""
from .context import ExtractionContext
from .base import Minimizer, MinimizeResult, ExtractionRun, extract, best_of
from .projected import ProjectedGradient, ProjectedGradientCFG

__all__ = [
    "ExtractionContext",
    "Minimizer",
    "MinimizeResult",
    "ExtractionRun",
    "extract",
    "best_of",
    "ProjectedGradient",
    "ProjectedGradientCFG",
]
