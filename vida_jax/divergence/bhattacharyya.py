# vida_jax/divergence/bhattacharyya.py
from __future__ import annotations

from dataclasses import dataclass

import jax.numpy as jnp

from .base import Divergence


@dataclass(frozen=True, eq=False)
class Bhattacharyya(Divergence):
    """
    Bhattacharyya divergence  -log( sum_pixels sqrt(F * I) ).

    The coefficient sum sqrt(F I) is 1 when the normalized filter matches the
    image and smaller otherwise, so the divergence is >= 0 with minimum 0.
    """

    def compare(self, F, I):
        # sqrt(F) sqrt(I) keeps the gradient finite on empty image pixels
        return -jnp.log(jnp.sum(jnp.sqrt(F) * jnp.sqrt(I)))

    def coefficient(self, filt) -> jnp.ndarray:
        """The Bhattacharyya coefficient sum sqrt(F * I), in (0, 1]."""
        F, _ = self.distribution(filt)
        return jnp.sum(jnp.sqrt(F) * jnp.sqrt(self.image.data))
