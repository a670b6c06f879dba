# vida_jax/divergence/kullback_leibler.py
from __future__ import annotations

from dataclasses import dataclass

import jax.numpy as jnp
from jax.scipy.special import xlogy

from .base import Divergence


@dataclass(frozen=True, eq=False)
class KullbackLeibler(Divergence):
    """
    Kullback-Leibler divergence of the filter from the image,

        KL(F || I) = sum_pixels F log(F / I),

    which is >= 0 and vanishes when the normalized filter equals the image.
    Empty image pixels are raised to `cfg.image_floor` so the sum stays finite.
    """

    def compare(self, F, I):
        I = jnp.maximum(I, self.cfg.image_floor)
        return jnp.sum(xlogy(F, F) - xlogy(F, I))
