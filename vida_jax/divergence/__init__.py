# vida_jax/divergence/__init__.py
from .base import Divergence, DivergenceCFG, register, get, check_total
from .bhattacharyya import Bhattacharyya
from .kullback_leibler import KullbackLeibler
from .objective import make_objective, make_value_and_grad

register("bh", Bhattacharyya)
register("bhattacharyya", Bhattacharyya)
register("kl", KullbackLeibler)
register("kullback_leibler", KullbackLeibler)

__all__ = [
    "Divergence",
    "DivergenceCFG",
    "get",
    "Bhattacharyya",
    "KullbackLeibler",
    "make_objective",
    "make_value_and_grad",
]
