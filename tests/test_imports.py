import pytest


def test_imports():
    import vida_jax

    from vida_jax.filters import Filter, FilterShape, pack, unpack
    from vida_jax.images import NormalizedImage, rasterize
    from vida_jax.divergence import Bhattacharyya, KullbackLeibler
    from vida_jax.extraction import ExtractionContext, ProjectedGradient

    assert vida_jax.__version__


def test_registries():
    from vida_jax.filters import get as get_filter
    from vida_jax.filters import GaussianRing, Sum, Scale
    from vida_jax.divergence import get as get_divergence
    from vida_jax.divergence import Bhattacharyya, KullbackLeibler

    assert get_filter("GaussianRing") is GaussianRing
    assert get_filter("Sum") is Sum
    assert get_filter("Scale") is Scale
    assert get_divergence("bh") is Bhattacharyya
    assert get_divergence("bhattacharyya") is Bhattacharyya
    assert get_divergence("kl") is KullbackLeibler
    assert get_divergence("kullback_leibler") is KullbackLeibler

    with pytest.raises(KeyError):
        get_filter("NoSuchFilter")
    with pytest.raises(KeyError):
        get_divergence("hellinger")


def test_x64_enabled():
    import jax.numpy as jnp
    import vida_jax  # noqa: F401

    assert jnp.zeros(1).dtype == jnp.float64
