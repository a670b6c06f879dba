import jax
import jax.numpy as jnp
import pytest

from vida_jax.errors import InvalidParameter
from vida_jax.filters import (
    AsymGaussian,
    Constant,
    CosineRing,
    Disk,
    EllipticalGaussianRing,
    GaussianRing,
    GeneralGaussianRing,
    ImageFilter,
    LogSpiral,
    Scale,
    SlashedGaussianRing,
    Sum,
    TIDAGaussianRing,
    combine,
    scale,
    split,
    stack,
)
from vida_jax.images import make_image


def _grid(lim=60.0, n=41):
    ax = jnp.linspace(-lim, lim, n)
    return jnp.meshgrid(ax, ax)


def _leaves():
    template_image = make_image(GaussianRing(10.0, 3.0, 0.0, 0.0), 32, (-30.0, 30.0), (-30.0, 30.0))
    return [
        GaussianRing(20.0, 5.0, 0.0, 0.0),
        SlashedGaussianRing(20.0, 5.0, 0.5, 0.3, 1.0, -2.0),
        EllipticalGaussianRing(20.0, 5.0, 0.3, 0.4, 0.0, 3.0),
        TIDAGaussianRing(20.0, 5.0, 0.3, 0.6, 0.4, 0.0, 0.0),
        TIDAGaussianRing(20.0, 5.0, 0.3, -0.6, 0.4, 0.0, 0.0),
        GeneralGaussianRing(20.0, 5.0, 0.2, 0.1, 0.7, 2.0, -1.0, 1.0),
        CosineRing(20.0, [5.0, 1.0, 0.5], [0.2, 1.3], 0.2, 0.7, [0.4], [0.9], 0.0, 0.0),
        Disk(15.0, 3.0, 2.0, 2.0),
        AsymGaussian(8.0, 0.4, 0.9, -3.0, 5.0),
        Constant(),
        LogSpiral(20.0, 0.6, 3.0, 4.0, 0.5, 0.0, 0.0),
        ImageFilter.from_image(2.0, -1.0, template_image),
    ]


# --------------------------------------------------
# Pointwise values
# --------------------------------------------------
def test_gaussian_ring_values():
    f = GaussianRing(r0=20.0, sigma=5.0, x0=0.0, y0=0.0)
    assert jnp.allclose(f(20.0, 0.0), 1.0)
    assert jnp.allclose(f(0.0, 0.0), jnp.exp(-400.0 / 50.0))
    assert jnp.allclose(f(0.0, 0.0), 3.3546e-4, rtol=1e-4)
    # rotationally symmetric
    assert jnp.allclose(f(0.0, -20.0), f(20.0, 0.0))


def test_positivity_all_leaves():
    X, Y = _grid()
    far_x = jnp.array([1e3, -1e3, 0.0, 5e2, 0.0])
    far_y = jnp.array([0.0, 1e3, -1e3, 5e2, 0.0])
    for f in _leaves():
        vals = f(X, Y)
        assert vals.shape == X.shape, f.kind
        assert jnp.all(jnp.isfinite(vals)), f.kind
        assert jnp.all(vals > 0), f.kind
        far = f(far_x, far_y)
        assert jnp.all(jnp.isfinite(far)), f.kind
        assert jnp.all(far > 0), f.kind


def test_scalar_and_array_inputs_agree():
    X, Y = _grid(30.0, 7)
    for f in _leaves():
        grid = f(X, Y)
        assert jnp.allclose(f(X[2, 3], Y[2, 3]), grid[2, 3]), f.kind


def test_zero_slash_reduces_to_plain_rings():
    X, Y = _grid()
    ring = GaussianRing(18.0, 4.0, 1.0, -1.0)
    slashed = SlashedGaussianRing(18.0, 4.0, 0.0, 1.1, 1.0, -1.0)
    assert jnp.allclose(slashed(X, Y), ring(X, Y))

    ell = EllipticalGaussianRing(18.0, 4.0, 0.3, 0.8, 1.0, -1.0)
    tida = TIDAGaussianRing(18.0, 4.0, 0.3, 0.0, 0.8, 1.0, -1.0)
    general = GeneralGaussianRing(18.0, 4.0, 0.3, 0.8, 0.0, 2.5, 1.0, -1.0)
    assert jnp.allclose(tida(X, Y), ell(X, Y))
    assert jnp.allclose(general(X, Y), ell(X, Y))


def test_circular_ellipse_matches_gaussian_ring():
    X, Y = _grid()
    ring = GaussianRing(20.0, 5.0, 2.0, 3.0)
    ell = EllipticalGaussianRing(20.0, 5.0, 0.0, 0.4, 2.0, 3.0)
    assert jnp.allclose(ell(X, Y), ring(X, Y), atol=1e-10)


def test_slash_brightness_contrast():
    # full slash: one side of the ring is dark
    f = SlashedGaussianRing(20.0, 3.0, 1.0, 0.0, 0.0, 0.0)
    vals = jnp.array([f(20.0, 0.0), f(-20.0, 0.0)])
    assert jnp.max(vals) > 0.9
    assert jnp.min(vals) < 1e-10


def test_tida_extreme_slash_is_finite():
    X, Y = _grid()
    for s in [-1.0, 1.0]:
        f = TIDAGaussianRing(20.0, 5.0, 0.3, s, 0.4, 0.0, 0.0)
        assert jnp.all(jnp.isfinite(f(X, Y)))


def test_cosine_ring_reduces_to_elliptical():
    X, Y = _grid()
    ell = EllipticalGaussianRing(20.0, 5.0, 0.2, 0.5, 1.0, -2.0)
    cos = CosineRing(20.0, [5.0], [], 0.2, 0.5, [], [], 1.0, -2.0)
    assert cos.order == (0, 0)
    # the thickness denominator carries a 1e-2 offset
    assert jnp.allclose(cos(X, Y), ell(X, Y), rtol=2e-2, atol=1e-12)


def test_cosine_ring_zero_harmonics_are_inert():
    X, Y = _grid()
    base = CosineRing(20.0, [5.0], [], 0.2, 0.5, [], [], 0.0, 0.0)
    padded = CosineRing(20.0, [5.0, 0.0, 0.0], [0.3, 1.0], 0.2, 0.5, [0.0], [2.0], 0.0, 0.0)
    assert padded.order == (2, 1)
    assert jnp.allclose(padded(X, Y), base(X, Y))


def test_disk_values():
    f = Disk(10.0, 2.0, 0.0, 0.0)
    assert jnp.allclose(f(0.0, 0.0), 1.0)
    assert jnp.allclose(f(5.0, -3.0), 1.0)
    assert jnp.allclose(f(12.0, 0.0), jnp.exp(-0.5))


def test_asym_gaussian_values():
    f = AsymGaussian(4.0, 0.0, 0.3, 0.0, 0.0)
    assert jnp.allclose(f(0.0, 0.0), 1.0)
    assert jnp.allclose(f(4.0, 0.0), jnp.exp(-0.5))
    assert jnp.allclose(f(0.0, 4.0), jnp.exp(-0.5))

    # elongated along the major axis (xi = 0 maps the x axis onto itself)
    g = AsymGaussian(4.0, 0.5, 0.0, 0.0, 0.0)
    assert g(6.0, 0.0) > g(0.0, 6.0)


def test_constant_broadcasts():
    f = Constant()
    assert f(0.0, 0.0).shape == ()
    assert f(jnp.zeros((3, 4)), 1.0).shape == (3, 4)
    assert jnp.all(f(jnp.zeros((3, 4)), jnp.zeros((3, 4))) == 1.0)


def test_log_spiral_peaks_on_arm():
    f = LogSpiral(20.0, 0.6, 2.0, 4.0, 0.0, 0.0, 0.0)
    # the arm reaches r0 at the anchor winding angle (10 pi past xi)
    assert f(20.0, 0.0) > 0.9
    assert f(20.0, 0.0) > f(26.0, 0.0)


def test_image_filter_lookup():
    image = make_image(GaussianRing(10.0, 3.0, 0.0, 0.0), 32, (-30.0, 30.0), (-30.0, 30.0))
    f = ImageFilter.from_image(0.0, 0.0, image)
    # exact at pixel centers
    i, j = 5, 20
    assert jnp.allclose(f(image.x[i], image.y[j]), image.data[j, i] + 1e-50)
    # shifting the filter shifts the lookup
    g = ImageFilter.from_image(4.0, -2.0, image)
    assert jnp.allclose(g(image.x[i] + 4.0, image.y[j] - 2.0), f(image.x[i], image.y[j]))
    # zero (plus floor) outside the template
    assert f(100.0, 100.0) < 1e-40


# --------------------------------------------------
# Validation
# --------------------------------------------------
def test_invalid_parameters_raise():
    with pytest.raises(InvalidParameter) as err:
        GaussianRing(r0=-1.0, sigma=5.0, x0=0.0, y0=0.0)
    assert err.value.kind == "GaussianRing"
    assert err.value.field == "r0"

    bad = [
        lambda: GaussianRing(20.0, 0.0, 0.0, 0.0),
        lambda: SlashedGaussianRing(20.0, 5.0, 1.5, 0.0, 0.0, 0.0),
        lambda: SlashedGaussianRing(20.0, 5.0, -0.1, 0.0, 0.0, 0.0),
        lambda: EllipticalGaussianRing(20.0, 5.0, 1.0, 0.0, 0.0, 0.0),
        lambda: TIDAGaussianRing(20.0, 5.0, 0.2, -1.5, 0.0, 0.0, 0.0),
        lambda: GeneralGaussianRing(20.0, 5.0, -0.1, 0.0, 0.5, 0.0, 0.0, 0.0),
        lambda: CosineRing(20.0, [5.0, 1.0], [], 0.2, 0.0, [], [], 0.0, 0.0),
        lambda: CosineRing(20.0, [5.0], [], 0.2, 0.0, [0.1], [], 0.0, 0.0),
        lambda: CosineRing(20.0, [-5.0], [], 0.2, 0.0, [], [], 0.0, 0.0),
        lambda: Disk(10.0, -1.0, 0.0, 0.0),
        lambda: AsymGaussian(5.0, 1.2, 0.0, 0.0, 0.0),
        lambda: LogSpiral(20.0, 1.0, 3.0, 4.0, 0.0, 0.0, 0.0),
        lambda: LogSpiral(20.0, 0.5, 3.0, 0.0, 0.0, 0.0, 0.0),
        lambda: Scale(GaussianRing(20.0, 5.0, 0.0, 0.0), -1.0),
        lambda: GaussianRing(float("nan"), 5.0, 0.0, 0.0),
    ]
    for make in bad:
        with pytest.raises(InvalidParameter):
            make()


def test_invalid_parameter_is_value_error():
    with pytest.raises(ValueError):
        Disk(0.0, 1.0, 0.0, 0.0)


# --------------------------------------------------
# Algebra
# --------------------------------------------------
def test_sum_and_scale_evaluate():
    X, Y = _grid()
    a = GaussianRing(20.0, 5.0, 0.0, 0.0)
    b = Disk(8.0, 2.0, 5.0, 5.0)
    assert jnp.allclose(combine(a, b)(X, Y), a(X, Y) + b(X, Y))
    assert jnp.allclose(scale(b, 0.25)(X, Y), 0.25 * b(X, Y))
    assert isinstance(combine(a, b), Sum)
    assert isinstance(scale(b, 0.25), Scale)


def test_size_additivity():
    a = GaussianRing(20.0, 5.0, 0.0, 0.0)
    b = CosineRing(20.0, [5.0, 1.0], [0.2], 0.2, 0.7, [0.4, 0.1], [0.9, 0.0], 0.0, 0.0)
    c = Constant()
    assert Sum(a, b).size == a.size + b.size
    assert Scale(b, 2.0).size == b.size + 1
    assert Scale(c, 1.0).size == 1
    assert Sum(Sum(a, c), Scale(b, 0.5)).size == a.size + c.size + b.size + 1


def test_split_and_labels():
    a = GaussianRing(20.0, 5.0, 0.0, 0.0)
    c = Constant()
    d = Disk(8.0, 2.0, 5.0, 5.0)
    f = stack(a, c, d)
    parts = split(f)
    assert len(parts) == 3
    assert parts[0] is a
    assert isinstance(parts[1], Scale) and parts[1].child is c
    assert isinstance(parts[2], Scale) and parts[2].child is d

    labels = f.labels()
    assert len(labels) == f.size == 10
    assert labels[:4] == ["GaussianRing.r0", "GaussianRing.sigma", "GaussianRing.x0", "GaussianRing.y0"]
    assert labels[4] == "Scale.weight"
    assert labels[-1] == "Scale.weight"

    assert stack(a) is a


# --------------------------------------------------
# JAX transformations
# --------------------------------------------------
def test_filters_are_pytrees():
    f = Sum(GaussianRing(20.0, 5.0, 0.0, 0.0), Scale(Disk(8.0, 2.0, 5.0, 5.0), 0.3))
    leaves = jax.tree_util.tree_leaves(f)
    assert len(leaves) == f.size

    evaluate = jax.jit(lambda filt, x, y: filt(x, y))
    assert jnp.allclose(evaluate(f, 3.0, 4.0), f(3.0, 4.0))


def test_gradient_through_construction():
    def density(r0):
        return GaussianRing(r0, 5.0, 0.0, 0.0)(22.0, 0.0)

    g = jax.grad(density)(20.0)
    assert jnp.allclose(g, jnp.exp(-4.0 / 50.0) * 2.0 / 25.0)

    def ell_density(params):
        r0, tau = params
        return EllipticalGaussianRing(r0, 5.0, tau, 0.3, 0.0, 0.0)(15.0, 10.0)

    g = jax.grad(ell_density)(jnp.array([20.0, 0.3]))
    assert jnp.all(jnp.isfinite(g))


def test_gradients_finite_at_filter_center():
    from vida_jax.filters import pack, shape_of, unpack

    for f in _leaves():
        x0 = float(getattr(f, "x0", 0.0))
        y0 = float(getattr(f, "y0", 0.0))
        shape = shape_of(f)
        g = jax.grad(lambda p: unpack(p, shape)(x0, y0))(pack(f))
        assert jnp.all(jnp.isfinite(g)), f.kind


def test_cosine_ring_rejects_2d_angle_array():
    with pytest.raises(InvalidParameter) as err:
        CosineRing(20.0, [5.0, 1.0], [[0.2]], 0.2, 0.0, [], [], 0.0, 0.0)
    assert err.value.field == "xi_sigma"
