# vida_jax/constants.py
"""Numerical constants shared by the filter templates and kernels."""

# Added to every template density so that logarithms of a normalized filter
# stay finite.
DENSITY_FLOOR = 1e-50

# Added to 2*sigma^2 in the CosineRing thickness denominator.
COSINE_RING_EPS = 1e-2

# Point-to-ellipse iteration.
ELLIPSE_EPS = 1e-6
ELLIPSE_MAX_ITER = 10
ELLIPSE_T0 = 0.7071067811865476  # 1/sqrt(2)

# Squared norms below this are treated as zero inside the ellipse kernel
# (keeps sqrt differentiable at the evolute).
SQRT_EPS = 1e-30

# The log-spiral arm is anchored so that radius r0 is reached after this much
# winding angle.
LOGSPIRAL_WINDING = 10.0
