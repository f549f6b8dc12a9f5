"""Deterministic random sampler for Monte Carlo integration.

The sampler drives both sub-pixel jitter and diffuse scattering. It is a
xorshift32 generator over a single unsigned 32-bit state, so two samplers
built from the same seed and asked for the same sequence of draws produce
bit-identical results. There is no process-wide random state: every render
pass derives one independent stream per pixel with derive_seed().

Uniform floats are built from the top 24 bits of the state. They are exactly
representable as float32, which lets the Taichi backend in
``diffuse_tracer.core.accelerated`` reproduce the same draw sequence.

Example:
    >>> from diffuse_tracer.core.sampler import XorShiftSampler
    >>> rng = XorShiftSampler.for_pixel(seed=7, x=10, y=20)
    >>> u = rng.uniform()
    >>> p = rng.unit_ball_point()
"""

import numpy as np

from diffuse_tracer.core.ray import Vector, length_squared

# Mask for 32-bit unsigned arithmetic
MASK32 = 0xFFFFFFFF

# Xored into the state when a step fails to change it (only the zero state)
FIXED_POINT_PERTURBATION = 0x6D2B79F5

# Scale mapping a 24-bit integer to [0, 1)
UNIFORM_SCALE = 1.0 / 16777216.0

# Rejection sampling cap for unit_ball_point(). The acceptance rate is
# about 52%, so the cap is only reached with probability ~1e-32.
MAX_REJECTION_ATTEMPTS = 100


def hash32(value: int) -> int:
    """Mix a 32-bit integer (Thomas Wang's integer hash).

    Args:
        value: Any integer; only the low 32 bits are used.

    Returns:
        A well-mixed 32-bit unsigned integer.
    """
    x = value & MASK32
    x = (x ^ 61) ^ (x >> 16)
    x = (x * 9) & MASK32
    x ^= x >> 4
    x = (x * 0x27D4EB2D) & MASK32
    x ^= x >> 15
    return x


def derive_seed(seed: int, x: int, y: int) -> int:
    """Derive the stream seed for one pixel of one render pass.

    The result depends only on (seed, x, y), so a pass renders the same
    image regardless of pixel traversal order.
    """
    h = hash32(seed)
    h = hash32(h ^ (x & MASK32))
    h = hash32(h ^ (y & MASK32))
    return h


def xorshift32(state: int) -> int:
    """Advance a xorshift32 state by one step, avoiding fixed points."""
    x = state
    x ^= (x << 13) & MASK32
    x ^= x >> 17
    x ^= (x << 5) & MASK32
    if x == state:
        x ^= FIXED_POINT_PERTURBATION
    return x


class XorShiftSampler:
    """A deterministic scalar random stream.

    The sampler is cheap to create and is not thread-safe; each worker
    creates its own instances.

    Attributes:
        state: The current 32-bit generator state.
    """

    __slots__ = ("_state",)

    def __init__(self, seed: int) -> None:
        """Create a sampler from an integer seed.

        Args:
            seed: Any integer; only the low 32 bits are used.
        """
        self._state = seed & MASK32

    @classmethod
    def for_pixel(cls, seed: int, x: int, y: int) -> "XorShiftSampler":
        """Create the stream for pixel (x, y) of the pass seeded by ``seed``."""
        return cls(derive_seed(seed, x, y))

    @property
    def state(self) -> int:
        """Get the current generator state."""
        return self._state

    def fork(self) -> "XorShiftSampler":
        """Return an independent copy continuing from the current state."""
        return XorShiftSampler(self._state)

    def next_u32(self) -> int:
        """Advance the generator and return the new 32-bit state."""
        self._state = xorshift32(self._state)
        return self._state

    def uniform(self) -> float:
        """Draw a uniform float in [0, 1)."""
        return (self.next_u32() >> 8) * UNIFORM_SCALE

    def unit_ball_point(self) -> Vector:
        """Draw a point uniformly distributed inside the unit ball.

        Uses rejection sampling from the enclosing cube, capped at
        MAX_REJECTION_ATTEMPTS tries; the cap returns the ball center.

        Returns:
            A point p with |p|^2 < 1.
        """
        for _ in range(MAX_REJECTION_ATTEMPTS):
            p = np.array(
                (
                    2.0 * self.uniform() - 1.0,
                    2.0 * self.uniform() - 1.0,
                    2.0 * self.uniform() - 1.0,
                ),
                dtype=np.float64,
            )
            if length_squared(p) < 1.0:
                return p
        return np.zeros(3, dtype=np.float64)

    def __repr__(self) -> str:
        return f"XorShiftSampler(state={self._state:#010x})"
