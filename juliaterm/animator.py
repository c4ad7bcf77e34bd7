"""Wandering Julia parameter: a damped random walk around a fixed base value.

The walk is driven by a small xorshift64* generator whose state lives in
``AnimationState`` alongside position and velocity, so a run is reproducible
from its seed and the sequence of ``dt`` values fed to ``advance``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

MASK64 = (1 << 64) - 1
DEFAULT_SEED = 0x9E3779B97F4A7C15
_MULTIPLIER = 0x2545F4914F6CDD1D
_INV_2_53 = 1.0 / float(1 << 53)

MAX_DT = 0.1
PULL_FRACTION = 0.6
OUTWARD_DAMPING = 0.5
EPSILON = 1e-12


@dataclass(frozen=True)
class AnimatorConfig:
    base: complex = complex(-0.8, 0.156)
    radius: float = 0.40
    accel_strength: float = 1.2
    damping: float = 0.85


@dataclass(frozen=True)
class AnimationState:
    offset: complex
    velocity: complex
    rng_state: int


DEFAULT_CONFIG = AnimatorConfig()


def next_unit(rng_state: int) -> Tuple[int, float]:
    """Advance the generator once and return ``(new_state, sample in [-1, 1))``."""
    x = rng_state & MASK64
    x ^= x >> 12
    x ^= (x << 25) & MASK64
    x ^= x >> 27
    v = (x * _MULTIPLIER) & MASK64
    return x, (v >> 11) * _INV_2_53 * 2.0 - 1.0


def initialize(seed: int = DEFAULT_SEED) -> AnimationState:
    seed &= MASK64
    if seed == 0:
        # xorshift never leaves the all-zero state
        seed = DEFAULT_SEED
    return AnimationState(offset=0j, velocity=0j, rng_state=seed)


def advance(state: AnimationState, dt: float, config: AnimatorConfig = DEFAULT_CONFIG) -> Tuple[AnimationState, complex]:
    """
    Step the walk by ``dt`` and return ``(new_state, base + offset)``.

    dt is clamped to [0, MAX_DT] so a long stall (suspend, debugger) cannot
    inject a huge velocity kick. Once |offset| exceeds the radius a spring
    pulls it back and the outward part of the velocity is damped; the bound
    is soft, so short overshoots are expected.
    """
    if not math.isfinite(dt) or dt < 0.0:
        dt = 0.0
    dt = min(dt, MAX_DT)

    rng, ax = next_unit(state.rng_state)
    rng, ay = next_unit(rng)
    accel = complex(ax, ay) * config.accel_strength

    velocity = state.velocity * (1.0 - config.damping * dt) + accel * dt
    offset = state.offset + velocity * dt

    length = abs(offset)
    if length > config.radius:
        pull = (length - config.radius) / length
        offset -= offset * pull * PULL_FRACTION
        dot = velocity.real * offset.real + velocity.imag * offset.imag
        norm_sqr = offset.real * offset.real + offset.imag * offset.imag
        velocity -= offset * (dot / (norm_sqr + EPSILON)) * OUTWARD_DAMPING

    if abs(velocity) > config.radius * 2.0:
        velocity *= 0.5

    new_state = AnimationState(offset=offset, velocity=velocity, rng_state=rng)
    return new_state, config.base + offset


class Animator:
    """Holds the current state so the play loop can just call ``step(dt)``."""

    def __init__(self, config: AnimatorConfig = DEFAULT_CONFIG, seed: int = DEFAULT_SEED):
        self.config = config
        self.state = initialize(seed)
        self.parameter = config.base

    def step(self, dt: float) -> complex:
        self.state, self.parameter = advance(self.state, dt, self.config)
        return self.parameter
