"""Double-precision complex values used by the escape-time evaluator."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Complex64:
    """Immutable complex number over a pair of 64-bit floats."""

    re: float
    im: float

    def __add__(self, other: Complex64) -> Complex64:
        return Complex64(self.re + other.re, self.im + other.im)

    def __sub__(self, other: Complex64) -> Complex64:
        # Both components subtract: (a.re - b.re, a.im - b.im).
        return Complex64(self.re - other.re, self.im - other.im)

    def __mul__(self, other: Complex64) -> Complex64:
        return Complex64(
            self.re * other.re - self.im * other.im,
            self.re * other.im + self.im * other.re,
        )

    def __truediv__(self, other: Complex64) -> Complex64:
        # True quotient, im = (a.im*b.re - a.re*b.im) / d, so (a / b) * b == a.
        # A zero divisor yields inf/nan instead of ZeroDivisionError.
        den = np.float64(other.re * other.re + other.im * other.im)
        with np.errstate(divide="ignore", invalid="ignore"):
            re = np.float64(self.re * other.re + self.im * other.im) / den
            im = np.float64(self.im * other.re - self.re * other.im) / den
        return Complex64(float(re), float(im))

    def squared_magnitude(self) -> float:
        """Return ``re**2 + im**2``, the square of the modulus.

        Divergence tests compare this value against the square of the escape
        radius, so a radius of 2 corresponds to a threshold of 4.0.
        """

        return self.re * self.re + self.im * self.im


ZERO = Complex64(0.0, 0.0)
ONE = Complex64(1.0, 0.0)


def add(a: Complex64, b: Complex64) -> Complex64:
    return a + b


def sub(a: Complex64, b: Complex64) -> Complex64:
    return a - b


def mul(a: Complex64, b: Complex64) -> Complex64:
    return a * b


def div(a: Complex64, b: Complex64) -> Complex64:
    return a / b


def squared_magnitude(a: Complex64) -> float:
    return a.squared_magnitude()
