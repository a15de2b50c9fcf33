import math
import unittest

from mandelbrot_ppm.complex64 import ONE, ZERO, Complex64, add, div, mul, squared_magnitude, sub

SAMPLES = [
    Complex64(0.0, 0.0),
    Complex64(1.5, -2.25),
    Complex64(-3.0, 4.0),
    Complex64(1e-3, 7.0),
    Complex64(-0.75, 0.1),
]


class Complex64Tests(unittest.TestCase):
    def test_additive_and_multiplicative_identity(self):
        for a in SAMPLES:
            self.assertEqual(add(a, ZERO), a)
            self.assertEqual(mul(a, ONE), a)

    def test_subtraction_keeps_imaginary_sign(self):
        self.assertEqual(sub(Complex64(5.0, 7.0), Complex64(2.0, 3.0)), Complex64(3.0, 4.0))
        self.assertEqual(Complex64(1.0, -1.0) - Complex64(1.0, -1.0), ZERO)

    def test_multiplication(self):
        self.assertEqual(mul(Complex64(1.0, 2.0), Complex64(3.0, 4.0)), Complex64(-5.0, 10.0))
        self.assertEqual(Complex64(0.0, 1.0) * Complex64(0.0, 1.0), Complex64(-1.0, 0.0))

    def test_division_round_trip(self):
        divisors = [Complex64(1.0, 0.0), Complex64(0.0, 1.0), Complex64(2.5, -1.5), Complex64(-4.0, 0.25)]
        for a in SAMPLES:
            for b in divisors:
                back = mul(div(a, b), b)
                self.assertAlmostEqual(back.re, a.re, places=9)
                self.assertAlmostEqual(back.im, a.im, places=9)

    def test_division_matches_builtin_complex(self):
        quotient = div(Complex64(0.0, 1.0), Complex64(1.0, 0.0))
        self.assertEqual(quotient, Complex64(0.0, 1.0))
        expected = complex(3.0, -2.0) / complex(1.0, 4.0)
        quotient = Complex64(3.0, -2.0) / Complex64(1.0, 4.0)
        self.assertAlmostEqual(quotient.re, expected.real, places=12)
        self.assertAlmostEqual(quotient.im, expected.imag, places=12)

    def test_division_by_zero_is_not_an_error(self):
        # Both numerators vanish against a zero divisor, so the parts are 0/0.
        quotient = div(Complex64(1.0, 1.0), ZERO)
        self.assertTrue(math.isnan(quotient.re))
        self.assertTrue(math.isnan(quotient.im))
        # The squared norm of a tiny divisor underflows to zero.
        overflow = div(Complex64(1.0, 0.0), Complex64(1e-200, 0.0))
        self.assertEqual(overflow.re, math.inf)
        self.assertFalse(math.isfinite(overflow.im))
        nan_quotient = div(ZERO, ZERO)
        self.assertTrue(math.isnan(nan_quotient.re))
        self.assertTrue(math.isnan(nan_quotient.im))

    def test_squared_magnitude(self):
        self.assertEqual(squared_magnitude(Complex64(3.0, 4.0)), 25.0)
        self.assertEqual(Complex64(-2.0, 0.0).squared_magnitude(), 4.0)

    def test_values_are_immutable(self):
        value = Complex64(1.0, 2.0)
        with self.assertRaises(AttributeError):
            value.re = 5.0


if __name__ == "__main__":
    unittest.main()
