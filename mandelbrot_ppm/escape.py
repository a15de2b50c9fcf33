"""Escape-time evaluation of the Mandelbrot recurrence."""

from __future__ import annotations

from typing import Optional

import numpy as np
import tensorflow as tf

from .complex64 import ZERO, Complex64

MAX_ITERATIONS = 254
ESCAPE_THRESHOLD = 4.0


def evaluate(
    point: Complex64,
    max_iterations: int = MAX_ITERATIONS,
    escape_threshold: float = ESCAPE_THRESHOLD,
) -> int:
    """Return the iteration at which ``point`` escapes, or 0 if it never does.

    ``z`` starts at the origin. On iteration ``i`` (1-based) the squared
    magnitude of ``z`` is compared with ``escape_threshold`` before ``z`` is
    advanced to ``z * z + point``. A NaN magnitude never compares greater than
    the threshold, so non-finite orbits report 0.
    """

    z = ZERO
    for i in range(1, max_iterations + 1):
        if z.squared_magnitude() > escape_threshold:
            return i
        z = z * z + point
    return 0


@tf.function
def _escape_step(
    i: tf.Tensor,
    zr: tf.Tensor,
    zi: tf.Tensor,
    cr: tf.Tensor,
    ci: tf.Tensor,
    counts: tf.Tensor,
    active: tf.Tensor,
    threshold: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Record escapes at iteration ``i`` and advance the points still inside."""

    magnitude = zr * zr + zi * zi
    escaped = tf.logical_and(active, magnitude > threshold)
    counts = tf.where(escaped, i, counts)
    active = tf.logical_and(active, tf.logical_not(escaped))
    new_zr = zr * zr - zi * zi + cr
    new_zi = zr * zi + zi * zr + ci
    zr = tf.where(active, new_zr, zr)
    zi = tf.where(active, new_zi, zi)
    return zr, zi, counts, active


@tf.function
def _escape_run(
    cr: tf.Tensor,
    ci: tf.Tensor,
    max_iterations: tf.Tensor,
    threshold: tf.Tensor,
) -> tf.Tensor:
    """Iterate every sample with a TensorFlow while loop until all escape or the bound is hit."""

    i = tf.constant(1, dtype=tf.int32)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    counts = tf.zeros(tf.shape(cr), dtype=tf.int32)
    active = tf.ones(tf.shape(cr), dtype=tf.bool)

    def cond(i: tf.Tensor, zr: tf.Tensor, zi: tf.Tensor, counts: tf.Tensor, active: tf.Tensor) -> tf.Tensor:
        return tf.logical_and(tf.less_equal(i, max_iterations), tf.reduce_any(active))

    def body(i: tf.Tensor, zr: tf.Tensor, zi: tf.Tensor, counts: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, ...]:
        zr, zi, counts, active = _escape_step(i, zr, zi, cr, ci, counts, active, threshold)
        return i + 1, zr, zi, counts, active

    _, _, _, counts, _ = tf.while_loop(cond, body, (i, zr, zi, counts, active))
    return counts


def evaluate_grid(
    re: np.ndarray,
    im: np.ndarray,
    max_iterations: int = MAX_ITERATIONS,
    escape_threshold: float = ESCAPE_THRESHOLD,
    *,
    device: Optional[str] = None,
) -> np.ndarray:
    """Evaluate every ``re + im*i`` sample at once.

    Returns an ``int32`` array of shape ``(len(im), len(re))`` holding the same
    intensities :func:`evaluate` produces for each point; row ``r`` and column
    ``c`` correspond to ``im[r]`` and ``re[c]``.
    """

    re = np.asarray(re, dtype=np.float64)
    im = np.asarray(im, dtype=np.float64)

    with tf.device(device if device is not None else "/CPU:0"):
        re_tf = tf.convert_to_tensor(re, dtype=tf.float64)
        im_tf = tf.convert_to_tensor(im, dtype=tf.float64)
        cr, ci = tf.meshgrid(re_tf, im_tf)
        counts = _escape_run(
            cr,
            ci,
            tf.constant(max_iterations, dtype=tf.int32),
            tf.constant(escape_threshold, dtype=tf.float64),
        )

    return counts.numpy()
