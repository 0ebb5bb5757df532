"""Tests for the real FFT primitive and the 1/sqrt(W) scaling."""

import numpy as np
import pytest

from stftkit._fft import RealFFT


@pytest.mark.parametrize("backend", ["numpy", "scipy"])
def test_forward_shape_and_values(backend):
    fft = RealFFT(8, backend=backend)
    frame = np.arange(8, dtype=np.float32)
    out = np.zeros(5, dtype=np.complex64)

    fft.forward(frame, out)

    np.testing.assert_allclose(out, np.fft.rfft(frame), rtol=1e-5, atol=1e-5)


@pytest.mark.parametrize("backend", ["numpy", "scipy"])
def test_inverse_is_unnormalised(backend):
    """inverse(forward(x)) == W * x."""
    fft = RealFFT(64, backend=backend)
    rng = np.random.default_rng(0)
    x = rng.standard_normal(64).astype(np.float32)
    spec = np.zeros(33, dtype=np.complex64)
    back = np.zeros(64, dtype=np.float32)

    fft.inverse(fft.forward(x, spec), back)

    np.testing.assert_allclose(back, 64 * x, rtol=1e-4, atol=1e-4)


def test_scaling_symmetry():
    """Scaling by 1/sqrt(W) then sqrt(W) is the identity up to rounding."""
    n_fft = 4096
    fft = RealFFT(n_fft)
    rng = np.random.default_rng(1)
    x = rng.standard_normal(n_fft).astype(np.float32)
    spec = np.zeros(n_fft // 2 + 1, dtype=np.complex64)
    fft.forward(x, spec)

    scaled = spec * np.float32(1.0 / np.sqrt(n_fft))
    scaled *= np.float32(np.sqrt(n_fft))

    np.testing.assert_allclose(scaled, spec, rtol=1e-6, atol=1e-4)


def test_unknown_backend():
    with pytest.raises(ValueError, match="Unknown FFT backend"):
        RealFFT(8, backend="fftw")
