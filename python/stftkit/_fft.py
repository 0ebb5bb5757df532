"""Real-input FFT primitive (numpy.fft or scipy.fft)."""

import numpy as np
import scipy.fft

_BACKENDS = {
    "numpy": (np.fft.rfft, np.fft.irfft),
    "scipy": (scipy.fft.rfft, scipy.fft.irfft),
}


class RealFFT:
    """Fixed-length forward/inverse real FFT.

    ``forward`` maps ``W`` real samples to ``W // 2 + 1`` complex bins and
    ``inverse`` maps them back. Both are unnormalised: ``inverse(forward(x))``
    equals ``W * x``.

    Parameters
    ----------
    n_fft : int
        Transform length ``W``.
    backend : str
        ``"numpy"`` or ``"scipy"``. Default: ``"numpy"``.
    """

    def __init__(self, n_fft, backend="numpy"):
        if backend not in _BACKENDS:
            raise ValueError(
                f"Unknown FFT backend '{backend}'. Use one of {tuple(_BACKENDS)}"
            )
        self.n_fft = int(n_fft)
        self.n_bins = self.n_fft // 2 + 1
        self.backend = backend
        self._rfft, self._irfft = _BACKENDS[backend]

    def forward(self, frame, out):
        """Half-spectrum of ``frame`` written into ``out`` (length ``n_bins``)."""
        out[:] = self._rfft(frame, n=self.n_fft)
        return out

    def inverse(self, spectrum, out):
        """Unnormalised inverse of ``spectrum`` written into ``out`` (length ``n_fft``)."""
        out[:] = self._irfft(spectrum, n=self.n_fft, norm="forward")
        return out

    def __repr__(self):
        return f"RealFFT(n_fft={self.n_fft}, backend='{self.backend}')"
