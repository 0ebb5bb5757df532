"""Transform parameters: fixed engine constants and the STFTConfig value object."""

import warnings

import numpy as np

# Fixed parameters of the separation engine this package feeds.
SUPPORTED_SAMPLE_RATE = 44100
FFT_WINDOW_SIZE = 4096
FFT_HOP_SIZE = 1024
NB_CHANNELS = 2

# Added to the window sum-of-squares before dividing in overlap-add
EPSILON = 1e-8

PAD_MODES = ("symmetric", "reflect")
FFT_BACKENDS = ("numpy", "scipy")


class STFTConfig:
    """Immutable set of STFT parameters shared by a workspace.

    Parameters
    ----------
    n_fft : int
        Window length and FFT size ``W``. Must be even. Default: 4096.
    hop_length : int
        Hop size ``H`` between consecutive frames, ``0 < H <= W``.
        Default: 1024.
    window : str, tuple or np.ndarray
        Analysis/synthesis window. Anything accepted by
        ``scipy.signal.get_window`` or an explicit array of length
        ``n_fft``. Default: ``"hann"`` (periodic).
    sample_rate : int
        Sample rate the spectrogram refers to. Default: 44100.
    pad_mode : str
        Edge mirroring used for centred framing, ``"symmetric"`` (edge
        sample repeated, valid down to ``n_fft // 2`` samples) or
        ``"reflect"`` (edge sample excluded, as in ``torch.stft`` and
        ``librosa.stft``). Default: ``"symmetric"``.
    eps : float
        Stabiliser added to the window sum-of-squares. Default: 1e-8.
    fft_backend : str
        ``"numpy"`` or ``"scipy"``. Default: ``"numpy"``.
    """

    __slots__ = (
        "_n_fft", "_hop_length", "_window", "_sample_rate",
        "_pad_mode", "_eps", "_fft_backend",
    )

    def __init__(self, n_fft=FFT_WINDOW_SIZE, hop_length=FFT_HOP_SIZE,
                 window="hann", sample_rate=SUPPORTED_SAMPLE_RATE,
                 pad_mode="symmetric", eps=EPSILON, fft_backend="numpy"):
        n_fft = int(n_fft)
        hop_length = int(hop_length)

        if n_fft < 2 or n_fft % 2 != 0:
            raise ValueError(f"n_fft must be a positive even integer, got {n_fft}")
        if not 0 < hop_length <= n_fft:
            raise ValueError(
                f"hop_length must be in (0, n_fft={n_fft}], got {hop_length}"
            )
        if pad_mode not in PAD_MODES:
            raise ValueError(
                f"Unknown pad_mode '{pad_mode}'. Use one of {PAD_MODES}"
            )
        if not eps > 0:
            raise ValueError(f"eps must be positive, got {eps}")
        if fft_backend not in FFT_BACKENDS:
            raise ValueError(
                f"Unknown fft_backend '{fft_backend}'. Use one of {FFT_BACKENDS}"
            )
        if int(sample_rate) <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")

        if isinstance(window, (list, np.ndarray)):
            window = np.asarray(window)
            if window.ndim != 1 or len(window) != n_fft:
                raise ValueError(
                    f"window array must be 1D of length n_fft={n_fft}, "
                    f"got shape {window.shape}"
                )
            window = np.array(window, dtype=np.float32)
            window.flags.writeable = False

        object.__setattr__(self, "_n_fft", n_fft)
        object.__setattr__(self, "_hop_length", hop_length)
        object.__setattr__(self, "_window", window)
        object.__setattr__(self, "_sample_rate", int(sample_rate))
        object.__setattr__(self, "_pad_mode", pad_mode)
        object.__setattr__(self, "_eps", float(eps))
        object.__setattr__(self, "_fft_backend", fft_backend)

        from .filters import check_nola
        if not check_nola(self.get_window(), hop_length):
            warnings.warn(
                f"window/hop_length={hop_length} pair violates the nonzero "
                "overlap-add condition; the inverse transform will not "
                "reconstruct the input",
                UserWarning,
                stacklevel=2,
            )

    def __setattr__(self, name, value):
        raise AttributeError("STFTConfig is immutable; use replace()")

    n_fft = property(lambda self: self._n_fft)
    hop_length = property(lambda self: self._hop_length)
    window = property(lambda self: self._window)
    sample_rate = property(lambda self: self._sample_rate)
    pad_mode = property(lambda self: self._pad_mode)
    eps = property(lambda self: self._eps)
    fft_backend = property(lambda self: self._fft_backend)

    @property
    def pad(self):
        """Samples of padding on each side (``n_fft // 2``)."""
        return self._n_fft // 2

    @property
    def n_bins(self):
        """Number of half-spectrum frequency bins (``n_fft // 2 + 1``)."""
        return self._n_fft // 2 + 1

    @property
    def min_length(self):
        """Shortest input the edge mirroring can handle."""
        if self._pad_mode == "reflect":
            return self.pad + 1
        return self.pad

    def padded_length(self, n_samples):
        """Length of a channel after centre padding."""
        return int(n_samples) + 2 * self.pad

    def num_frames(self, n_samples):
        """Number of frames the forward transform produces for ``n_samples``."""
        from .convert import num_frames
        return num_frames(n_samples, self._n_fft, self._hop_length)

    def get_window(self):
        """Return the analysis window as a float32 array of length ``n_fft``."""
        from .filters import get_window
        return get_window(self._window, self._n_fft)

    def replace(self, **kwargs):
        """Return a copy of this config with some parameters changed."""
        params = self._params()
        unknown = set(kwargs) - set(params)
        if unknown:
            raise ValueError(f"Unknown STFTConfig parameters: {sorted(unknown)}")
        params.update(kwargs)
        return STFTConfig(**params)

    def _params(self):
        return {
            "n_fft": self._n_fft,
            "hop_length": self._hop_length,
            "window": self._window,
            "sample_rate": self._sample_rate,
            "pad_mode": self._pad_mode,
            "eps": self._eps,
            "fft_backend": self._fft_backend,
        }

    def _key(self):
        window = self._window
        if isinstance(window, np.ndarray):
            window = window.tobytes()
        return (self._n_fft, self._hop_length, window, self._sample_rate,
                self._pad_mode, self._eps, self._fft_backend)

    def __eq__(self, other):
        if not isinstance(other, STFTConfig):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        window = self._window
        if isinstance(window, np.ndarray):
            window = f"<array len={len(window)}>"
        else:
            window = repr(window)
        return (
            f"STFTConfig(n_fft={self._n_fft}, hop_length={self._hop_length}, "
            f"window={window}, sample_rate={self._sample_rate}, "
            f"pad_mode='{self._pad_mode}', eps={self._eps:g}, "
            f"fft_backend='{self._fft_backend}')"
        )
