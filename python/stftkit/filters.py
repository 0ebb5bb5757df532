"""Window functions for analysis and overlap-add synthesis."""

import numpy as np
import scipy.signal


def get_window(window, n_fft):
    """Compute a periodic analysis window.

    Parameters
    ----------
    window : str, tuple, float or np.ndarray
        Window specification. Strings, tuples and floats are passed to
        ``scipy.signal.get_window`` with ``fftbins=True`` so the window is
        periodic (DFT-even), matching ``torch.hann_window`` and
        ``librosa.filters.get_window``. An array is used as-is.
    n_fft : int
        Window length.

    Returns
    -------
    np.ndarray
        Window of shape ``(n_fft,)``, float32.
    """
    if isinstance(window, (list, np.ndarray)):
        win = np.asarray(window, dtype=np.float32)
        if win.shape != (n_fft,):
            raise ValueError(
                f"Window size mismatch: expected ({n_fft},), got {win.shape}"
            )
        return win.copy()

    return scipy.signal.get_window(window, n_fft, fftbins=True).astype(np.float32)


def window_sumsquare(window, n_frames, hop_length, length=None):
    """Sum of squared, hop-shifted windows.

    Entry ``k`` of the result holds the sum over all frames ``f`` with
    ``f * hop_length <= k < f * hop_length + len(window)`` of
    ``window[k - f * hop_length] ** 2``. Overlap-add synthesis divides by
    this array to cancel the analysis and synthesis windows.

    Parameters
    ----------
    window : np.ndarray
        Window of length ``n_fft``.
    n_frames : int
        Number of frames.
    hop_length : int
        Hop size between frame starts.
    length : int or None
        Output length. Default: ``n_fft + hop_length * (n_frames - 1)``.
        Frames that run past ``length`` are truncated; positions no frame
        covers stay zero.

    Returns
    -------
    np.ndarray
        Float32 array of shape ``(length,)``, all entries >= 0.
    """
    win_sq = np.asarray(window, dtype=np.float64) ** 2
    n_fft = len(win_sq)

    if length is None:
        length = n_fft + hop_length * (n_frames - 1)

    x = np.zeros(length, dtype=np.float64)
    for i in range(n_frames):
        sample = i * hop_length
        if sample >= length:
            break
        n = min(n_fft, length - sample)
        x[sample:sample + n] += win_sq[:n]

    return x.astype(np.float32)


def check_nola(window, hop_length, tol=1e-10):
    """Check the nonzero overlap-add condition for a window/hop pair.

    Parameters
    ----------
    window : np.ndarray
        Analysis window.
    hop_length : int
        Hop size.
    tol : float
        Smallest acceptable value of the summed squared window.

    Returns
    -------
    bool
        True if overlap-add synthesis can invert the analysis.
    """
    window = np.asarray(window, dtype=np.float64)
    n_fft = len(window)
    return bool(scipy.signal.check_NOLA(window, n_fft, n_fft - hop_length, tol=tol))
