"""Unit conversions: frame/sample/time indices and FFT bin frequencies."""

import numpy as np


def num_frames(n_samples, n_fft, hop_length):
    """Number of centred frames for a signal of ``n_samples`` samples.

    The signal is padded by ``n_fft // 2`` on each side and a frame starts
    every ``hop_length`` samples while the whole frame fits, so the count is
    ``(n_samples + 2 * (n_fft // 2) - n_fft) // hop_length + 1``.

    Parameters
    ----------
    n_samples : int
        Unpadded signal length.
    n_fft : int
        Frame length.
    hop_length : int
        Hop size.

    Returns
    -------
    int
        Number of frames.
    """
    padded = int(n_samples) + 2 * (int(n_fft) // 2)
    if padded < n_fft:
        return 0
    return (padded - int(n_fft)) // int(hop_length) + 1


def frames_to_samples(frames, hop_length=1024):
    """Convert frame indices to the sample index each frame is centred on.

    Parameters
    ----------
    frames : int or np.ndarray
        Frame index or indices.
    hop_length : int
        Hop size. Default: 1024.

    Returns
    -------
    int or np.ndarray
        Sample indices (``frames * hop_length``).
    """
    frames = np.asanyarray(frames)
    samples = (frames * hop_length).astype(np.int64)
    return int(samples) if samples.ndim == 0 else samples


def samples_to_frames(samples, hop_length=1024):
    """Convert sample indices to the index of the nearest preceding frame centre.

    Parameters
    ----------
    samples : int or np.ndarray
        Sample index or indices.
    hop_length : int
        Hop size. Default: 1024.

    Returns
    -------
    int or np.ndarray
        Frame indices (``samples // hop_length``).
    """
    samples = np.asanyarray(samples)
    frames = np.floor_divide(samples, hop_length).astype(np.int64)
    return int(frames) if frames.ndim == 0 else frames


def frames_to_time(frames, sr=44100, hop_length=1024):
    """Convert frame indices to time in seconds.

    Parameters
    ----------
    frames : int or np.ndarray
        Frame index or indices.
    sr : int
        Sample rate. Default: 44100.
    hop_length : int
        Hop size. Default: 1024.

    Returns
    -------
    float or np.ndarray
        Times in seconds.
    """
    times = np.asanyarray(frames_to_samples(frames, hop_length)) / float(sr)
    return float(times) if times.ndim == 0 else times


def fft_frequencies(sr=44100, n_fft=4096):
    """Centre frequencies of the half-spectrum bins.

    Parameters
    ----------
    sr : int
        Sample rate. Default: 44100.
    n_fft : int
        FFT size. Default: 4096.

    Returns
    -------
    np.ndarray
        Frequencies in Hz, shape ``(n_fft // 2 + 1,)``.
    """
    return np.fft.rfftfreq(n_fft, d=1.0 / sr)
