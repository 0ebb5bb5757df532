"""WAV decode/encode for the stereo transform engine."""

import logging

import numpy as np
import scipy.io.wavfile

from .config import NB_CHANNELS, SUPPORTED_SAMPLE_RATE

logger = logging.getLogger(__name__)


def _to_float32(data):
    """Scale integer PCM to float32 in [-1, 1); pass float data through."""
    if np.issubdtype(data.dtype, np.floating):
        return data.astype(np.float32)
    if data.dtype == np.uint8:
        return (data.astype(np.float32) - 128.0) / 128.0
    info = np.iinfo(data.dtype)
    return data.astype(np.float32) / float(-info.min)


def load(path, sample_rate=SUPPORTED_SAMPLE_RATE):
    """Load a WAV file as a stereo float32 waveform.

    Parameters
    ----------
    path : str or os.PathLike
        Path to a WAV file.
    sample_rate : int
        The only sample rate accepted. Default: 44100.

    Returns
    -------
    np.ndarray
        Waveform of shape ``(2, n_samples)``, float32. Mono files are
        duplicated into both channels.

    Raises
    ------
    ValueError
        If the file's sample rate differs from ``sample_rate`` or it has
        more than two channels.
    """
    sr, data = scipy.io.wavfile.read(path)

    if sr != sample_rate:
        raise ValueError(
            f"Only sample rate {sample_rate} Hz is supported, got {sr} Hz in {path}"
        )

    n_channels = 1 if data.ndim == 1 else data.shape[1]
    if n_channels not in (1, NB_CHANNELS):
        raise ValueError(
            f"Only mono and stereo audio are supported, got {n_channels} channels in {path}"
        )

    n_samples = data.shape[0]
    logger.info("Input samples: %d", n_samples)
    logger.info("Length in seconds: %.3f", n_samples / float(sr))
    logger.info("Number of channels: %d", n_channels)

    data = _to_float32(data)
    if data.ndim == 1:
        return np.stack([data, data])
    return np.ascontiguousarray(data.T)


def write(path, waveform, sample_rate=SUPPORTED_SAMPLE_RATE):
    """Write a stereo waveform as a 32-bit float WAV file.

    Parameters
    ----------
    path : str or os.PathLike
        Destination path.
    waveform : np.ndarray
        Array of shape ``(2, n_samples)``.
    sample_rate : int
        Sample rate written to the header. Default: 44100.
    """
    waveform = np.asarray(waveform, dtype=np.float32)
    if waveform.ndim != 2 or waveform.shape[0] != NB_CHANNELS:
        raise ValueError(
            f"Expected a stereo waveform of shape (2, n_samples), got {waveform.shape}"
        )

    scipy.io.wavfile.write(path, int(sample_rate), np.ascontiguousarray(waveform.T))
    logger.info("Wrote %d stereo samples at %d Hz to %s",
                waveform.shape[1], sample_rate, path)
