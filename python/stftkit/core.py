"""Stereo STFT/iSTFT over a preallocated workspace."""

import concurrent.futures
import logging

import numpy as np

from ._buffer import Workspace
from .config import NB_CHANNELS, STFTConfig

logger = logging.getLogger(__name__)


def to_stereo(y):
    """Normalise a mono or stereo signal to a ``(2, N)`` float32 array.

    Parameters
    ----------
    y : np.ndarray
        Signal of shape ``(N,)``, ``(1, N)`` or ``(2, N)``.

    Returns
    -------
    np.ndarray
        New ``(2, N)`` float32 array. Mono input is duplicated into both
        channels.
    """
    y = np.asarray(y)
    if y.ndim == 1:
        y = y[np.newaxis, :]
    if y.ndim != 2 or y.shape[0] not in (1, NB_CHANNELS):
        raise ValueError(
            f"Only mono and stereo audio are supported, got shape {y.shape}"
        )
    if y.shape[0] == 1:
        return np.repeat(y.astype(np.float32), NB_CHANNELS, axis=0)
    return np.array(y, dtype=np.float32)


def pad_signal(padded, pad, mode="symmetric", head=None, tail=None):
    """Mirror-pad a centred buffer in place.

    ``padded`` holds the signal in ``padded[pad:-pad]``; the first and last
    ``pad`` entries are overwritten with the reversed samples just inside
    the signal edges.

    Parameters
    ----------
    padded : np.ndarray
        1D buffer of length ``N + 2 * pad``.
    pad : int
        Number of samples to fill on each side.
    mode : str
        ``"symmetric"`` repeats the edge sample (``abc -> ba|abc|cb``),
        ``"reflect"`` mirrors about it without repeating it
        (``abc -> cb|abc|ba``). Default: ``"symmetric"``.
    head, tail : np.ndarray or None
        Scratch arrays of length ``pad``. Allocated if omitted.

    Returns
    -------
    np.ndarray
        ``padded``.
    """
    if mode == "reflect":
        offset = 1
    elif mode == "symmetric":
        offset = 0
    else:
        raise ValueError(f"Unknown pad mode '{mode}'")

    n = len(padded) - 2 * pad
    if n < pad + offset:
        raise ValueError(
            f"Signal length {n} is too short to {mode}-pad by {pad} samples "
            f"(need at least {pad + offset})"
        )

    if head is None:
        head = np.empty(pad, dtype=padded.dtype)
    if tail is None:
        tail = np.empty(pad, dtype=padded.dtype)

    end = pad + n
    head[:] = padded[pad + offset:2 * pad + offset]
    tail[:] = padded[end - pad - offset:end - offset]

    padded[:pad] = head[::-1]
    padded[end:] = tail[::-1]
    return padded


def _stft_channel(ws, channel):
    padded = ws.padded_in
    padded[ws.pad:ws.pad + ws.n_samples] = ws.waveform[channel]
    pad_signal(padded, ws.pad, ws.config.pad_mode, ws.pad_head, ws.pad_tail)

    scale = np.float32(1.0 / np.sqrt(ws.n_fft))
    last_start = ws.padded_length - ws.n_fft
    for f, start in enumerate(range(0, last_start + 1, ws.hop_length)):
        np.multiply(padded[start:start + ws.n_fft], ws.window, out=ws.frame)
        ws.fft.forward(ws.frame, ws.frames[f])
        ws.frames[f] *= scale

    ws.spec[channel] = ws.frames.T


def _istft_channel(ws, channel):
    ws.frames[...] = ws.spec[channel].T

    out = ws.padded_out
    out.fill(0.0)

    scale = np.float32(np.sqrt(ws.n_fft))
    denom = ws.norm_denominator
    for f in range(ws.nb_frames):
        start = f * ws.hop_length
        spectrum = ws.frames[f]
        spectrum *= scale
        ws.fft.inverse(spectrum, ws.frame)

        ws.frame *= ws.window
        ws.frame /= np.float32(ws.n_fft)
        ws.frame /= denom[start:start + ws.n_fft]
        out[start:start + ws.n_fft] += ws.frame

    ws.waveform[channel] = out[ws.pad:ws.pad + ws.n_samples]


def _run_channels(ws, fn, parallel):
    if not parallel:
        for channel in range(NB_CHANNELS):
            fn(ws, channel)
        return

    workers = ws.channel_workspaces()
    with concurrent.futures.ThreadPoolExecutor(max_workers=NB_CHANNELS) as executor:
        futures = [
            executor.submit(fn, worker, channel)
            for channel, worker in enumerate(workers)
        ]
        for future in futures:
            future.result()


def stft(ws, y=None, parallel=False):
    """Forward STFT of the workspace waveform.

    Each channel is centre-padded by ``n_fft // 2`` mirrored samples, cut
    into frames every ``hop_length`` samples, windowed, transformed and
    scaled by ``1 / sqrt(n_fft)``.

    Parameters
    ----------
    ws : Workspace
        Workspace sized for the signal.
    y : np.ndarray or None
        ``(2, n_samples)`` signal copied into ``ws.waveform`` first. If
        None, ``ws.waveform`` is transformed as-is.
    parallel : bool
        Transform the two channels on separate threads. Default: False.

    Returns
    -------
    np.ndarray
        ``ws.spec``, complex64 of shape ``(2, n_fft // 2 + 1, nb_frames)``.
    """
    if y is not None:
        y = ws.check_waveform(y)
        ws.waveform[...] = y

    _run_channels(ws, _stft_channel, parallel)
    return ws.spec


def istft(ws, S=None, parallel=False):
    """Inverse STFT into the workspace waveform.

    Each frame is rescaled by ``sqrt(n_fft)``, inverse transformed,
    windowed again and overlap-added; the sum is divided by the window
    sum-of-squares (plus ``eps``) and the centre padding is dropped.

    Parameters
    ----------
    ws : Workspace
        Workspace the spectrogram was computed with, or one of the same
        geometry.
    S : np.ndarray or None
        Spectrogram of shape ``ws.spec.shape`` copied into ``ws.spec``
        first. If None, ``ws.spec`` is inverted as-is.
    parallel : bool
        Transform the two channels on separate threads. Default: False.

    Returns
    -------
    np.ndarray
        ``ws.waveform``, float32 of shape ``(2, n_samples)``.
    """
    if S is not None:
        S = ws.check_spectrogram(S)
        ws.spec[...] = S

    _run_channels(ws, _istft_channel, parallel)
    return ws.waveform


def spectrogram(y, config=None, parallel=False):
    """One-shot forward STFT of a mono or stereo signal.

    Parameters
    ----------
    y : np.ndarray
        Signal of shape ``(N,)``, ``(1, N)`` or ``(2, N)``.
    config : STFTConfig or None
        Transform parameters. Default: ``STFTConfig()``.
    parallel : bool
        Transform the two channels on separate threads. Default: False.

    Returns
    -------
    np.ndarray
        Complex64 spectrogram of shape ``(2, n_fft // 2 + 1, nb_frames)``.
    """
    ws = Workspace.from_waveform(y, config=config)
    return stft(ws, parallel=parallel)


def reconstruct(S, length=None, config=None, parallel=False):
    """One-shot inverse STFT of a stereo spectrogram.

    Parameters
    ----------
    S : np.ndarray
        Complex spectrogram of shape ``(2, n_bins, n_frames)``.
    length : int or None
        Samples per channel of the original signal. Default:
        ``(n_frames - 1) * hop_length``.
    config : STFTConfig or None
        Transform parameters. Default: ``n_fft = 2 * (n_bins - 1)`` and
        ``hop_length = n_fft // 4``.
    parallel : bool
        Transform the two channels on separate threads. Default: False.

    Returns
    -------
    np.ndarray
        Float32 waveform of shape ``(2, length)``.
    """
    S = np.asarray(S)
    if S.ndim != 3 or S.shape[0] != NB_CHANNELS:
        raise ValueError(
            f"Expected a stereo spectrogram of shape (2, n_bins, n_frames), got {S.shape}"
        )

    if config is None:
        n_fft = 2 * (S.shape[1] - 1)
        config = STFTConfig(n_fft=n_fft, hop_length=max(n_fft // 4, 1))

    if length is None:
        length = (S.shape[2] - 1) * config.hop_length

    ws = Workspace(length, config=config)
    logger.debug("Reconstructing %s into %d samples per channel", S.shape, length)
    return istft(ws, S, parallel=parallel)
