"""Preallocated STFT/iSTFT working memory."""

import logging

import numpy as np

from ._fft import RealFFT
from .config import NB_CHANNELS, STFTConfig
from .filters import window_sumsquare

logger = logging.getLogger(__name__)


class Workspace:
    """Buffers for transforming stereo signals of one fixed length.

    Every array the forward and inverse transforms touch is allocated here,
    once, from ``(n_samples, n_fft, hop_length)``. The transforms only write
    into these arrays, so repeated calls on the same workspace do not
    allocate signal-sized memory.

    Parameters
    ----------
    n_samples : int
        Number of samples per channel ``N``.
    config : STFTConfig or None
        Transform parameters. Default: ``STFTConfig()``.

    Attributes
    ----------
    waveform : np.ndarray
        ``(2, N)`` float32. Input of ``stft`` and output of ``istft``.
    spec : np.ndarray
        ``(2, n_bins, nb_frames)`` complex64. Output of ``stft`` and input
        of ``istft``.
    window : np.ndarray
        Read-only analysis/synthesis window, ``(n_fft,)``.
    normalized_window : np.ndarray
        Read-only window sum-of-squares over the padded length.
    norm_denominator : np.ndarray
        Read-only ``normalized_window + eps``, the overlap-add divisor.
    """

    def __init__(self, n_samples, config=None):
        config = STFTConfig() if config is None else config
        if not isinstance(config, STFTConfig):
            raise ValueError(f"config must be an STFTConfig, got {type(config).__name__}")

        n_samples = int(n_samples)
        if n_samples < config.min_length:
            raise ValueError(
                f"Signal length {n_samples} is too short for n_fft={config.n_fft} "
                f"with pad_mode='{config.pad_mode}' (need at least {config.min_length})"
            )

        self.config = config
        self.n_samples = n_samples
        self.n_fft = config.n_fft
        self.hop_length = config.hop_length
        self.pad = config.pad
        self.n_bins = config.n_bins
        self.nb_frames = config.num_frames(n_samples)
        self.padded_length = config.padded_length(n_samples)

        self.fft = RealFFT(self.n_fft, backend=config.fft_backend)

        window = config.get_window()
        window.flags.writeable = False
        self.window = window

        norm = window_sumsquare(window, self.nb_frames, self.hop_length,
                                length=self.padded_length)
        norm.flags.writeable = False
        self.normalized_window = norm

        denom = norm + np.float32(config.eps)
        denom.flags.writeable = False
        self.norm_denominator = denom

        self.waveform = np.zeros((NB_CHANNELS, n_samples), dtype=np.float32)
        self.spec = np.zeros((NB_CHANNELS, self.n_bins, self.nb_frames),
                             dtype=np.complex64)
        self._alloc_scratch()
        self._channel_workspaces = None
        self._owns_shared = True

        logger.debug(
            "Workspace: n_samples=%d n_fft=%d hop=%d frames=%d padded=%d (%d bytes)",
            n_samples, self.n_fft, self.hop_length, self.nb_frames,
            self.padded_length, self.nbytes,
        )

    def _alloc_scratch(self):
        self.padded_in = np.zeros(self.padded_length, dtype=np.float32)
        self.pad_head = np.zeros(self.pad, dtype=np.float32)
        self.pad_tail = np.zeros(self.pad, dtype=np.float32)
        self.frame = np.zeros(self.n_fft, dtype=np.float32)
        self.frames = np.zeros((self.nb_frames, self.n_bins), dtype=np.complex64)
        self.padded_out = np.zeros(self.padded_length, dtype=np.float32)

    @classmethod
    def from_waveform(cls, y, config=None):
        """Size a workspace for ``y`` and load it into ``waveform``.

        Parameters
        ----------
        y : np.ndarray
            Mono or stereo signal; see ``stftkit.to_stereo``.
        config : STFTConfig or None
            Transform parameters.

        Returns
        -------
        Workspace
        """
        from .core import to_stereo
        y = to_stereo(y)
        ws = cls(y.shape[1], config=config)
        ws.waveform[...] = y
        return ws

    def scratch_copy(self):
        """Workspace sharing this one's read-only and I/O arrays but not its scratch.

        The copy shares ``window``, ``normalized_window``,
        ``norm_denominator``, ``waveform`` and ``spec`` with ``self`` and owns
        fresh per-channel scratch buffers, so two channels can be processed
        concurrently.
        """
        clone = object.__new__(type(self))
        clone.__dict__.update(self.__dict__)
        clone.fft = RealFFT(self.n_fft, backend=self.config.fft_backend)
        clone._alloc_scratch()
        clone._channel_workspaces = None
        clone._owns_shared = False
        return clone

    def channel_workspaces(self):
        """One workspace per channel: ``self`` followed by cached scratch copies."""
        if self._channel_workspaces is None:
            self._channel_workspaces = [self] + [
                self.scratch_copy() for _ in range(NB_CHANNELS - 1)
            ]
        return self._channel_workspaces

    def matches(self, n_samples, config=None):
        """Whether this workspace can transform ``n_samples`` with ``config``."""
        if config is not None and config != self.config:
            return False
        return int(n_samples) == self.n_samples

    def check_waveform(self, y):
        """Validate a waveform against this workspace.

        Raises
        ------
        ValueError
            If ``y`` is not ``(2, n_samples)``.
        """
        y = np.asarray(y)
        expected = (NB_CHANNELS, self.n_samples)
        if y.ndim != 2 or y.shape[0] != NB_CHANNELS:
            raise ValueError(
                f"Expected a stereo waveform of shape {expected}, got {y.shape}"
            )
        if y.shape != expected:
            raise ValueError(
                f"Waveform length {y.shape[1]} does not match workspace "
                f"length {self.n_samples}"
            )
        return y

    def check_spectrogram(self, S):
        """Validate a spectrogram against this workspace.

        Raises
        ------
        ValueError
            If ``S`` is not ``(2, n_bins, nb_frames)``.
        """
        S = np.asarray(S)
        expected = self.spec.shape
        if S.shape != expected:
            raise ValueError(
                f"Spectrogram shape {S.shape} does not match workspace "
                f"shape {expected}"
            )
        return S

    def stft(self, y=None, parallel=False):
        """Forward transform; see ``stftkit.core.stft``."""
        from .core import stft
        return stft(self, y, parallel=parallel)

    def istft(self, S=None, parallel=False):
        """Inverse transform; see ``stftkit.core.istft``."""
        from .core import istft
        return istft(self, S, parallel=parallel)

    @property
    def nbytes(self):
        """Bytes held by the arrays this workspace owns.

        A ``scratch_copy`` owns only its scratch buffers; the window,
        normalisation, waveform and spectrogram arrays it shares are counted
        on the workspace it was copied from.
        """
        arrays = [
            self.padded_in, self.pad_head, self.pad_tail, self.frame,
            self.frames, self.padded_out,
        ]
        if self._owns_shared:
            arrays += [
                self.window, self.normalized_window, self.norm_denominator,
                self.waveform, self.spec,
            ]
        return int(sum(a.nbytes for a in arrays))

    def __repr__(self):
        return (
            f"Workspace(n_samples={self.n_samples}, n_fft={self.n_fft}, "
            f"hop_length={self.hop_length}, nb_frames={self.nb_frames})"
        )
