"""stftkit: stereo STFT/iSTFT with reusable, preallocated workspaces."""

__version__ = "0.1.0"

from .config import (
    STFTConfig, SUPPORTED_SAMPLE_RATE, FFT_WINDOW_SIZE, FFT_HOP_SIZE,
    NB_CHANNELS, EPSILON,
)
from ._buffer import Workspace
from .core import stft, istft, pad_signal, to_stereo, spectrogram, reconstruct
from .filters import get_window, window_sumsquare, check_nola
from .convert import (
    num_frames, frames_to_samples, samples_to_frames, frames_to_time,
    fft_frequencies,
)
from .audio import load, write
