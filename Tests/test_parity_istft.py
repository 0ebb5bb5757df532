"""iSTFT parity tests: stftkit vs librosa.

librosa's inverse divides by the same window sum-square envelope, so
feeding it the rescaled stftkit spectrogram must give the same waveform.
"""

import numpy as np
import pytest

librosa = pytest.importorskip("librosa")


def _noise(n, seed=0):
    rng = np.random.default_rng(seed)
    return (0.3 * rng.standard_normal((2, n))).astype(np.float32)


@pytest.mark.parametrize("n_fft,hop", [(4096, 1024), (1024, 256)])
def test_istft_parity(n_fft, hop):
    from stftkit import STFTConfig, Workspace

    y = _noise(25000, seed=n_fft)
    ws = Workspace(y.shape[1], STFTConfig(n_fft=n_fft, hop_length=hop, pad_mode="reflect"))
    spec = ws.stft(y)
    ours = ws.istft()

    for ch in range(2):
        expected = librosa.istft(
            spec[ch] * np.sqrt(n_fft), n_fft=n_fft, hop_length=hop,
            window="hann", center=True, length=y.shape[1],
        )
        np.testing.assert_allclose(
            ours[ch], expected,
            rtol=1e-4, atol=1e-4,
            err_msg=f"iSTFT mismatch vs librosa on channel {ch}",
        )


def test_istft_of_librosa_spectrogram():
    """A librosa spectrogram, rescaled, inverts back to the source."""
    from stftkit import STFTConfig, Workspace

    n_fft, hop = 2048, 512
    y = _noise(20000, seed=4)
    S = np.stack([
        librosa.stft(y[ch], n_fft=n_fft, hop_length=hop, center=True, pad_mode="reflect")
        for ch in range(2)
    ]) / np.sqrt(n_fft)

    ws = Workspace(y.shape[1], STFTConfig(n_fft=n_fft, hop_length=hop, pad_mode="reflect"))
    out = ws.istft(S.astype(np.complex64))
    np.testing.assert_allclose(out, y, atol=1e-4)
