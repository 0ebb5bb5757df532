"""Tests for the preallocated workspace (stftkit.Workspace)."""

import numpy as np
import pytest

from stftkit import STFTConfig, Workspace, window_sumsquare


def test_buffer_shapes():
    ws = Workspace(10000, STFTConfig(n_fft=1024, hop_length=256))

    assert ws.pad == 512
    assert ws.n_bins == 513
    assert ws.nb_frames == 10000 // 256 + 1
    assert ws.padded_length == 10000 + 1024

    assert ws.waveform.shape == (2, 10000)
    assert ws.waveform.dtype == np.float32
    assert ws.spec.shape == (2, 513, ws.nb_frames)
    assert ws.spec.dtype == np.complex64
    assert ws.padded_in.shape == (ws.padded_length,)
    assert ws.padded_out.shape == (ws.padded_length,)
    assert ws.pad_head.shape == (512,)
    assert ws.pad_tail.shape == (512,)
    assert ws.frame.shape == (1024,)
    assert ws.frames.shape == (ws.nb_frames, 513)
    assert ws.frames.flags["C_CONTIGUOUS"]


def test_default_config():
    ws = Workspace(8192)
    assert ws.config == STFTConfig()
    assert ws.n_fft == 4096
    assert ws.hop_length == 1024


def test_window_and_norm_read_only():
    ws = Workspace(4096, STFTConfig(n_fft=1024, hop_length=256))
    with pytest.raises(ValueError):
        ws.window[0] = 1.0
    with pytest.raises(ValueError):
        ws.normalized_window[0] = 1.0


def test_normalized_window_covers_padded_length():
    ws = Workspace(5000, STFTConfig(n_fft=1024, hop_length=256))
    expected = window_sumsquare(ws.window, ws.nb_frames, 256, length=ws.padded_length)

    assert ws.normalized_window.shape == (ws.padded_length,)
    np.testing.assert_array_equal(ws.normalized_window, expected)
    # Every sample of the unpadded region is covered by some frame
    centre = ws.normalized_window[ws.pad:ws.pad + ws.n_samples]
    assert np.all(centre > 0)


def test_buffers_reused_across_calls():
    """Repeated transforms write into the same arrays."""
    ws = Workspace(4096, STFTConfig(n_fft=1024, hop_length=256))
    ids = [id(a) for a in (ws.spec, ws.waveform, ws.padded_in, ws.frames, ws.padded_out)]

    rng = np.random.default_rng(0)
    for _ in range(3):
        ws.stft(rng.standard_normal((2, 4096)).astype(np.float32))
        ws.istft()

    assert ids == [id(a) for a in (ws.spec, ws.waveform, ws.padded_in, ws.frames, ws.padded_out)]


def test_scratch_copy_shares_io_not_scratch():
    ws = Workspace(4096, STFTConfig(n_fft=1024, hop_length=256))
    clone = ws.scratch_copy()

    assert clone.window is ws.window
    assert clone.normalized_window is ws.normalized_window
    assert clone.waveform is ws.waveform
    assert clone.spec is ws.spec
    for name in ("padded_in", "pad_head", "pad_tail", "frame", "frames", "padded_out"):
        assert getattr(clone, name) is not getattr(ws, name), name
    assert clone.fft is not ws.fft


def test_from_waveform_mono():
    y = np.linspace(-1, 1, 3000)
    ws = Workspace.from_waveform(y, STFTConfig(n_fft=1024, hop_length=256))

    assert ws.n_samples == 3000
    np.testing.assert_allclose(ws.waveform[0], y, atol=1e-7)
    np.testing.assert_array_equal(ws.waveform[0], ws.waveform[1])


def test_matches():
    config = STFTConfig(n_fft=1024, hop_length=256)
    ws = Workspace(4096, config)

    assert ws.matches(4096)
    assert ws.matches(4096, STFTConfig(n_fft=1024, hop_length=256))
    assert not ws.matches(4097)
    assert not ws.matches(4096, config.replace(hop_length=512))


def test_too_short_for_pad_mode():
    config = STFTConfig(n_fft=1024, hop_length=256)
    with pytest.raises(ValueError, match="need at least 512"):
        Workspace(511, config)
    # default symmetric mirroring accepts exactly pad samples
    ws = Workspace(512, config)
    assert ws.nb_frames == 512 // 256 + 1
    # reflect excludes the edge sample and needs one more
    with pytest.raises(ValueError, match="need at least 513"):
        Workspace(512, config.replace(pad_mode="reflect"))


def test_rejects_non_config():
    with pytest.raises(ValueError, match="STFTConfig"):
        Workspace(4096, config={"n_fft": 1024})


def test_nbytes():
    ws = Workspace(4096, STFTConfig(n_fft=1024, hop_length=256))
    assert ws.nbytes >= ws.spec.nbytes + ws.waveform.nbytes + ws.frames.nbytes


def test_nbytes_of_scratch_copy_counts_only_scratch():
    """Arrays shared with the source workspace are counted once, on the source."""
    ws = Workspace(4096, STFTConfig(n_fft=1024, hop_length=256))
    clone = ws.scratch_copy()

    scratch = sum(getattr(ws, name).nbytes for name in (
        "padded_in", "pad_head", "pad_tail", "frame", "frames", "padded_out"))
    shared = sum(a.nbytes for a in (
        ws.window, ws.normalized_window, ws.norm_denominator, ws.waveform, ws.spec))

    assert clone.nbytes == scratch
    assert ws.nbytes == scratch + shared
    assert sum(w.nbytes for w in ws.channel_workspaces()) == 2 * scratch + shared


def test_norm_denominator_precomputed():
    """The overlap-add divisor is built once, read-only, and shared with clones."""
    config = STFTConfig(n_fft=1024, hop_length=256, eps=1e-6)
    ws = Workspace(5000, config)

    np.testing.assert_array_equal(
        ws.norm_denominator, ws.normalized_window + np.float32(1e-6))
    assert ws.norm_denominator.dtype == np.float32
    assert np.all(ws.norm_denominator > 0)
    with pytest.raises(ValueError):
        ws.norm_denominator[0] = 1.0
    assert ws.scratch_copy().norm_denominator is ws.norm_denominator


def test_istft_reads_precomputed_denominator():
    """Inverse output tracks the stored divisor, not a per-frame recomputation."""
    config = STFTConfig(n_fft=1024, hop_length=256)
    rng = np.random.default_rng(4)
    y = rng.standard_normal((2, 4096)).astype(np.float32)

    ws = Workspace(4096, config)
    ws.stft(y)
    expected = ws.istft().copy()

    doubled = ws.norm_denominator * np.float32(2.0)
    doubled.flags.writeable = False
    ws.norm_denominator = doubled
    np.testing.assert_allclose(ws.istft(), 0.5 * expected, rtol=1e-5, atol=1e-6)


def test_repr():
    ws = Workspace(4096, STFTConfig(n_fft=1024, hop_length=256))
    assert repr(ws) == "Workspace(n_samples=4096, n_fft=1024, hop_length=256, nb_frames=17)"
