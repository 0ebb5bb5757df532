#!/usr/bin/env python3
"""Run a WAV file through the forward and inverse STFT and write the result.

Usage:
    python scripts/roundtrip.py input.wav output.wav [--n-fft 4096] [--hop-length 1024]
"""

import argparse
import logging
import sys
import time

import numpy as np

import stftkit

logger = logging.getLogger("roundtrip")


def main(argv=None):
    parser = argparse.ArgumentParser(description="stftkit STFT -> iSTFT round trip")
    parser.add_argument("input", help="Input WAV file (44.1 kHz, mono or stereo)")
    parser.add_argument("output", help="Output WAV file (stereo, float32)")
    parser.add_argument(
        "--n-fft", type=int, default=stftkit.FFT_WINDOW_SIZE,
        help=f"FFT window size (default: {stftkit.FFT_WINDOW_SIZE})",
    )
    parser.add_argument(
        "--hop-length", type=int, default=stftkit.FFT_HOP_SIZE,
        help=f"Hop size (default: {stftkit.FFT_HOP_SIZE})",
    )
    parser.add_argument(
        "--pad-mode", choices=["symmetric", "reflect"], default="symmetric",
        help="Edge mirroring for centred frames (default: symmetric)",
    )
    parser.add_argument(
        "--parallel", action="store_true",
        help="Transform the two channels on separate threads",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        config = stftkit.STFTConfig(
            n_fft=args.n_fft,
            hop_length=args.hop_length,
            pad_mode=args.pad_mode,
        )
        y = stftkit.load(args.input, sample_rate=config.sample_rate)
        ws = stftkit.Workspace.from_waveform(y, config=config)
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    start = time.perf_counter()
    spec = ws.stft(parallel=args.parallel)
    logger.info("Spectrogram shape: %s", spec.shape)
    out = ws.istft(parallel=args.parallel)
    elapsed = (time.perf_counter() - start) * 1000
    logger.info("STFT + iSTFT took %.1f ms", elapsed)

    err = float(np.max(np.abs(out - y)))
    logger.info("Max absolute reconstruction error: %.3e", err)

    stftkit.write(args.output, out, sample_rate=config.sample_rate)
    return 0


if __name__ == "__main__":
    sys.exit(main())
