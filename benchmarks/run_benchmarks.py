#!/usr/bin/env python3
"""stftkit benchmark suite: times stereo STFT/iSTFT and compares against librosa.

Usage:
    python benchmarks/run_benchmarks.py [--durations 1 5 30] [--compare PREVIOUS.json]
"""

import argparse
import json
import os
import platform
import sys
import time
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

SR = 44100
N_FFT = 4096
HOP = 1024
RESULTS_DIR = Path(__file__).resolve().parent / "results"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_signal(duration_s, sr=SR):
    """Stereo test signal: 440 Hz left, 660 Hz right, light noise on both."""
    n = int(sr * duration_s)
    t = np.arange(n, dtype=np.float32) / sr
    rng = np.random.default_rng(n)
    y = np.stack([
        0.5 * np.sin(2 * np.pi * 440 * t),
        0.5 * np.sin(2 * np.pi * 660 * t),
    ])
    y += 0.01 * rng.standard_normal(y.shape)
    return y.astype(np.float32)


def time_call(fn, y, iterations, warmup):
    """Per-call wall time in milliseconds, after ``warmup`` untimed calls."""
    for _ in range(warmup):
        fn(y)
    samples = []
    for _ in range(iterations):
        start = time.perf_counter()
        fn(y)
        samples.append((time.perf_counter() - start) * 1000)
    return {
        "mean_ms": round(float(np.mean(samples)), 3),
        "min_ms": round(min(samples), 3),
        "max_ms": round(max(samples), 3),
        "iterations": iterations,
    }


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def stftkit_operations(sk):
    """(name, fn(y)) pairs for stftkit.

    Workspaces are built once per signal length, outside the timed calls,
    the way a caller processing many equal-length blocks would hold them.
    """
    config = sk.STFTConfig(n_fft=N_FFT, hop_length=HOP, pad_mode="reflect")
    workspaces = {}

    def ws_for(y):
        n = y.shape[1]
        if n not in workspaces:
            workspaces[n] = sk.Workspace(n, config=config)
        return workspaces[n]

    def round_trip(y, parallel=False):
        ws = ws_for(y)
        ws.stft(y, parallel=parallel)
        return ws.istft(parallel=parallel)

    return [
        ("Workspace setup", lambda y: sk.Workspace(y.shape[1], config=config)),
        ("STFT", lambda y: ws_for(y).stft(y)),
        ("STFT parallel", lambda y: ws_for(y).stft(y, parallel=True)),
        ("iSTFT", lambda y: ws_for(y).istft()),
        ("Round trip", round_trip),
        ("Round trip parallel", lambda y: round_trip(y, parallel=True)),
    ]


def librosa_operations(lr):
    """(name, fn(y)) pairs for librosa; stereo input is framed per channel."""
    def forward(y):
        return lr.stft(y, n_fft=N_FFT, hop_length=HOP, center=True, pad_mode="reflect")

    def round_trip(y):
        return lr.istft(forward(y), hop_length=HOP, length=y.shape[-1])

    return [
        ("STFT", forward),
        ("Round trip", round_trip),
    ]


def run_suite(label, operations, signals, iterations, warmup):
    """Time every operation on every signal; failures are recorded, not raised."""
    results = []
    for duration_s, y in signals:
        for name, fn in operations:
            print(f"  {label:8s} | {name:20s} | {duration_s:4g}s ...", end="", flush=True)
            entry = {"operation": name, "duration_s": duration_s}
            try:
                entry.update(time_call(fn, y, iterations, warmup))
                print(f"  {entry['mean_ms']:10.3f} ms")
            except Exception as exc:
                entry.update(mean_ms=None, error=str(exc))
                print(f"  FAILED: {exc}")
            results.append(entry)
    return results


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------

def _index(results):
    return {(r["operation"], r["duration_s"]): r.get("mean_ms") for r in results or []}


def _fmt(value, width):
    return f"{value:{width}.3f}" if value is not None else "N/A".rjust(width)


def print_table(title, rows, left, right, relation):
    """Print ``rows`` of (operation, duration, left_ms, right_ms).

    ``relation(left_ms, right_ms)`` renders the last column.
    """
    print()
    print(title)
    print("=" * len(title))
    print(f"{'Operation':20s} | {'Duration':>8s} | {left:>14s} | {right:>14s} | {'':>8s}")
    print(f"{'-' * 20}-+-{'-' * 8}-+-{'-' * 14}-+-{'-' * 14}-+-{'-' * 8}")
    for op, dur, a, b in rows:
        if a is not None and b is not None and a > 0:
            rel = relation(a, b)
        else:
            rel = "N/A"
        print(f"{op:20s} | {dur:>7g}s | {_fmt(a, 14)} | {_fmt(b, 14)} | {rel:>8s}")
    print()


def print_summary(sk_results, lr_results):
    """stftkit vs librosa, speedup > 1 meaning stftkit is faster."""
    lr = _index(lr_results)
    rows = [
        (r["operation"], r["duration_s"], r.get("mean_ms"),
         lr.get((r["operation"], r["duration_s"])))
        for r in sk_results
    ]
    print_table("stftkit Benchmark Results", rows, "stftkit (ms)", "librosa (ms)",
                lambda sk, ref: f"{ref / sk:6.1f}x")


def compare_results(current, previous_path):
    """Print the change of every timing against a previous JSON report."""
    with open(previous_path) as f:
        previous = _index(json.load(f).get("results"))
    rows = [
        (r["operation"], r["duration_s"],
         previous.get((r["operation"], r["duration_s"])), r.get("mean_ms"))
        for r in current
    ]
    print_table(f"Comparison against {previous_path}", rows, "Previous (ms)",
                "Current (ms)", lambda prev, cur: f"{(cur - prev) / prev * 100:+.1f}%")


def write_report(sk, sk_results, lr_results):
    report = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "hardware": {
            "processor": platform.processor(),
            "machine": platform.machine(),
            "cpu_count": os.cpu_count(),
        },
        "python_version": platform.python_version(),
        "numpy_version": np.__version__,
        "stftkit_version": getattr(sk, "__version__", "unknown"),
        "config": {"sample_rate": SR, "n_fft": N_FFT, "hop_length": HOP},
        "results": sk_results,
        "librosa_results": lr_results,
    }
    RESULTS_DIR.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    out_path = RESULTS_DIR / f"bench_{stamp}.json"
    with open(out_path, "w") as f:
        json.dump(report, f, indent=2)
    return out_path


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(description="stftkit benchmark suite")
    parser.add_argument(
        "--durations", type=float, nargs="+", default=[1, 5, 30],
        help="Signal lengths in seconds (default: 1 5 30)",
    )
    parser.add_argument(
        "--iterations", type=int, default=5,
        help="Timed calls per operation (default: 5)",
    )
    parser.add_argument(
        "--warmup", type=int, default=1,
        help="Untimed calls before timing (default: 1)",
    )
    parser.add_argument(
        "--no-librosa", action="store_true",
        help="Skip the librosa reference timings",
    )
    parser.add_argument(
        "--compare", metavar="PATH",
        help="Previous benchmark JSON to diff against",
    )
    args = parser.parse_args()

    try:
        import stftkit as sk
    except ImportError:
        print("ERROR: stftkit is not importable. Install it first:")
        print("  pip install -e .")
        sys.exit(1)

    lr = None
    if not args.no_librosa:
        try:
            import librosa as lr
            print(f"librosa {lr.__version__} found, timing it for reference.")
        except ImportError:
            print("librosa not installed, skipping reference timings.")

    signals = [(d, make_signal(d)) for d in args.durations]

    print(f"\nstftkit (iterations={args.iterations}, warmup={args.warmup}):")
    sk_results = run_suite("stftkit", stftkit_operations(sk), signals,
                           args.iterations, args.warmup)

    lr_results = None
    if lr is not None:
        print(f"\nlibrosa (iterations={args.iterations}, warmup={args.warmup}):")
        lr_results = run_suite("librosa", librosa_operations(lr), signals,
                               args.iterations, args.warmup)

    out_path = write_report(sk, sk_results, lr_results)
    print(f"\nResults written to {out_path}")
    print_summary(sk_results, lr_results)

    if args.compare:
        compare_results(sk_results, args.compare)

    return str(out_path)


if __name__ == "__main__":
    main()
