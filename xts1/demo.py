"""Repeatedly sample the sensor and print statistics of each batch."""

from __future__ import annotations

import argparse
import math
import statistics
import sys
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .protocol import describe_distance_error
from .sensor import XTS1

DATASET = 50
SAMPLE_INTERVAL = 0.02


@dataclass(frozen=True)
class Summary:
    minimum: int
    maximum: int
    mean: float
    variance: float
    standard_deviation: float


def summarize(samples: Sequence[int]) -> Summary:
    """Compute min, max, mean and Bessel-corrected variance of the samples."""
    if len(samples) < 2:
        raise ValueError("at least two samples are needed")
    mean = statistics.fmean(samples)
    variance = sum((x - mean) ** 2 for x in samples) / (len(samples) - 1)
    return Summary(
        minimum=min(samples),
        maximum=max(samples),
        mean=mean,
        variance=variance,
        standard_deviation=math.sqrt(variance),
    )


def collect_samples(sensor, count: int = DATASET, interval: float = SAMPLE_INTERVAL,
                    report: Optional[Callable[[str], None]] = None) -> list[int]:
    """Take count valid distances, retrying readings below 1 mm.

    Negative readings are passed to report as diagnostic messages.
    """
    samples = []
    for _ in range(count):
        value = 0
        while value < 1:
            value = sensor.measure_distance()
            if value < 0 and report is not None:
                report(describe_distance_error(value))
        samples.append(value)
        time.sleep(interval)
    return samples


def format_summary(summary: Summary) -> str:
    return (
        f" minimum = {summary.minimum:5d} \n"
        f" maximum = {summary.maximum:5d} \n"
        f" mean = {summary.mean:f} \n"
        f" variance = {summary.variance:f} \n"
        f" standard deviation = {summary.standard_deviation:f} \n"
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Sample an XT-S1 sensor and print statistics.")
    parser.add_argument("port", help="serial port the sensor is attached to")
    parser.add_argument("--samples", type=int, default=DATASET, help="samples per batch")
    parser.add_argument("--interval", type=float, default=SAMPLE_INTERVAL,
                        help="seconds between samples")
    parser.add_argument("--rounds", type=int, default=None,
                        help="number of batches (default: run until interrupted)")
    args = parser.parse_args(argv)
    if args.samples < 2:
        parser.error("--samples must be at least 2")

    with XTS1.from_port(args.port) as sensor:
        sensor.setup()
        print()
        done = 0
        try:
            while args.rounds is None or done < args.rounds:
                print("starting measurements.")
                samples = collect_samples(
                    sensor, args.samples, args.interval,
                    report=lambda message: print(f"  --> {message}"),
                )
                print(format_summary(summarize(samples)))
                done += 1
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())