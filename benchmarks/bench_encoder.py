#!/usr/bin/env python3
"""
Benchmark: DDP frame encoding and loopback sending

Measures per-frame latency and throughput for:
  1. Encoding only (headers + payload copies into one reused packet buffer)
  2. Full send_rgb_frame() to a UDP sink on 127.0.0.1

Usage:
  $ python benchmarks/bench_encoder.py --runs 1000 --pixels 170 512 2048
"""
from __future__ import annotations

import argparse
import socket
import time
from contextlib import closing
from statistics import quantiles

import numpy as np
from rich import box
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from ddp import (
    BYTES_PER_PIXEL_RGB,
    HEADER_LENGTH,
    ID_DISPLAY,
    TYPE_RGB_8BIT,
    Client,
    encode_header,
    iter_fragments,
)


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------
def open_sink() -> socket.socket:
    sink = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sink.bind(("127.0.0.1", 0))
    return sink


def random_frame(pixel_count: int) -> np.ndarray:
    return np.random.randint(0, 256, size=(pixel_count, BYTES_PER_PIXEL_RGB), dtype=np.uint8)


# ---------------------------------------------------------------------------
# Benchmarks
# ---------------------------------------------------------------------------
def bench_encode(pixels: np.ndarray, runs: int) -> list[float]:
    packet = memoryview(Client.new_packet_buffer())
    source = memoryview(pixels).cast("B")
    latencies = []
    for _ in tqdm(range(runs), desc=f"encode {len(pixels)} px"):
        t0 = time.perf_counter()
        for fragment in iter_fragments(len(source)):
            encode_header(packet, fragment.offset, fragment.length, fragment.last, TYPE_RGB_8BIT, ID_DISPLAY)
            packet[HEADER_LENGTH : HEADER_LENGTH + fragment.length] = source[
                fragment.offset : fragment.offset + fragment.length
            ]
        latencies.append(time.perf_counter() - t0)
    return latencies


def bench_send(pixels: np.ndarray, runs: int) -> list[float]:
    packet_buffer = Client.new_packet_buffer()
    latencies = []
    with closing(open_sink()) as sink, Client("127.0.0.1", sink.getsockname()[1]) as client:
        for _ in tqdm(range(runs), desc=f"send {len(pixels)} px"):
            t0 = time.perf_counter()
            client.send_rgb_frame(pixels, len(pixels), packet_buffer)
            latencies.append(time.perf_counter() - t0)
    return latencies


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------
UNITS = {
    "s": 1,
    "ms": 1e3,
    "us": 1e6,
    "ns": 1e9,
}


def summarise(latencies: list[float], size_bytes: int, packets: int, unit: str = "us") -> dict[str, float]:
    if len(latencies) < 2:
        return {"p50": float("nan"), "p95": float("nan"), "p99": float("nan"), "thr": 0.0, "pps": 0.0}
    lat = [t * UNITS[unit] for t in latencies]
    cuts = quantiles(lat, n=100)
    p50, p95, p99 = cuts[49], cuts[94], cuts[98]
    total = sum(latencies)
    throughput = (size_bytes * len(latencies)) / total / (2**20)  # MiB/s
    pps = packets * len(latencies) / total
    return {"p50": p50, "p95": p95, "p99": p99, "thr": throughput, "pps": pps}


def print_table(results: dict[str, dict[str, float]], unit: str = "us"):
    console = Console()
    table = Table(title="DDP Frame Benchmark Results", box=box.SIMPLE_HEAVY)
    table.add_column("Case")
    table.add_column(f"p50 ({unit}, ↓)")
    table.add_column(f"p95 ({unit}, ↓)")
    table.add_column(f"p99 ({unit}, ↓)")
    table.add_column("Throughput (MiB/s, ↑)")
    table.add_column("Packets/s (↑)")
    for k, v in results.items():
        table.add_row(
            k,
            f"{v['p50']:.2f}",
            f"{v['p95']:.2f}",
            f"{v['p99']:.2f}",
            f"{v['thr']:.1f}",
            f"{v['pps']:.0f}",
        )
    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Benchmark DDP frame encoding and sending")
    parser.add_argument("--runs", type=int, default=500, help="Frames per case")
    parser.add_argument("--pixels", type=int, nargs="+", default=[170, 480, 2048], help="Strip sizes to test")
    parser.add_argument("--unit", choices=list(UNITS), default="us", help="Latency unit")
    return parser


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)

    results = {}
    for pixel_count in args.pixels:
        pixels = random_frame(pixel_count)
        size = pixels.nbytes
        packets = sum(1 for _ in iter_fragments(size))

        results[f"encode {pixel_count} px"] = summarise(bench_encode(pixels, args.runs), size, packets, args.unit)
        results[f"send {pixel_count} px"] = summarise(bench_send(pixels, args.runs), size, packets, args.unit)

    print_table(results, args.unit)


if __name__ == "__main__":
    main()
