#!/usr/bin/env python3
"""Send a moving test pattern to a DDP device.

Usage:
  $ python -m ddp.demo 192.168.1.50 --pixels 300 --fps 30 --seconds 10
"""

import argparse
import logging
import time

from . import DEFAULT_PORT, BYTES_PER_PIXEL_RGB, Client, DdpError, encode_rgb_pixel

COLORS = (0xFF0000, 0x00FF00, 0x0000FF, 0xFFFFFF)


def render_chase(frame: bytearray, pixel_count: int, step: int, tail: int = 8) -> None:
    """Draw a coloured dot with a dark tail moving along the strip."""
    color = COLORS[(step // pixel_count) % len(COLORS)]
    head = step % pixel_count
    for i in range(pixel_count):
        distance = (head - i) % pixel_count
        encode_rgb_pixel(frame, i * BYTES_PER_PIXEL_RGB, color if distance < tail else 0)


def run_demo(host: str, port: int, pixel_count: int, fps: float, seconds: float) -> int:
    """Stream the chase pattern and return the number of frames sent."""
    frame = bytearray(pixel_count * BYTES_PER_PIXEL_RGB)
    packet_buffer = Client.new_packet_buffer()
    interval = 1.0 / fps
    frames = 0

    with Client(host, port) as client:
        logging.info("Streaming %d pixels to %s at %.1f fps", pixel_count, client.destination, fps)
        deadline = time.monotonic() + seconds
        while time.monotonic() < deadline:
            started = time.monotonic()
            render_chase(frame, pixel_count, frames)
            client.send_rgb_frame(frame, pixel_count, packet_buffer)
            frames += 1
            time.sleep(max(0.0, interval - (time.monotonic() - started)))

    logging.info("Sent %d frames", frames)
    return frames


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the demo."""
    parser = argparse.ArgumentParser(description="Send a DDP test pattern")
    parser.add_argument("host", help="Device hostname or IP address")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Device UDP port")
    parser.add_argument("--pixels", type=int, default=150, help="Number of RGB pixels")
    parser.add_argument("--fps", type=float, default=30.0, help="Frames per second")
    parser.add_argument("--seconds", type=float, default=5.0, help="How long to stream")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(message)s")

    if args.pixels < 1 or args.fps <= 0:
        parser.error("--pixels and --fps must be positive")

    try:
        run_demo(args.host, args.port, args.pixels, args.fps, args.seconds)
    except DdpError as exc:
        logging.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
