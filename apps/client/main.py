from __future__ import annotations

import argparse
import os
from pathlib import Path

from camtcp.client import PhotoClient
from camtcp.config import DEFAULT_PORT
from camtcp.logging.logger import get_logger
from camtcp.net.errors import NetworkError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Request photos from a capture server")
    parser.add_argument("host", help="Server IPv4 address")
    parser.add_argument("--port", type=int, default=int(os.getenv("CAMTCP_PORT", str(DEFAULT_PORT))))
    parser.add_argument("--count", type=int, default=1, help="Number of photos to request")
    parser.add_argument("--timeout", type=float, default=10.0, help="Seconds to wait for each photo")
    parser.add_argument("--output-dir", default=".", help="Directory for photo_<n>.jpg files")
    args = parser.parse_args(argv)

    logger = get_logger()
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    failures = 0
    try:
        with PhotoClient(args.host, args.port, timeout=args.timeout) as client:
            for index in range(args.count):
                try:
                    payload = client.take_photo()
                except TimeoutError:
                    # the stream may now be out of step; stop rather than misread a late frame
                    logger.error("No photo received within %.1fs", args.timeout)
                    failures += 1
                    break
                path = output_dir / f"photo_{index}.jpg"
                path.write_bytes(payload)
                print(path)
    except (OSError, NetworkError) as exc:
        logger.error("Connection to %s:%s failed: %s", args.host, args.port, exc)
        return 1
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
