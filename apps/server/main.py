from __future__ import annotations

import argparse
from dataclasses import replace

from dotenv import load_dotenv

from camtcp.camera.errors import DeviceOpenFailure
from camtcp.camera.gate import CaptureGate, build_gate
from camtcp.config import BACKENDS, ServerConfig, get_server_config
from camtcp.logging.logger import get_logger, set_log_level
from camtcp.net.address import get_local_ipv4_address
from camtcp.net.errors import ListenerBindError
from camtcp.net.listener import Listener

EXIT_DEVICE_OPEN_FAILED = 1
EXIT_BIND_FAILED = 2


def _apply_overrides(config: ServerConfig, args: argparse.Namespace) -> ServerConfig:
    overrides = {
        "host": args.host,
        "port": args.port,
        "device_index": args.device_index,
        "backend": args.backend,
        "log_level": args.log_level,
    }
    return replace(config, **{key: value for key, value in overrides.items() if value is not None})


def serve(config: ServerConfig, gate: CaptureGate | None = None) -> int:
    logger = get_logger()
    gate = gate or build_gate(config)
    try:
        gate.open(config.device_index)
    except DeviceOpenFailure as exc:
        logger.error("No camera detected or camera cannot be accessed: %s", exc)
        return EXIT_DEVICE_OPEN_FAILED
    logger.info("Camera detected and accessible (backend=%s).", gate.source.name)

    try:
        logger.info("Local IPv4 Address: %s", get_local_ipv4_address())
        listener = Listener(
            config.host,
            config.port,
            gate,
            recv_buffer_size=config.recv_buffer_size,
            backlog=config.backlog,
        )
        try:
            listener.bind()
        except ListenerBindError as exc:
            logger.error("%s", exc)
            return EXIT_BIND_FAILED
        try:
            listener.serve_forever()
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down.")
        finally:
            listener.stop()
        return 0
    finally:
        gate.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Serve single-frame captures over TCP")
    parser.add_argument("--host", default=None, help="IPv4 address to bind (CAMTCP_HOST)")
    parser.add_argument("--port", type=int, default=None, help="TCP port (CAMTCP_PORT)")
    parser.add_argument("--device-index", type=int, default=None, help="Camera index (CAMTCP_DEVICE_INDEX)")
    parser.add_argument("--backend", choices=sorted(BACKENDS), default=None, help="Capture backend (CAMTCP_BACKEND)")
    parser.add_argument("--log-level", default=None, help="Logging level (CAMTCP_LOG_LEVEL)")
    parser.add_argument("--env-file", default=".env", help="dotenv file loaded before reading the environment")
    args = parser.parse_args(argv)

    load_dotenv(dotenv_path=args.env_file, override=False)
    config = _apply_overrides(get_server_config(), args)
    set_log_level(config.log_level)
    return serve(config)


if __name__ == "__main__":
    raise SystemExit(main())
