import argparse
import logging
import sys
from typing import Optional

from flask import Flask
from werkzeug.serving import BaseWSGIServer, make_server

from .config import Settings, resolve_base_port, resolve_port_attempts
from .errors import ExhaustedPortsError
from .platforms import detect
from .ports import bind_first_available, candidate_ports, listen_socket
from .server import create_app

logger = logging.getLogger("samsara_hub")


def bind_server(app: Flask, settings: Settings) -> BaseWSGIServer:
    """Bind the first free candidate port and wrap it in a threaded WSGI server.

    The socket is bound here rather than by werkzeug so that "address in use"
    can be told apart from other bind errors and the next port tried.
    """
    candidates = candidate_ports(settings.base_port, settings.port_attempts)
    port, sock = bind_first_available(candidates, lambda p: listen_socket(settings.host, p))
    try:
        # werkzeug dups the descriptor
        return make_server(settings.host, port, app, threaded=True, fd=sock.fileno())
    finally:
        sock.close()


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="samsara-hub", description="Local host dashboard and control API")
    parser.add_argument("--host", help="Address to listen on (default from SAMSARA_HOST or 127.0.0.1)")
    parser.add_argument("-p", "--port", type=int, help="First port to try (default from SAMSARA_PORT/PORT or 3000)")
    parser.add_argument("--port-attempts", type=int, help="How many consecutive ports to try (default 5, max 50)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Reduce startup/log output (silent stdout; suppress Werkzeug logs)")
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.WARNING if args.quiet else logging.INFO)
    if args.quiet:
        logging.getLogger("werkzeug").setLevel(logging.ERROR)

    # CLI takes precedence over env
    settings = Settings.from_env()
    if args.host:
        settings.host = args.host
    if args.port is not None:
        settings.base_port = resolve_base_port(args.port)
    if args.port_attempts is not None:
        settings.port_attempts = resolve_port_attempts(args.port_attempts)

    profile = detect()
    app = create_app(profile=profile, settings=settings)

    try:
        server = bind_server(app, settings)
    except ExhaustedPortsError as e:
        sys.stderr.write(f"samsara-hub: {e}\n")
        return 1
    except OSError as e:
        sys.stderr.write(f"samsara-hub: failed to bind {settings.host}: {e}\n")
        return 1

    if not args.quiet:
        print(f"Samsara Hub running on {profile.platform.value} at http://{settings.host}:{server.port}/")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
