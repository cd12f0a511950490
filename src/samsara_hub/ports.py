"""
Listening-port selection with fallback.

The server tries a short run of consecutive ports and takes the first one
that is free. Only "address already in use" moves on to the next candidate;
any other bind failure is raised as-is.
"""
from __future__ import annotations

import errno
import logging
import socket
from typing import Callable, Iterable, List, Tuple, TypeVar

from .errors import ExhaustedPortsError

logger = logging.getLogger(__name__)

DEFAULT_BASE_PORT = 3000
DEFAULT_PORT_ATTEMPTS = 5
MAX_PORT_ATTEMPTS = 50

T = TypeVar("T")


def candidate_ports(base: int = DEFAULT_BASE_PORT, attempts: int = DEFAULT_PORT_ATTEMPTS) -> List[int]:
    attempts = max(1, min(attempts, MAX_PORT_ATTEMPTS))
    return [port for port in range(base, base + attempts) if port <= 65535]


def is_address_in_use(error: BaseException) -> bool:
    return isinstance(error, OSError) and error.errno == errno.EADDRINUSE


def bind_first_available(candidates: Iterable[int], bind: Callable[[int], T]) -> Tuple[int, T]:
    """Call `bind(port)` for each candidate until one succeeds; return (port, result)."""
    tried = []
    for port in candidates:
        tried.append(port)
        try:
            return port, bind(port)
        except OSError as e:
            if not is_address_in_use(e):
                raise
            logger.info("Port %d is in use, trying the next one", port)
    raise ExhaustedPortsError(tried)


def listen_socket(host: str, port: int, backlog: int = 128) -> socket.socket:
    """Bind and listen on (host, port); the socket is closed again if either step fails."""
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(backlog)
    except BaseException:
        sock.close()
        raise
    return sock
