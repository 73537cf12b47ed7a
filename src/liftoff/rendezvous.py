"""Rendezvous: attach to a one-off process and stream its output until it exits."""

from __future__ import annotations

import codecs
import socket
import ssl
import sys
from typing import Callable, Optional, Protocol, TextIO, Tuple, runtime_checkable
from urllib.parse import urlsplit

import structlog

from liftoff.core.config import Settings
from liftoff.core.exceptions import RendezvousError

logger = structlog.get_logger()

HANDSHAKE = b"rendezvous"
CHUNK_SIZE = 4096


@runtime_checkable
class Rendezvous(Protocol):
    """Blocks until the remote session behind ``url`` ends."""

    def start(self, *, url: str) -> None: ...


def parse_rendezvous_url(url: str) -> Tuple[str, int, str]:
    """Split ``rendezvous://host:port/secret`` into (host, port, secret)."""
    parts = urlsplit(url)
    if parts.scheme != "rendezvous":
        raise RendezvousError(f"Unsupported rendezvous URL scheme: {parts.scheme!r}")
    try:
        port = parts.port
    except ValueError as e:
        raise RendezvousError(f"Invalid rendezvous port in {url!r}") from e
    secret = parts.path.lstrip("/")
    if not parts.hostname or port is None or not secret:
        raise RendezvousError(f"Invalid rendezvous URL: {url!r}")
    return parts.hostname, port, secret


class TlsRendezvous:
    """Connects to a Heroku rendezvous endpoint over TLS.

    The protocol: send the secret followed by CRLF, receive a ``rendezvous``
    handshake line, then raw process output until the server closes.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        output: Optional[TextIO] = None,
        connector: Optional[Callable[[str, int], socket.socket]] = None,
    ):
        self.settings = settings or Settings()
        self.output = output
        self._connector = connector or self._connect_tls

    def _connect_tls(self, host: str, port: int) -> socket.socket:
        raw = socket.create_connection(
            (host, port), timeout=self.settings.rendezvous_connect_timeout_seconds
        )
        context = ssl.create_default_context()
        try:
            return context.wrap_socket(raw, server_hostname=host)
        except OSError:
            raw.close()
            raise

    def start(self, *, url: str) -> None:
        host, port, secret = parse_rendezvous_url(url)
        logger.info("Attaching to rendezvous", host=host, port=port)

        conn = self._connector(host, port)
        try:
            conn.settimeout(self.settings.rendezvous_activity_timeout_seconds)
            conn.sendall(secret.encode("utf-8") + b"\r\n")
            total = self._pump(conn)
        finally:
            conn.close()

        logger.info("Rendezvous session closed", host=host, bytes=total)

    def _pump(self, conn: socket.socket) -> int:
        """Copy the session to the output stream; returns bytes received."""
        out = self.output if self.output is not None else sys.stdout
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        pending = b""
        handshake_seen = False
        total = 0

        while True:
            try:
                chunk = conn.recv(CHUNK_SIZE)
            except socket.timeout as e:
                raise RendezvousError(
                    "Rendezvous session timed out waiting for output", code="rendezvous_timeout"
                ) from e
            if not chunk:
                break
            total += len(chunk)

            if not handshake_seen:
                pending += chunk
                if b"\n" not in pending:
                    continue
                line, _, rest = pending.partition(b"\n")
                chunk = rest if line.strip() == HANDSHAKE else pending
                pending = b""
                handshake_seen = True
                if not chunk:
                    continue

            out.write(decoder.decode(chunk))
            out.flush()

        # Server closed before a full first line
        if pending and pending.strip() != HANDSHAKE:
            out.write(decoder.decode(pending))
        out.write(decoder.decode(b"", final=True))
        out.flush()
        return total
