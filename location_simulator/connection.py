"""
Device Service Connections

Author: Colin Bitterfield
Email: colin@bitterfield.com
Date Created: 2026-10-18
Date Updated: 2026-10-18
Version: 0.1.0

Provides connections to named device services.
A device is anything that can open a service by name and hand back
a connection that sends whole messages.
"""

import socket
import logging
from typing import Dict, Optional, Protocol

from location_simulator.errors import ServiceConnectionError, TransportError
from location_simulator.protocol import SERVICE_NAME

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Message-framed byte stream to one device service"""

    def send(self, data: bytes) -> None:
        ...

    def close(self) -> None:
        ...


class Device(Protocol):
    """Opens named services on a device"""

    def open(self, service_name: str) -> Connection:
        ...


class TCPConnection:
    """
    Device service connection over TCP

    Each send writes one complete message. A failed write leaves the
    message unsent as far as the caller is concerned; no partial retry
    is attempted.
    """

    def __init__(self, sock: socket.socket, service_name: str):
        self.sock: Optional[socket.socket] = sock
        self.service_name = service_name

    def send(self, data: bytes) -> None:
        if self.sock is None:
            raise TransportError(f"Connection to {self.service_name} is closed")

        try:
            self.sock.sendall(data)
            logger.debug(f"Sent {len(data)} bytes to {self.service_name}")
        except OSError as e:
            raise TransportError(f"Error sending to {self.service_name}: {e}") from e

    def close(self) -> None:
        """Close the socket"""
        if self.sock:
            try:
                self.sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                # Peer may already be gone
                pass
            finally:
                self.sock.close()
                self.sock = None
                logger.debug(f"Connection to {self.service_name} closed")


class TCPDevice:
    """
    Device whose services are exposed on TCP ports

    Typically a relay (e.g. a USB port forwarder) listening on localhost
    and forwarding each port to one service on the device.
    """

    DEFAULT_PORT = 9191

    def __init__(
        self,
        host: str = '127.0.0.1',
        ports: Optional[Dict[str, int]] = None,
        timeout: Optional[float] = 5.0
    ):
        """
        Initialize TCP device.

        Args:
            host: Host exposing the device services
            ports: Service name to TCP port map
            timeout: Connect timeout in seconds (None blocks)
        """
        self.host = host
        self.ports = ports if ports is not None else {SERVICE_NAME: self.DEFAULT_PORT}
        self.timeout = timeout

    def open(self, service_name: str) -> TCPConnection:
        """
        Connect to a device service.

        Raises:
            ServiceConnectionError: unknown service or connection refused
        """
        port = self.ports.get(service_name)
        if port is None:
            raise ServiceConnectionError(
                f"Service {service_name} is not exposed by {self.host}",
                details={'service': service_name}
            )

        try:
            sock = socket.create_connection((self.host, port), timeout=self.timeout)
            # Sends block until written once connected
            sock.settimeout(None)
        except OSError as e:
            raise ServiceConnectionError(
                f"Failed to connect to {service_name} on {self.host}:{port}: {e}",
                details={'service': service_name, 'host': self.host, 'port': port}
            ) from e

        logger.info(f"Connected to {service_name} on {self.host}:{port}")
        return TCPConnection(sock, service_name)

    def get_status(self) -> dict:
        """Get device configuration"""
        return {
            'type': 'tcp',
            'host': self.host,
            'ports': dict(self.ports),
            'timeout': self.timeout
        }
