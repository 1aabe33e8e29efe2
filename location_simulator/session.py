"""
Location Simulation Session

Author: Colin Bitterfield
Email: colin@bitterfield.com
Date Created: 2026-10-18
Date Updated: 2026-10-18
Version: 0.1.0

Binds one connection to the location simulation service and sends
set/reset messages over it.
"""

import logging
from typing import Optional

from location_simulator.connection import Connection, Device
from location_simulator.errors import (ServiceConnectionError, SimLocationError,
                                       TransportError)
from location_simulator.protocol import (SERVICE_NAME, GeoPoint, LocationCodec,
                                         Reset, SetLocation)

logger = logging.getLogger(__name__)


class LocationSession:
    """
    Location simulation session

    Owns exactly one connection for its lifetime. Once closed the
    session cannot be reused.
    """

    def __init__(self, connection: Connection, service_name: str = SERVICE_NAME):
        self.connection: Optional[Connection] = connection
        self.service_name = service_name

    @classmethod
    def open(cls, device: Device) -> 'LocationSession':
        """
        Connect to the location simulation service on a device.

        Raises:
            ServiceConnectionError: device unreachable or service unavailable
        """
        try:
            connection = device.open(SERVICE_NAME)
        except SimLocationError:
            raise
        except OSError as e:
            raise ServiceConnectionError(f"Failed to open {SERVICE_NAME}: {e}") from e

        logger.debug(f"Location session opened on {SERVICE_NAME}")
        return cls(connection)

    @property
    def closed(self) -> bool:
        return self.connection is None

    def set_location(self, latitude: str, longitude: str) -> GeoPoint:
        """
        Simulate the device location at a point.

        Args:
            latitude: Decimal latitude text
            longitude: Decimal longitude text

        Returns:
            The point that was sent
        """
        self._ensure_open()
        point = GeoPoint.parse(latitude, longitude)

        logger.info(
            f"Simulating device location: {point.latitude}, {point.longitude}",
            extra={'latitude': point.latitude, 'longitude': point.longitude}
        )

        self._send(LocationCodec.encode(SetLocation.from_point(point)))
        return point

    def reset(self) -> None:
        """Stop simulating and restore the real device location"""
        self._ensure_open()
        self._send(LocationCodec.encode(Reset()))
        logger.info("Device location reset")

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        if self.connection is None:
            return

        try:
            self.connection.close()
        except (OSError, SimLocationError) as e:
            logger.warning(f"Error closing {self.service_name} connection: {e}")
        finally:
            self.connection = None

    def _ensure_open(self):
        if self.connection is None:
            raise ServiceConnectionError(f"Session for {self.service_name} is closed")

    def _send(self, data: bytes):
        try:
            self.connection.send(data)
        except TransportError:
            raise
        except OSError as e:
            raise TransportError(f"Error sending location message: {e}") from e

    def __enter__(self) -> 'LocationSession':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def set_location(device: Device, latitude: str, longitude: str) -> GeoPoint:
    """
    Set the device location to a point by latitude and longitude.

    Inputs are validated before any connection is opened.
    """
    GeoPoint.parse(latitude, longitude)

    with LocationSession.open(device) as session:
        return session.set_location(latitude, longitude)


def reset_location(device: Device) -> None:
    """Reset the device to its real location"""
    with LocationSession.open(device) as session:
        session.reset()
