"""
Location Simulation Message Encoder

Author: Colin Bitterfield
Email: colin@bitterfield.com
Date Created: 2026-10-18
Date Updated: 2026-10-18
Version: 0.1.0

Encodes set-location and reset-location messages for the
device location simulation service.
"""

import math
import re
import struct
from dataclasses import dataclass
from typing import Union

from location_simulator.errors import EncodingError, ValidationError

# Name of the device service that accepts these messages
SERVICE_NAME = "com.apple.dt.simulatelocation"

# Plain decimal or exponent notation, no whitespace
_DECIMAL_RE = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$')


def parse_coordinate(value: str, name: str = 'coordinate') -> float:
    """
    Parse a decimal coordinate string.

    Args:
        value: Decimal text, e.g. '37.331677'
        name: Field name used in error messages

    Returns:
        Parsed value as float

    Raises:
        ValidationError: empty, non-numeric or non-finite input
    """
    if value is None or value == '':
        raise ValidationError(
            "Please provide non-empty values for latitude and longitude",
            details={'field': name}
        )

    if not isinstance(value, str) or not _DECIMAL_RE.match(value):
        raise ValidationError(f"Invalid {name}: {value!r}", details={'field': name})

    number = float(value)
    if not math.isfinite(number):
        raise ValidationError(f"Invalid {name}: {value!r}", details={'field': name})
    return number


def format_coordinate(value: float) -> str:
    """Fixed-point text with exactly six fractional digits (printf %f)"""
    return "%f" % value


@dataclass(frozen=True)
class GeoPoint:
    """Geographic point, degrees. No range clamping is applied."""
    latitude: float
    longitude: float

    @classmethod
    def parse(cls, latitude: str, longitude: str) -> 'GeoPoint':
        return cls(
            latitude=parse_coordinate(latitude, 'latitude'),
            longitude=parse_coordinate(longitude, 'longitude'),
        )


@dataclass(frozen=True)
class SetLocation:
    """Set the simulated location"""
    latitude: float
    longitude: float

    TAG = 0

    @classmethod
    def from_point(cls, point: GeoPoint) -> 'SetLocation':
        return cls(latitude=point.latitude, longitude=point.longitude)


@dataclass(frozen=True)
class Reset:
    """Stop simulating and return to the real location"""

    TAG = 1


LocationMessage = Union[SetLocation, Reset]


class LocationCodec:
    """
    Location simulation wire format (big-endian)

    SetLocation:
    - Tag (uint32) = 0
    - Latitude length (uint32)
    - Latitude text (ASCII, %f)
    - Longitude length (uint32)
    - Longitude text (ASCII, %f)

    Reset:
    - Tag (uint32) = 1
    """

    @staticmethod
    def encode(message: LocationMessage) -> bytes:
        """
        Encode a location message.

        Returns: Raw message bytes
        """
        if isinstance(message, Reset):
            return LocationCodec.encode_reset()
        if isinstance(message, SetLocation):
            return LocationCodec.encode_set_location(message)
        raise EncodingError(f"Unsupported message type: {type(message).__name__}")

    @staticmethod
    def encode_set_location(message: SetLocation) -> bytes:
        try:
            data = bytearray()

            # Message tag
            data.extend(struct.pack('>I', SetLocation.TAG))

            # Latitude, length-prefixed text
            lat_bytes = format_coordinate(message.latitude).encode('ascii')
            data.extend(struct.pack('>I', len(lat_bytes)))
            data.extend(lat_bytes)

            # Longitude, length-prefixed text
            lon_bytes = format_coordinate(message.longitude).encode('ascii')
            data.extend(struct.pack('>I', len(lon_bytes)))
            data.extend(lon_bytes)

            return bytes(data)
        except (struct.error, TypeError, UnicodeEncodeError, MemoryError) as e:
            raise EncodingError(f"creating location bytes: {e}") from e

    @staticmethod
    def encode_reset() -> bytes:
        return struct.pack('>I', Reset.TAG)
