"""
Location Simulator Configuration

Author: Colin Bitterfield
Email: colin@bitterfield.com
Date Created: 2026-10-18
Date Updated: 2026-10-18
Version: 0.1.0

Settings are read from environment variables.
"""

import os

from location_simulator.connection import TCPDevice
from location_simulator.protocol import SERVICE_NAME


def _env_bool(name: str, default: str = 'false') -> bool:
    return os.environ.get(name, default).lower() == 'true'


class SimulatorConfig:
    def __init__(self):
        # Device relay exposing the location service
        self.device_host = os.environ.get('DEVICE_HOST', '127.0.0.1')
        self.device_port = int(os.environ.get('DEVICE_PORT', TCPDevice.DEFAULT_PORT))
        timeout = os.environ.get('DEVICE_CONNECT_TIMEOUT', '5.0')
        self.device_connect_timeout = float(timeout) if timeout else None

        # Web interface
        self.host = os.environ.get('HOST', '0.0.0.0')
        self.port = int(os.environ.get('PORT', 8081))
        self.debug = _env_bool('DEBUG')
        self.secret_key = os.environ.get('SECRET_KEY', 'location-simulator-dev-key')
        self.max_upload_bytes = int(os.environ.get('MAX_UPLOAD_BYTES', 16 * 1024 * 1024))

    def build_device(self) -> TCPDevice:
        return TCPDevice(
            host=self.device_host,
            ports={SERVICE_NAME: self.device_port},
            timeout=self.device_connect_timeout
        )
