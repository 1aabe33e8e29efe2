"""Fake device and connection so tests never touch the network."""

import pytest

from location_simulator.errors import ServiceConnectionError


class FakeConnection:
    def __init__(self, fail_send=False):
        self.sent = []
        self.closed = False
        self.fail_send = fail_send

    def send(self, data):
        if self.fail_send:
            raise OSError("broken pipe")
        self.sent.append(bytes(data))

    def close(self):
        self.closed = True


class FakeDevice:
    def __init__(self, fail_open=False, fail_send=False):
        self.fail_open = fail_open
        self.fail_send = fail_send
        self.connections = []
        self.opened_services = []

    def open(self, service_name):
        self.opened_services.append(service_name)
        if self.fail_open:
            raise ServiceConnectionError("device unreachable")
        conn = FakeConnection(fail_send=self.fail_send)
        self.connections.append(conn)
        return conn

    @property
    def sent(self):
        return [data for conn in self.connections for data in conn.sent]


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def device():
    return FakeDevice()


@pytest.fixture
def sleeper():
    return SleepRecorder()


def make_gpx(*times, namespace="http://www.topografix.com/GPX/1/1"):
    """Single-track GPX with one point per time, at increasing latitudes."""
    points = "\n".join(
        f'<trkpt lat="{37.0 + i / 10:.1f}" lon="-122.0"><time>{t}</time></trkpt>'
        for i, t in enumerate(times)
    )
    xmlns = f' xmlns="{namespace}"' if namespace else ""
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<gpx version="1.1" creator="tests"{xmlns}>\n'
        f"<trk><name>Test Track</name><trkseg>\n{points}\n</trkseg></trk>\n"
        f"</gpx>\n"
    )
