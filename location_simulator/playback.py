"""
GPX Playback Scheduler

Author: Colin Bitterfield
Email: colin@bitterfield.com
Date Created: 2026-10-18
Date Updated: 2026-10-18
Version: 0.1.0

Replays timestamped waypoints as location updates, waiting between
points for the time that elapsed in the original recording.
"""

import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Iterable, Optional

from location_simulator.connection import Device
from location_simulator.errors import PlaybackCancelled, ValidationError
from location_simulator.gpx import Waypoint
from location_simulator.protocol import GeoPoint
from location_simulator.session import LocationSession

logger = logging.getLogger(__name__)

PointCallback = Callable[[int, Waypoint, GeoPoint], None]


class PlaybackState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


EPOCH_UTC = datetime(1970, 1, 1, tzinfo=timezone.utc)


def whole_seconds(timestamp: datetime) -> int:
    """Unix time of a timestamp, floored to whole seconds"""
    # timedelta keeps seconds in [0, 86400), so this is an exact floor
    delta = timestamp - EPOCH_UTC
    return delta.days * 86400 + delta.seconds


class PlaybackScheduler:
    """
    Real-time paced waypoint playback

    For each waypoint:
    - First point is sent immediately
    - Later points wait (this time - previous time) whole seconds,
      sub-second differences are dropped
    - Zero or negative differences send immediately

    Any error aborts the remaining points and is raised to the caller.
    """

    def __init__(
        self,
        session: LocationSession,
        sleep: Optional[Callable[[float], None]] = None,
        cancel_event: Optional[threading.Event] = None,
        on_point: Optional[PointCallback] = None
    ):
        """
        Initialize scheduler.

        Args:
            session: Open location session to send through
            sleep: Wait strategy, defaults to an interruptible wait on cancel_event
            cancel_event: Set to stop playback while waiting or before the next send
            on_point: Called after each point is sent
        """
        self.session = session
        self.sleep = sleep
        self.cancel_event = cancel_event or threading.Event()
        self.on_point = on_point
        self.state = PlaybackState.IDLE
        self.points_sent = 0

    def cancel(self):
        """Request playback to stop"""
        self.cancel_event.set()

    def run(self, waypoints: Iterable[Waypoint]) -> int:
        """
        Play waypoints in order.

        Returns:
            Number of points sent

        Raises:
            ValidationError: a point's time or coordinates could not be parsed
            PlaybackCancelled: cancel_event was set
            SimLocationError: the session failed to send
        """
        if self.state != PlaybackState.IDLE:
            raise RuntimeError(f"Playback already {self.state.value}")

        self.state = PlaybackState.RUNNING
        logger.info("Playback started")

        try:
            self._play(waypoints)
        except PlaybackCancelled:
            self.state = PlaybackState.CANCELLED
            logger.info(f"Playback cancelled after {self.points_sent} points")
            raise
        except Exception as e:
            self.state = PlaybackState.FAILED
            logger.error(f"Playback failed after {self.points_sent} points: {e}")
            raise

        self.state = PlaybackState.COMPLETED
        logger.info(f"Playback completed: {self.points_sent} points")
        return self.points_sent

    def _play(self, waypoints: Iterable[Waypoint]):
        last_seconds = None

        for index, waypoint in enumerate(waypoints):
            if last_seconds is None:
                # No previous point, an unreadable time only delays the check
                try:
                    current_seconds = whole_seconds(waypoint.timestamp)
                except ValidationError as e:
                    logger.debug(f"Point {index}: {e}")
                    current_seconds = None
            else:
                current_seconds = whole_seconds(waypoint.timestamp)
                delta = current_seconds - last_seconds
                if delta > 0:
                    logger.debug(f"Waiting {delta}s before point {index}")
                    self._suspend(delta)

            last_seconds = current_seconds

            self._check_cancelled()
            point = self.session.set_location(waypoint.latitude, waypoint.longitude)
            self.points_sent += 1

            if self.on_point:
                self.on_point(index, waypoint, point)

    def _suspend(self, seconds: int):
        self._check_cancelled()
        if self.sleep is not None:
            self.sleep(seconds)
        else:
            self.cancel_event.wait(seconds)
        self._check_cancelled()

    def _check_cancelled(self):
        if self.cancel_event.is_set():
            raise PlaybackCancelled("Playback cancelled")


def playback(
    device: Device,
    source,
    sleep: Optional[Callable[[float], None]] = None,
    cancel_event: Optional[threading.Event] = None,
    on_point: Optional[PointCallback] = None
) -> int:
    """
    Simulate live tracking by replaying a waypoint source on a device.

    One session is held open for the whole run.

    Args:
        device: Device to open the location service on
        source: WaypointSource (anything with points()) or iterable of Waypoint

    Returns:
        Number of points sent
    """
    waypoints = source.points() if hasattr(source, 'points') else source

    with LocationSession.open(device) as session:
        scheduler = PlaybackScheduler(session, sleep=sleep,
                                      cancel_event=cancel_event, on_point=on_point)
        return scheduler.run(waypoints)
