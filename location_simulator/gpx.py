"""
GPX Track Reader

Author: Colin Bitterfield
Email: colin@bitterfield.com
Date Created: 2026-10-18
Date Updated: 2026-10-18
Version: 0.1.0

Reads GPX track logs into an ordered stream of timestamped waypoints.
"""

import re
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, Iterator, List, Optional

from location_simulator.errors import ValidationError

logger = logging.getLogger(__name__)

# GPX 1.1 and 1.0 namespaces; files without a namespace are also accepted
GPX_NAMESPACES = (
    'http://www.topografix.com/GPX/1/1',
    'http://www.topografix.com/GPX/1/0',
)

_RFC3339_RE = re.compile(
    r'^(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?'
    r'(?:([Zz])|([+-])(\d{2}):(\d{2}))$'
)


def parse_timestamp(text: Optional[str]) -> datetime:
    """
    Parse an RFC 3339 timestamp.

    Args:
        text: e.g. '2020-01-01T00:00:03Z' or '2020-01-01T02:00:03.250+02:00'

    Returns:
        Timezone-aware datetime

    Raises:
        ValidationError: missing or malformed timestamp
    """
    match = _RFC3339_RE.match(text.strip()) if text else None
    if not match:
        raise ValidationError(f"Invalid point time: {text!r}", details={'time': text})

    year, month, day, hour, minute, second, fraction, zulu, sign, off_h, off_m = match.groups()

    # Fractional seconds of any length, truncated to microseconds
    microsecond = int((fraction or '0')[:6].ljust(6, '0'))

    try:
        if zulu:
            tz = timezone.utc
        else:
            offset = timedelta(hours=int(off_h), minutes=int(off_m))
            tz = timezone(-offset if sign == '-' else offset)

        return datetime(int(year), int(month), int(day), int(hour), int(minute),
                        int(second), microsecond, tzinfo=tz)
    except ValueError as e:
        raise ValidationError(f"Invalid point time: {text!r}: {e}", details={'time': text}) from e


@dataclass(frozen=True)
class Waypoint:
    """One timestamped fix. Values are kept as text until consumed."""
    latitude: str
    longitude: str
    time: str = ''

    @property
    def timestamp(self) -> datetime:
        return parse_timestamp(self.time)


@dataclass
class TrackSegment:
    points: List[Waypoint] = field(default_factory=list)


@dataclass
class Track:
    name: str = ''
    segments: List[TrackSegment] = field(default_factory=list)


def flatten_tracks(tracks: Iterable[Track]) -> Iterator[Waypoint]:
    """Yield points in document order: track, then segment, then point"""
    for track in tracks:
        logger.debug(f"Reading track {track.name or '(unnamed)'}")
        for segment in track.segments:
            yield from segment.points


def _children(element: ET.Element, tag: str) -> List[ET.Element]:
    # Try each namespace, then without namespace
    for ns in GPX_NAMESPACES:
        found = element.findall(f'{{{ns}}}{tag}')
        if found:
            return found
    return element.findall(tag)


def _child_text(element: ET.Element, tag: str) -> str:
    found = _children(element, tag)
    if not found or found[0].text is None:
        return ''
    return found[0].text.strip()


def parse_gpx(content) -> List[Track]:
    """
    Parse GPX content into tracks.

    Args:
        content: GPX document as str or bytes

    Returns:
        Tracks in document order

    Raises:
        ValidationError: content is not well-formed XML
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ValidationError(f"GPX parse error: {e}") from e

    tracks = []
    for trk in _children(root, 'trk'):
        segments = []
        for trkseg in _children(trk, 'trkseg'):
            points = [
                Waypoint(
                    latitude=trkpt.get('lat', ''),
                    longitude=trkpt.get('lon', ''),
                    time=_child_text(trkpt, 'time')
                )
                for trkpt in _children(trkseg, 'trkpt')
            ]
            segments.append(TrackSegment(points=points))
        tracks.append(Track(name=_child_text(trk, 'name'), segments=segments))

    return tracks


class GPXWaypointSource:
    """
    Waypoint source backed by parsed GPX tracks

    points() can be called any number of times and yields the same
    sequence each time.
    """

    def __init__(self, tracks: List[Track], name: str = ''):
        self.tracks = tracks
        self.name = name or next((t.name for t in tracks if t.name), '')

    @classmethod
    def from_string(cls, content, name: str = '') -> 'GPXWaypointSource':
        return cls(parse_gpx(content), name=name)

    @classmethod
    def from_file(cls, path) -> 'GPXWaypointSource':
        with open(path, 'rb') as f:
            content = f.read()
        source = cls.from_string(content)
        logger.info(f"Loaded GPX file {path}: {source.count()} points")
        return source

    def points(self) -> Iterator[Waypoint]:
        return flatten_tracks(self.tracks)

    def __iter__(self) -> Iterator[Waypoint]:
        return self.points()

    def count(self) -> int:
        return sum(len(seg.points) for trk in self.tracks for seg in trk.segments)
