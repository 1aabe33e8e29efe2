from datetime import datetime, timedelta, timezone

import pytest

from conftest import make_gpx
from location_simulator.errors import ValidationError
from location_simulator.gpx import (GPXWaypointSource, Track, TrackSegment, Waypoint,
                                    flatten_tracks, parse_gpx, parse_timestamp)

MULTI_TRACK_GPX = """<?xml version="1.0"?>
<gpx version="1.1" xmlns="http://www.topografix.com/GPX/1/1">
  <trk>
    <name>Morning</name>
    <trkseg>
      <trkpt lat="1.0" lon="10.0"><time>2020-01-01T00:00:10Z</time></trkpt>
      <trkpt lat="2.0" lon="20.0"><time>2020-01-01T00:00:05Z</time></trkpt>
    </trkseg>
    <trkseg>
      <trkpt lat="3.0" lon="30.0"><time>2020-01-01T00:00:20Z</time></trkpt>
    </trkseg>
  </trk>
  <trk>
    <name>Evening</name>
    <trkseg>
      <trkpt lat="4.0" lon="40.0"><ele>12.0</ele><time>2020-01-01T00:00:01Z</time></trkpt>
    </trkseg>
  </trk>
</gpx>
"""


class TestParseTimestamp:
    def test_utc(self):
        assert parse_timestamp("2020-01-01T00:00:03Z") == datetime(2020, 1, 1, 0, 0, 3, tzinfo=timezone.utc)

    def test_offset_and_fraction(self):
        ts = parse_timestamp("2020-01-01T02:00:03.123456789+02:00")
        assert ts.utcoffset() == timedelta(hours=2)
        assert ts.microsecond == 123456
        assert ts.astimezone(timezone.utc) == datetime(2020, 1, 1, 0, 0, 3, 123456, tzinfo=timezone.utc)

    def test_negative_offset(self):
        ts = parse_timestamp("2019-12-31T19:00:00-05:00")
        assert ts.astimezone(timezone.utc) == datetime(2020, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("text", [
        "", None, "not a time", "2020-01-01", "2020-01-01T00:00:00",
        "2020-13-01T00:00:00Z", "2020-01-01T00:00:00+25:00",
    ])
    def test_invalid(self, text):
        with pytest.raises(ValidationError):
            parse_timestamp(text)


class TestParseGpx:
    def test_document_order(self):
        tracks = parse_gpx(MULTI_TRACK_GPX)

        assert [t.name for t in tracks] == ["Morning", "Evening"]
        assert [len(s.points) for s in tracks[0].segments] == [2, 1]
        assert [p.latitude for p in flatten_tracks(tracks)] == ["1.0", "2.0", "3.0", "4.0"]

    def test_values_kept_as_text(self):
        point = parse_gpx(MULTI_TRACK_GPX)[1].segments[0].points[0]
        assert point == Waypoint(latitude="4.0", longitude="40.0", time="2020-01-01T00:00:01Z")

    @pytest.mark.parametrize("namespace", [
        "http://www.topografix.com/GPX/1/1",
        "http://www.topografix.com/GPX/1/0",
        None,
    ])
    def test_namespaces(self, namespace):
        tracks = parse_gpx(make_gpx("2020-01-01T00:00:00Z", namespace=namespace))
        assert tracks[0].name == "Test Track"
        assert tracks[0].segments[0].points[0].time == "2020-01-01T00:00:00Z"

    def test_missing_time_is_empty(self):
        tracks = parse_gpx('<gpx><trk><trkseg><trkpt lat="1" lon="2"/></trkseg></trk></gpx>')
        assert tracks[0].segments[0].points[0].time == ""

    def test_malformed_xml(self):
        with pytest.raises(ValidationError):
            parse_gpx("<gpx><trk>")

    def test_bytes_input(self):
        assert len(parse_gpx(MULTI_TRACK_GPX.encode("utf-8"))) == 2


class TestWaypointSource:
    def test_restartable(self):
        source = GPXWaypointSource.from_string(MULTI_TRACK_GPX)
        assert list(source.points()) == list(source.points())
        assert source.count() == 4
        assert source.name == "Morning"

    def test_lazy_timestamp_errors(self):
        source = GPXWaypointSource([Track(segments=[TrackSegment(points=[
            Waypoint("1.0", "2.0", "2020-01-01T00:00:00Z"),
            Waypoint("1.0", "2.0", "garbage"),
        ])])])

        points = source.points()
        assert next(points).timestamp.year == 2020
        bad = next(points)
        with pytest.raises(ValidationError):
            bad.timestamp

    def test_from_file(self, tmp_path):
        path = tmp_path / "track.gpx"
        path.write_text(MULTI_TRACK_GPX, encoding="utf-8")
        assert GPXWaypointSource.from_file(path).count() == 4
