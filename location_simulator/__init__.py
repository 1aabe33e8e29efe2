"""
Location Simulator

Author: Colin Bitterfield
Email: colin@bitterfield.com
Date Created: 2026-10-18
Date Updated: 2026-10-18
Version: 0.1.0

Simulates the GPS location reported by a connected device.
Sends set/reset messages to the location simulation service and
replays GPX tracks in real time.
"""

__version__ = "0.1.0"
