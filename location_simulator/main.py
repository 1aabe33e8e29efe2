"""
Location Simulator - Web Interface

Author: Colin Bitterfield
Email: colin@bitterfield.com
Date Created: 2026-10-18
Date Updated: 2026-10-18
Version: 0.1.0

HTTP and WebSocket control for device location simulation.
Sets or resets the simulated location and replays uploaded GPX routes.
"""

import logging
import threading
import uuid
from flask import Flask, jsonify, request
from flask_socketio import SocketIO, emit
from werkzeug.utils import secure_filename

from location_simulator.config import SimulatorConfig
from location_simulator.errors import (PlaybackCancelled, ServiceConnectionError,
                                       SimLocationError, TransportError, ValidationError)
from location_simulator.gpx import GPXWaypointSource
from location_simulator.playback import PlaybackState, playback
from location_simulator.session import reset_location, set_location

config = SimulatorConfig()

# Configure logging based on DEBUG env var
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(levelname)s:%(name)s:%(message)s'
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SECRET_KEY'] = config.secret_key
app.config['MAX_CONTENT_LENGTH'] = config.max_upload_bytes
socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')


# Global state
class SimulatorState:
    def __init__(self):
        self.device = config.build_device()

        # Route management
        self.routes = {}  # {route_id: route_data}
        self.active_route_id = None

        # Playback
        self.playback_state = PlaybackState.IDLE
        self.playback_thread = None
        self.cancel_event = threading.Event()
        self.playback_lock = threading.Lock()  # guards starting a playback
        self.sleep = None  # None = interruptible wait on cancel_event
        self.points_sent = 0
        self.last_position = None
        self.last_error = None

    @property
    def running(self) -> bool:
        return self.playback_state == PlaybackState.RUNNING

state = SimulatorState()


def _as_text(value) -> str:
    return '' if value is None else str(value)


def _status_payload() -> dict:
    return {
        'running': state.running,
        'playback_state': state.playback_state.value,
        'active_route': state.active_route_id,
        'points_sent': state.points_sent,
        'last_position': state.last_position,
        'last_error': state.last_error
    }


def on_point_sent(index, waypoint, point):
    """Publish each replayed point to web clients"""
    state.points_sent = index + 1
    state.last_position = {
        'latitude': point.latitude,
        'longitude': point.longitude,
        'time': waypoint.time
    }

    with app.app_context():
        socketio.emit('location_update', {'index': index, **state.last_position})


def playback_loop(route_id):
    """Replay a stored route until it completes, fails or is stopped"""
    route = state.routes[route_id]
    logger.info(f"Route playback started: {route['name']}")

    try:
        playback(
            state.device,
            route['source'],
            sleep=state.sleep,
            cancel_event=state.cancel_event,
            on_point=on_point_sent
        )
        state.playback_state = PlaybackState.COMPLETED
    except PlaybackCancelled:
        state.playback_state = PlaybackState.CANCELLED
    except SimLocationError as e:
        logger.error(f"Route playback error: {e}")
        state.playback_state = PlaybackState.FAILED
        state.last_error = e.to_payload()
    except Exception as e:
        logger.error(f"Route playback error: {e}")
        state.playback_state = PlaybackState.FAILED
        state.last_error = {'status': 'error', 'error_code': 'INTERNAL', 'error': str(e)}

    logger.info(f"Route playback {state.playback_state.value}: {state.points_sent} points sent")

    with app.app_context():
        socketio.emit('playback_status', _status_payload())


@app.errorhandler(SimLocationError)
def handle_simlocation_error(e):
    if isinstance(e, ValidationError):
        status = 400
    elif isinstance(e, (ServiceConnectionError, TransportError)):
        status = 502
    else:
        status = 500
    logger.error(f"{e.code}: {e.message}")
    return jsonify(e.to_payload()), status


# Flask routes
@app.route('/api/status')
def get_status():
    """Get simulator status"""
    status = _status_payload()
    status['device'] = state.device.get_status() if hasattr(state.device, 'get_status') else None
    status['route_count'] = len(state.routes)
    return jsonify(status)


@app.route('/api/location/set', methods=['POST'])
def set_position():
    """Set the simulated device location"""
    data = request.get_json(silent=True) or {}

    point = set_location(
        state.device,
        _as_text(data.get('latitude')),
        _as_text(data.get('longitude'))
    )

    return jsonify({
        'status': 'success',
        'position': {
            'latitude': point.latitude,
            'longitude': point.longitude
        }
    })


@app.route('/api/location/reset', methods=['POST'])
def reset_position():
    """Reset the device to its real location"""
    reset_location(state.device)
    return jsonify({'status': 'success'})


@app.route('/api/route/upload', methods=['POST'])
def upload_route():
    """Upload and parse a GPX track file"""
    if 'file' not in request.files:
        return jsonify({'status': 'error', 'error': 'No file uploaded'}), 400

    file = request.files['file']
    if file.filename == '':
        return jsonify({'status': 'error', 'error': 'No file selected'}), 400

    filename = secure_filename(file.filename)
    source = GPXWaypointSource.from_string(file.read())
    point_count = source.count()

    if point_count == 0:
        return jsonify({'status': 'error', 'error': 'GPX file contains no track points'}), 400

    # Generate unique ID
    route_id = str(uuid.uuid4())[:8]
    state.routes[route_id] = {
        'id': route_id,
        'name': source.name or filename or 'Unnamed Route',
        'filename': filename,
        'point_count': point_count,
        'source': source
    }

    logger.info(f"Route uploaded: {state.routes[route_id]['name']} with {point_count} points")

    return jsonify({
        'status': 'success',
        'route': {
            'id': route_id,
            'name': state.routes[route_id]['name'],
            'point_count': point_count
        }
    })


@app.route('/api/route/list')
def list_routes():
    """List all uploaded routes"""
    routes = [
        {
            'id': rid,
            'name': rdata['name'],
            'point_count': rdata['point_count']
        }
        for rid, rdata in state.routes.items()
    ]
    return jsonify({'routes': routes})


@app.route('/api/route/start/<route_id>', methods=['POST'])
def start_route(route_id):
    """Start replaying a route"""
    if route_id not in state.routes:
        return jsonify({'status': 'error', 'error': 'Route not found'}), 404

    with state.playback_lock:
        if state.running:
            return jsonify({'status': 'error', 'error': 'Playback already running'}), 409

        state.active_route_id = route_id
        state.playback_state = PlaybackState.RUNNING
        state.points_sent = 0
        state.last_error = None
        state.cancel_event = threading.Event()

        state.playback_thread = socketio.start_background_task(playback_loop, route_id)

    return jsonify({'status': 'success', 'route': route_id})


@app.route('/api/route/stop', methods=['POST'])
def stop_route():
    """Stop route playback"""
    state.cancel_event.set()
    logger.info("Route playback stop requested")
    return jsonify({'status': 'success'})


# WebSocket events
@socketio.on('connect')
def handle_connect():
    """Handle client connection"""
    emit('status', _status_payload())


def main():
    """Main entry point"""
    print("=" * 60)
    print("  Location Simulator")
    print("=" * 60)
    print()
    print(f"Device relay: {config.device_host}:{config.device_port}")
    print(f"Web interface: http://{config.host}:{config.port}")
    print("=" * 60)

    socketio.run(app, host=config.host, port=config.port, debug=config.debug,
                 allow_unsafe_werkzeug=True)


if __name__ == '__main__':
    main()
