import logging

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

from rummy.registry import RoomRegistry

rooms = RoomRegistry()
socketio = SocketIO(async_mode=None)


def _origins(value):
    if value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    level = flask_app.config.get('LOG_LEVEL', 'INFO')
    flask_app.logger.setLevel(level)
    logging.getLogger('rummy').setLevel(level)

    allowed_origins = _origins(flask_app.config.get('CORS_ALLOWED_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)
    rooms.init_app(flask_app)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from rummy.main import main
    flask_app.register_blueprint(main)

    from rummy.api.rooms import rooms_api
    flask_app.register_blueprint(rooms_api, url_prefix='/api/rooms')

    # Handlers bind to the module-level socketio instance
    from rummy.socketio_events import register_socketio_handlers
    register_socketio_handlers(flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    return flask_app
