from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(client_url):
    if not client_url or client_url.strip() == '*':
        return '*'
    return [origin.strip() for origin in client_url.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _allowed_origins(flask_app.config.get('CLIENT_URL'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One coordinator per app: rooms, sessions and pending requests live here
    from banker.services import build_coordinator
    flask_app.extensions['banker'] = build_coordinator(flask_app.config, logger=flask_app.logger)

    from banker.routes import main
    flask_app.register_blueprint(main)

    # Register Socket.IO event handlers
    # Importing here ensures the handlers bind to the initialized socketio instance
    from banker.socketio_events import register_socketio_handlers
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    register_socketio_handlers(namespace=namespace)
    flask_app.logger.info(f"Banker ready: namespace={namespace} max_players={flask_app.config.get('MAX_PLAYERS', 8)}")

    return flask_app
