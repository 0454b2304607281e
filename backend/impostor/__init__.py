import logging

import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from config import Config
from impostor.services.games.registry import RoomRegistry

registry = RoomRegistry()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    allowed_origins = flask_app.config.get('CORS_ALLOWED_ORIGINS', '*')
    registry.init_app(flask_app)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import and register blueprints here
    from impostor.main import main
    flask_app.register_blueprint(main)

    from impostor.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    # Register Socket.IO event handlers against the freshly initialized server
    from impostor.socketio_events import register_socketio_handlers
    flask_app.extensions['session_gateway'] = register_socketio_handlers(flask_app, registry)

    @click.command('list-words')
    def list_words_command():
        """Prints the configured word bank."""
        words = flask_app.extensions['session_gateway'].words
        for word in words:
            click.echo(word)
        click.echo(f'{len(words)} words configured.')

    flask_app.cli.add_command(list_words_command)

    return flask_app
