import random

import click
from flask import Flask, current_app
from flask_cors import CORS
from flask_socketio import SocketIO

from config import Config
from mostlikely.services.games import GameRules, GameSession

allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


def get_session() -> GameSession:
    """The one session owned by the running app."""
    return current_app.extensions['game_session']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    seed = flask_app.config.get('RANDOM_SEED')
    rng = random.Random(seed) if seed not in (None, '') else random.Random()
    flask_app.extensions['game_session'] = GameSession(
        rules=GameRules.from_config(flask_app.config),
        rng=rng,
    )

    from mostlikely.main import main
    flask_app.register_blueprint(main)

    from mostlikely.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api/game')

    # Importing here ensures the handlers bind to the initialized socketio instance
    try:
        from mostlikely.socketio_events import register_socketio_handlers
        register_socketio_handlers(testing=flask_app.config.get('TESTING', False))
    except ImportError as exc:
        flask_app.logger.warning(f"SocketIO events not loaded: {exc}")

    @click.command('question-pools')
    def question_pools_command():
        """Prints how many questions each lobby setting can draw from."""
        from mostlikely.services.games.questions import (
            STANDARD_QUESTIONS, TONES, default_late_night_questions, filter_questions,
        )
        needed = flask_app.config.get('QUESTIONS_PER_ROUND', 20)
        for tone in TONES:
            for couples_safe in (False, True):
                size = len(filter_questions(STANDARD_QUESTIONS, tone, couples_safe))
                flag = 'ok' if size >= needed else 'too few'
                click.echo(f"{tone:<6} couples_safe={str(couples_safe):<5} {size:>3}  {flag}")
        click.echo(f"18+    late-night default   {len(default_late_night_questions()):>3}")

    flask_app.cli.add_command(question_pools_command)

    flask_app.logger.info(f"[init] session ready rules={flask_app.extensions['game_session'].rules}")
    return flask_app
