import os


def _split_env(name):
    raw = os.environ.get(name)
    if not raw:
        return None
    return [item.strip() for item in raw.split(',') if item.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma-separated list of allowed origins, or '*' for any
    CORS_ALLOWED_ORIGINS = _split_env('CORS_ALLOWED_ORIGINS') or '*'
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Room limits
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '3'))
    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '10'))
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '4'))
    MAX_NAME_LENGTH = int(os.environ.get('MAX_NAME_LENGTH', '64'))
    # Round timers (seconds)
    GAME_DURATION_SEC = int(os.environ.get('GAME_DURATION_SEC', '300'))
    REVEAL_DURATION_SEC = float(os.environ.get('REVEAL_DURATION_SEC', '15'))
    TICK_INTERVAL_SEC = float(os.environ.get('TICK_INTERVAL_SEC', '1'))
    # Word shown to impostors instead of the secret word
    IMPOSTOR_PLACEHOLDER = os.environ.get('IMPOSTOR_PLACEHOLDER', 'CRITICO')
    # None falls back to the built-in word bank
    WORD_LIST = _split_env('IMPOSTOR_WORDS')
