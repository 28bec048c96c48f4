import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated list of allowed origins; '*' allows any client
    CLIENT_URL = os.environ.get('CLIENT_URL', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Room limits
    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '8'))
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    # How many transactions a room snapshot carries for late joiners
    RECENT_TRANSACTIONS_LIMIT = int(os.environ.get('RECENT_TRANSACTIONS_LIMIT', '50'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3001'))
