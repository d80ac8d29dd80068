"""Connection and session constants shared across the client modules."""

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 3100
DEFAULT_SCENE: str = "MainScene"
TICK_RATE: int = 60
READ_BUFFER_SIZE: int = 4096
MAX_PENDING_CHARS: int = 1_048_576
MAX_CLIENT_ID: int = 0xFFFFFFFF
RECEIVE_QUEUE_SIZE: int = 64
