"""Network configuration constants for the quiz application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
IDENTITY_COOKIE: str = "quizcode_identity"
IDENTITY_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 30
CLIENT_TOKEN_COOKIE: str = "quizcode_client"
CLIENT_TOKEN_BYTES: int = 16
