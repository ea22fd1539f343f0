"""Simple runtime configuration for the task list app.

Control flags are read from environment variables to allow toggling in
development or production without code changes.
"""
import os


def _trueish(v: str | None) -> bool:
    if not v:
        return False
    return v.lower() in ('1', 'true', 'yes', 'on')


# Database used by the server. Any SQLAlchemy async URL works; the default is
# a local SQLite file next to the working directory.
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite+aiosqlite:///./tasklist.db')

# Quiet window (seconds) the client waits after the last edit to a field
# before sending the update to the server.
try:
    DEBOUNCE_SECONDS = float(os.getenv('DEBOUNCE_SECONDS', '1.0'))
except ValueError:
    DEBOUNCE_SECONDS = 1.0

# When the store hands back no result for GET /todos the server answers 500.
# Set LIST_NULL_AS_EMPTY=1 to answer with an empty list instead.
LIST_NULL_AS_EMPTY = _trueish(os.getenv('LIST_NULL_AS_EMPTY', '0'))

# Base URL the Python client talks to when none is passed explicitly.
SERVER_URL = os.getenv('TASKLIST_SERVER_URL', 'http://127.0.0.1:8000')

try:
    HTTP_TIMEOUT_SECONDS = float(os.getenv('HTTP_TIMEOUT_SECONDS', '10'))
except ValueError:
    HTTP_TIMEOUT_SECONDS = 10.0

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

# Optional local overrides: define variables in tasklist/local_config.py to
# extend or override the defaults above without changing versioned config.
try:
    from .local_config import *  # type: ignore  # noqa: F401,F403
except ImportError:
    # No local overrides present; proceed with defaults.
    pass
