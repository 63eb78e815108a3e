# showtime/core/__init__.py

from .config import get_settings, Settings
from .auth import verify_token
from .logging import setup_logging
