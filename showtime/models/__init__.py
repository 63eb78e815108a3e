# showtime/models/__init__.py

from .media import MediaModel
from .episode import EpisodeModel


__all__ = [
    "MediaModel",
    "EpisodeModel",
]
