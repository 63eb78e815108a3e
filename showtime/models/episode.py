# showtime/models/episode.py

import uuid
from sqlalchemy import Column, Integer, String, Text, Date, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from showtime.database import Base


class EpisodeModel(Base):
    __tablename__ = "episodes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    media_id = Column(String(36), ForeignKey("media.id", ondelete="CASCADE"), nullable=False, index=True)
    tmdb_episode_id = Column(Integer, nullable=False)
    season_number = Column(Integer, nullable=False)
    episode_number = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    air_date = Column(Date, nullable=True)
    synopsis = Column(Text, nullable=True)
    is_special = Column(Boolean, nullable=False, default=False)
    watch_state = Column(String(16), nullable=False, default="unwatched")

    media = relationship("MediaModel", back_populates="episodes")

    def __repr__(self):
        return (
            f"<EpisodeModel(media_id={self.media_id}, "
            f"S{self.season_number:02d}E{self.episode_number:02d})>"
        )
