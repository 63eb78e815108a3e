# showtime/models/media.py

import uuid
from sqlalchemy import Column, Integer, String, Text, Date, Boolean, DateTime, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from showtime.database import Base


class MediaModel(Base):
    __tablename__ = "media"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tmdb_id = Column(Integer, nullable=False, unique=True, index=True)
    media_type = Column(String(16), nullable=False)
    title = Column(String(255), nullable=False)
    release_date = Column(Date, nullable=True)
    priority = Column(Integer, nullable=False, default=3)
    source = Column(String(255), nullable=True)
    available_on = Column(String(255), nullable=True)
    watch_state = Column(String(16), nullable=False, default="unwatched")
    hidden = Column(Boolean, nullable=False, default=False)
    synopsis = Column(Text, nullable=True)
    poster_path = Column(Text, nullable=True)
    genres = Column(JSON, nullable=False, default=list)
    cast = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=func.current_timestamp())
    updated_at = Column(
        DateTime, default=func.current_timestamp(), onupdate=func.current_timestamp()
    )
    last_synced_at = Column(DateTime, nullable=True, comment="TMDB 마지막 동기화 일시")

    episodes = relationship(
        "EpisodeModel",
        back_populates="media",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<MediaModel(id={self.id}, tmdb_id={self.tmdb_id}, title='{self.title}')>"
