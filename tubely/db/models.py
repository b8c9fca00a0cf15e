# tubely/db/models.py
from sqlalchemy import Column, String, Text, DateTime, Uuid, func
from sqlalchemy.orm import declarative_base
import uuid

Base = declarative_base()


class VideoModel(Base):
    __tablename__ = "videos"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    title = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    thumbnail_url = Column(String, nullable=True)
    # "<bucket>,<key>"; NULL until a video has been uploaded
    video_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=func.now())
