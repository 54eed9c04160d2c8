# app/models/db/mentions.py
from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text

from app.db.database import Base

# Both tables are populated by the ingestion side; these mappings only describe them.


class ProjectDB(Base):
    __tablename__ = "projects"

    project_id = Column(String, primary_key=True)
    keyword = Column(String, nullable=True)
    name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=True)


class MentionDB(Base):
    __tablename__ = "mentions"

    mention_id = Column(String, primary_key=True)
    project_id = Column(String, ForeignKey("projects.project_id"), nullable=True, index=True)

    published = Column(DateTime(timezone=True), nullable=True, index=True)
    url = Column(Text, nullable=True)
    tracked_keyword = Column(String, nullable=True)
    social_network = Column(String, nullable=True)
    text = Column(Text, nullable=True)
    sentiment = Column(String, nullable=True)
    language = Column(String, nullable=True)
    country = Column(String, nullable=True)

    # {"name", "username", "profile_pic", "followers", "reach"}; numbers are stored as text
    author = Column(JSON, nullable=True)

    domain_influence = Column(Float, nullable=True)
    social_media_interactions = Column(Integer, nullable=True)
    linked = Column(Boolean, nullable=True)
