from sqlalchemy import Boolean, Column, String, Text

from post_editor.db.base import Base
from post_editor.settings import settings


class Post(Base):
    __tablename__ = "Posts"
    __table_args__ = {"schema": settings.POSTS_SCHEMA}

    lang = Column(String(32), primary_key=True)
    slug = Column(String(255), primary_key=True)
    createdAt = Column(String(32))
    updatedAt = Column(String(32))
    published = Column(Boolean, nullable=False, server_default="0")
    title = Column(Text)
    description = Column(Text)
    content = Column(Text)
