"""
笔记模型
"""
from sqlalchemy import Column, String, Text, Boolean, TIMESTAMP, ForeignKey, JSON, Index
from notetree.db.database import Base
from notetree.models.types import IdType, utcnow


class Note(Base):
    __tablename__ = "notes"
    __table_args__ = (
        Index("ix_notes_owner_folder_created", "owner_id", "folder_id", "created_at"),
    )
    
    id = Column(IdType, primary_key=True, autoincrement=True)
    owner_id = Column(IdType, ForeignKey("accounts.id"), nullable=False)
    folder_id = Column(IdType, ForeignKey("folders.id"), nullable=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    # 粘贴的图片：[{id, data(base64), mimeType, name}]
    images = Column(JSON, nullable=False, default=list)
    is_pinned = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
