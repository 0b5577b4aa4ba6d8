"""
文件夹模型
"""
from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, Index
from notetree.db.database import Base
from notetree.models.types import IdType, utcnow

ROOT_PATH = "/"


class Folder(Base):
    __tablename__ = "folders"
    __table_args__ = (
        Index("ix_folders_owner_parent", "owner_id", "parent_id"),
        Index("ix_folders_owner_path", "owner_id", "path"),
    )
    
    id = Column(IdType, primary_key=True, autoincrement=True)
    owner_id = Column(IdType, ForeignKey("accounts.id"), nullable=False)
    name = Column(String(100), nullable=False)
    parent_id = Column(IdType, ForeignKey("folders.id"), nullable=True)
    # 祖先名称链，例如 /Work/Projects；根级文件夹为 /
    path = Column(String, nullable=False, default=ROOT_PATH)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
