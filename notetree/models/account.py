"""
访问码账户模型
"""
from sqlalchemy import Column, String, Boolean, TIMESTAMP
from notetree.db.database import Base
from notetree.models.types import IdType, utcnow


class Account(Base):
    __tablename__ = "accounts"
    
    id = Column(IdType, primary_key=True, autoincrement=True)
    access_code = Column(String(32), unique=True, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    last_accessed = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
