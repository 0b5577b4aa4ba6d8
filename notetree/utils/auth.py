"""
认证工具函数
"""
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from notetree.core.config import settings
from notetree.db.database import get_db
from notetree.services.auth_service import AuthService


async def get_current_owner_id(
    access_code: Optional[str] = Header(None, alias=settings.ACCESS_CODE_HEADER),
    db: AsyncSession = Depends(get_db)
) -> int:
    """
    从请求头获取当前所有者ID（通过访问码）
    
    每次成功校验都会刷新账户的最近访问时间。
    
    Args:
        access_code: X-Access-Code 请求头
    
    Returns:
        int: 所有者账户ID
    
    Raises:
        AuthError: 未提供访问码，或访问码无效/已停用
    """
    return await AuthService.resolve_owner(db, access_code)
