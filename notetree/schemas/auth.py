"""
访问码Schema模型
"""
from pydantic import BaseModel, Field
from typing import Optional


class AccessCodeCreate(BaseModel):
    """创建访问码请求模型，accessCode为空时由服务端生成"""
    accessCode: Optional[str] = Field(None, description="6位数字访问码")


class AccessCodeRequest(BaseModel):
    """校验/停用访问码请求模型"""
    accessCode: Optional[str] = Field(None, description="访问码")
