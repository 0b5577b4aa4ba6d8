"""
通用Schema模型
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional


class ResponseModel(BaseModel):
    """
    标准响应信封: {success, message?, ...payload}
    
    载荷字段作为额外字段直接平铺在信封中，例如 ResponseModel(folder=...)。
    """
    model_config = ConfigDict(extra="allow")
    
    success: bool = True
    message: Optional[str] = None
