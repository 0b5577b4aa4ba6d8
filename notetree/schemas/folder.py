"""
文件夹Schema模型
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime

from notetree.schemas.note import NoteResponse, strip_text


class FolderBase(BaseModel):
    """文件夹基础模型"""
    name: str = Field(..., min_length=1, max_length=100, description="文件夹名称")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        """先去除首尾空白再做长度校验"""
        return strip_text(v)


class FolderCreate(FolderBase):
    """创建文件夹请求模型"""
    parentId: Optional[int] = Field(None, description="父文件夹ID，为null表示根目录")


class FolderRename(FolderBase):
    """重命名文件夹请求模型"""


class FolderResponse(BaseModel):
    """文件夹响应模型"""
    id: int
    name: str
    parentId: Optional[int] = None
    ownerId: int
    path: str
    createdAt: datetime
    updatedAt: datetime
    
    model_config = ConfigDict(from_attributes=True)


class FolderTreeNode(BaseModel):
    """文件夹树节点模型（支持递归）"""
    id: int
    name: str
    type: str = "folder"
    parentId: Optional[int] = None
    path: str
    children: List['FolderTreeNode'] = []
    notes: List[NoteResponse] = []


class FolderTreeResponse(BaseModel):
    """整棵树：根级文件夹和根目录下的笔记"""
    folders: List[FolderTreeNode] = []
    notes: List[NoteResponse] = []


# 启用前向引用
FolderTreeNode.model_rebuild()


def folder_response(folder) -> FolderResponse:
    """把 Folder 模型转换为响应模型"""
    return FolderResponse(
        id=folder.id,
        name=folder.name,
        parentId=folder.parent_id,
        ownerId=folder.owner_id,
        path=folder.path,
        createdAt=folder.created_at,
        updatedAt=folder.updated_at
    )
