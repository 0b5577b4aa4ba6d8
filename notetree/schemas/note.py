"""
笔记Schema模型
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime


def strip_text(v):
    if isinstance(v, str):
        return v.strip()
    return v


class NoteImage(BaseModel):
    """粘贴到笔记中的图片（base64编码）"""
    id: str
    data: str = Field(..., description="base64编码的图片数据")
    mimeType: Optional[str] = None
    name: Optional[str] = None


class NoteBase(BaseModel):
    """笔记基础模型"""
    title: str = Field(..., min_length=1, max_length=200, description="笔记标题")
    content: str = Field(..., min_length=1, description="笔记内容")

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return strip_text(v)


class NoteCreate(NoteBase):
    """创建笔记请求模型"""
    folderId: Optional[int] = Field(None, description="文件夹ID，为null表示根目录")
    tags: Optional[List[str]] = Field(None, description="标签数组")
    isPinned: bool = Field(False, description="是否置顶")
    images: Optional[List[NoteImage]] = Field(None, description="粘贴的图片")


class NoteUpdate(BaseModel):
    """更新笔记请求模型，只有显式提供的字段会被修改"""
    title: Optional[str] = Field(None, min_length=1, max_length=200, description="笔记标题")
    content: Optional[str] = Field(None, min_length=1, description="笔记内容")
    folderId: Optional[int] = Field(None, description="目标文件夹ID，显式传null表示移到根目录")
    tags: Optional[List[str]] = Field(None, description="标签数组")
    isPinned: Optional[bool] = Field(None, description="是否置顶")
    images: Optional[List[NoteImage]] = Field(None, description="粘贴的图片")

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return strip_text(v)


class NoteResponse(BaseModel):
    """笔记响应模型"""
    id: int
    title: str
    content: str
    folderId: Optional[int] = None
    ownerId: int
    tags: List[str] = []
    images: List[NoteImage] = []
    isPinned: bool = False
    createdAt: datetime
    updatedAt: datetime


def note_response(note) -> NoteResponse:
    """把 Note 模型转换为响应模型"""
    return NoteResponse(
        id=note.id,
        title=note.title,
        content=note.content,
        folderId=note.folder_id,
        ownerId=note.owner_id,
        tags=note.tags or [],
        images=note.images or [],
        isPinned=note.is_pinned,
        createdAt=note.created_at,
        updatedAt=note.updated_at
    )
