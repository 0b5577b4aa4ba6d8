"""
笔记管理API
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from notetree.db.database import get_db
from notetree.schemas.common import ResponseModel
from notetree.schemas.note import NoteCreate, NoteUpdate, note_response
from notetree.services.note_service import NoteService
from notetree.utils.auth import get_current_owner_id

router = APIRouter(prefix="/notes", tags=["笔记"])

# 请求字段 -> 服务层字段
UPDATE_FIELD_MAP = {
    "title": "title",
    "content": "content",
    "tags": "tags",
    "isPinned": "is_pinned",
    "images": "images",
    "folderId": "folder_id",
}


@router.post("", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_note(
    note_data: NoteCreate,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_current_owner_id)
):
    """
    创建笔记
    """
    images = [image.model_dump() for image in note_data.images or []]
    note = await NoteService.place_note(
        db,
        owner_id,
        note_data.folderId,
        title=note_data.title,
        content=note_data.content,
        tags=note_data.tags,
        is_pinned=note_data.isPinned,
        images=images
    )
    return ResponseModel(
        message="Note created successfully",
        note=note_response(note)
    )


@router.get("", response_model=ResponseModel)
async def list_notes(
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_current_owner_id)
):
    """
    获取全部笔记（置顶优先，新建优先）
    """
    notes = await NoteService.list_notes(db, owner_id)
    return ResponseModel(
        count=len(notes),
        notes=[note_response(note) for note in notes]
    )


@router.get("/{note_id}", response_model=ResponseModel)
async def get_note(
    note_id: int,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_current_owner_id)
):
    """
    获取单条笔记
    """
    note = await NoteService.get_note(db, owner_id, note_id)
    return ResponseModel(note=note_response(note))


@router.put("/{note_id}", response_model=ResponseModel)
async def update_note(
    note_id: int,
    note_data: NoteUpdate,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_current_owner_id)
):
    """
    更新笔记，只修改请求中出现的字段
    """
    provided = note_data.model_dump(exclude_unset=True)
    fields = {UPDATE_FIELD_MAP[key]: value for key, value in provided.items()}
    note = await NoteService.update_note(db, owner_id, note_id, fields)
    return ResponseModel(
        message="Note updated successfully",
        note=note_response(note)
    )


@router.delete("/{note_id}", response_model=ResponseModel)
async def delete_note(
    note_id: int,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_current_owner_id)
):
    """
    删除笔记
    """
    await NoteService.delete_note(db, owner_id, note_id)
    return ResponseModel(message="Note deleted successfully")
