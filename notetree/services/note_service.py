"""
笔记服务

把笔记绑定到文件夹：笔记的 folder_id 不为空时，必须指向同一所有者下已存在的文件夹。
"""
import logging
from typing import Optional, List, Dict, Any

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from notetree.core.config import settings
from notetree.core.exceptions import ValidationError, NotFoundError
from notetree.db.database import write_transaction
from notetree.models.note import Note
from notetree.models.types import fits_id_column
from notetree.services.folder_tree import FolderTreeStore

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "content", "tags", "is_pinned", "images", "folder_id")
# 这些字段不能显式置为 null；images 为 null 表示清空，folder_id 为 null 表示移到根目录
NON_NULLABLE_FIELDS = ("title", "content", "tags", "is_pinned")


def normalize_title(title: Optional[str]) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("title", "Title and content are required")
    if len(cleaned) > settings.NOTE_TITLE_MAX_LENGTH:
        raise ValidationError(
            "title",
            f"Title must be at most {settings.NOTE_TITLE_MAX_LENGTH} characters"
        )
    return cleaned


def normalize_content(content: Optional[str]) -> str:
    if content is None or content == "":
        raise ValidationError("content", "Title and content are required")
    return content


def normalize_tags(tags: Optional[List[str]]) -> List[str]:
    """去除空白、丢弃空标签，重复标签只保留第一次出现的位置"""
    result: List[str] = []
    for tag in tags or []:
        cleaned = tag.strip()
        if cleaned and cleaned not in result:
            result.append(cleaned)
    return result


def _note_order():
    # 置顶在前，同组内最新创建的在前
    return (Note.is_pinned.desc(), Note.created_at.desc(), Note.id.desc())


class NoteService:
    """笔记服务"""

    @staticmethod
    async def _check_folder(db: AsyncSession, owner_id: int, folder_id: Optional[int]):
        if folder_id is not None:
            await FolderTreeStore.require_folder(db, owner_id, folder_id)

    @classmethod
    async def place_note(
        cls,
        db: AsyncSession,
        owner_id: int,
        folder_id: Optional[int],
        title: str,
        content: str,
        tags: Optional[List[str]] = None,
        is_pinned: bool = False,
        images: Optional[List[Dict[str, Any]]] = None
    ) -> Note:
        """
        在指定文件夹（或根目录）下创建笔记

        Args:
            db: 数据库会话
            owner_id: 所有者账户ID
            folder_id: 目标文件夹ID，None 表示根目录
            title: 标题，必填，去除首尾空白后最长200字符
            content: 内容，必填
            tags: 标签列表
            is_pinned: 是否置顶
            images: 粘贴的图片列表

        Raises:
            ValidationError: 标题或内容缺失、标题超长
            NotFoundError: 文件夹在该所有者下不存在，此时不会创建笔记
        """
        note = Note(
            owner_id=owner_id,
            folder_id=folder_id,
            title=normalize_title(title),
            content=normalize_content(content),
            tags=normalize_tags(tags),
            is_pinned=bool(is_pinned),
            images=list(images or [])
        )

        async with write_transaction(db, "place_note"):
            await cls._check_folder(db, owner_id, folder_id)
            db.add(note)
        await db.refresh(note)

        logger.info("Created note %s for owner %s in folder %s", note.id, owner_id, folder_id)
        return note

    @staticmethod
    async def list_notes_in_folder(db: AsyncSession, owner_id: int, folder_id: Optional[int]) -> List[Note]:
        """列出指定文件夹（None 为根目录）中的笔记"""
        if folder_id is not None and not fits_id_column(folder_id):
            return []
        if folder_id is None:
            folder_clause = Note.folder_id.is_(None)
        else:
            folder_clause = Note.folder_id == folder_id

        result = await db.execute(
            select(Note)
            .where(and_(Note.owner_id == owner_id, folder_clause))
            .order_by(*_note_order())
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_notes(db: AsyncSession, owner_id: int) -> List[Note]:
        """列出所有者的全部笔记"""
        result = await db.execute(
            select(Note)
            .where(Note.owner_id == owner_id)
            .order_by(*_note_order())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_note(db: AsyncSession, owner_id: int, note_id: int) -> Note:
        if not fits_id_column(note_id):
            raise NotFoundError("Note", note_id)
        result = await db.execute(
            select(Note).where(
                and_(
                    Note.id == note_id,
                    Note.owner_id == owner_id
                )
            )
        )
        note = result.scalar_one_or_none()
        if note is None:
            raise NotFoundError("Note", note_id)
        return note

    @classmethod
    async def update_note(cls, db: AsyncSession, owner_id: int, note_id: int, fields: Dict[str, Any]) -> Note:
        """
        部分更新笔记，只修改 fields 中出现的字段

        fields 中出现 folder_id（包括 None）表示移动笔记，会重新校验目标文件夹。
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(sorted(unknown)[0], "Unknown note field")
        for key in NON_NULLABLE_FIELDS:
            if key in fields and fields[key] is None:
                raise ValidationError(key, f"{key} cannot be null")

        async with write_transaction(db, "update_note"):
            note = await cls.get_note(db, owner_id, note_id)

            if "title" in fields:
                note.title = normalize_title(fields["title"])
            if "content" in fields:
                note.content = normalize_content(fields["content"])
            if "tags" in fields:
                note.tags = normalize_tags(fields["tags"])
            if "is_pinned" in fields:
                note.is_pinned = bool(fields["is_pinned"])
            if "images" in fields:
                note.images = list(fields["images"] or [])
            if "folder_id" in fields:
                await cls._check_folder(db, owner_id, fields["folder_id"])
                note.folder_id = fields["folder_id"]
        await db.refresh(note)

        logger.info("Updated note %s for owner %s (%s)", note_id, owner_id, ", ".join(sorted(fields)))
        return note

    @classmethod
    async def delete_note(cls, db: AsyncSession, owner_id: int, note_id: int):
        async with write_transaction(db, "delete_note"):
            note = await cls.get_note(db, owner_id, note_id)
            await db.delete(note)

        logger.info("Deleted note %s for owner %s", note_id, owner_id)
