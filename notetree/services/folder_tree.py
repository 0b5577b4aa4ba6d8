"""
文件夹树存储

负责文件夹的创建、重命名和级联删除，并维护物化路径 path 与 parent 链一致。
所有查询都按 owner_id 过滤：其他账户的文件夹与不存在的文件夹没有区别。
"""
import logging
from collections import defaultdict
from typing import Optional, List, Dict

from sqlalchemy import select, delete, and_
from sqlalchemy.ext.asyncio import AsyncSession

from notetree.core.config import settings
from notetree.core.exceptions import ValidationError, NotFoundError
from notetree.db.database import write_transaction
from notetree.models.folder import Folder, ROOT_PATH
from notetree.models.note import Note
from notetree.models.types import fits_id_column

logger = logging.getLogger(__name__)


def child_path(parent_path: str, parent_name: str) -> str:
    """
    计算父文件夹之下的子文件夹 path

    >>> child_path("/", "Work")
    '/Work'
    >>> child_path("/Work", "Projects")
    '/Work/Projects'
    """
    if parent_path == ROOT_PATH:
        return f"/{parent_name}"
    return f"{parent_path}/{parent_name}"


def normalize_folder_name(name: Optional[str]) -> str:
    """去除首尾空白并校验文件夹名称"""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("name", "Folder name is required")
    if len(cleaned) > settings.FOLDER_NAME_MAX_LENGTH:
        raise ValidationError(
            "name",
            f"Folder name must be at most {settings.FOLDER_NAME_MAX_LENGTH} characters"
        )
    return cleaned


class FolderTreeStore:
    """文件夹树存储"""

    @staticmethod
    async def get_folder(db: AsyncSession, owner_id: int, folder_id: int) -> Optional[Folder]:
        if not fits_id_column(folder_id):
            return None
        result = await db.execute(
            select(Folder).where(
                and_(
                    Folder.id == folder_id,
                    Folder.owner_id == owner_id
                )
            )
        )
        return result.scalar_one_or_none()

    @classmethod
    async def require_folder(
        cls,
        db: AsyncSession,
        owner_id: int,
        folder_id: int,
        resource_type: str = "Folder"
    ) -> Folder:
        """
        获取文件夹，不存在时抛出 NotFoundError

        Args:
            db: 数据库会话
            owner_id: 所有者账户ID
            folder_id: 文件夹ID
            resource_type: 错误信息中使用的资源名称，例如 "Parent folder"
        """
        folder = await cls.get_folder(db, owner_id, folder_id)
        if folder is None:
            raise NotFoundError(resource_type, folder_id)
        return folder

    @classmethod
    async def _path_under(cls, db: AsyncSession, owner_id: int, parent_id: Optional[int]) -> str:
        if parent_id is None:
            return ROOT_PATH
        parent = await cls.require_folder(db, owner_id, parent_id, "Parent folder")
        return child_path(parent.path, parent.name)

    @classmethod
    async def create_folder(
        cls,
        db: AsyncSession,
        owner_id: int,
        name: str,
        parent_id: Optional[int] = None
    ) -> Folder:
        """
        创建文件夹

        Args:
            db: 数据库会话
            owner_id: 所有者账户ID
            name: 文件夹名称（会去除首尾空白）
            parent_id: 父文件夹ID，None 表示根目录

        Returns:
            Folder: 新建的文件夹

        Raises:
            ValidationError: 名称为空或超长
            NotFoundError: 父文件夹在该所有者下不存在
        """
        cleaned = normalize_folder_name(name)

        async with write_transaction(db, "create_folder"):
            path = await cls._path_under(db, owner_id, parent_id)
            folder = Folder(
                owner_id=owner_id,
                name=cleaned,
                parent_id=parent_id,
                path=path
            )
            db.add(folder)
        await db.refresh(folder)

        logger.info("Created folder %s (%r) for owner %s at %s", folder.id, folder.name, owner_id, folder.path)
        return folder

    @classmethod
    async def rename_folder(
        cls,
        db: AsyncSession,
        owner_id: int,
        folder_id: int,
        new_name: str,
        cascade_paths: Optional[bool] = None
    ) -> Folder:
        """
        重命名文件夹

        文件夹自身的 path 只由祖先决定，这里按当前父文件夹重新计算一次。
        子孙文件夹的 path 默认不更新（会保留旧名称），
        cascade_paths 为 True 时在同一事务中沿 parent 链全部重算。

        Args:
            cascade_paths: 是否重算子孙 path，None 时使用 settings.CASCADE_RENAME_PATHS

        Raises:
            ValidationError: 新名称为空或超长
            NotFoundError: 文件夹或其父文件夹已不存在
        """
        cleaned = normalize_folder_name(new_name)
        if cascade_paths is None:
            cascade_paths = settings.CASCADE_RENAME_PATHS

        async with write_transaction(db, "rename_folder"):
            folder = await cls.require_folder(db, owner_id, folder_id)
            folder.name = cleaned
            folder.path = await cls._path_under(db, owner_id, folder.parent_id)
            if cascade_paths:
                updated = await cls._rederive_descendant_paths(db, owner_id, folder)
                logger.info("Re-derived %d descendant paths under folder %s", updated, folder_id)
        await db.refresh(folder)

        logger.info("Renamed folder %s to %r for owner %s", folder_id, cleaned, owner_id)
        return folder

    @classmethod
    async def _rederive_descendant_paths(cls, db: AsyncSession, owner_id: int, root: Folder) -> int:
        folders = await cls.list_all(db, owner_id)
        children: Dict[int, List[Folder]] = defaultdict(list)
        for folder in folders:
            if folder.parent_id is not None:
                children[folder.parent_id].append(folder)

        updated = 0
        pending = [root]
        seen = {root.id}
        while pending:
            parent = pending.pop()
            for child in children.get(parent.id, []):
                if child.id in seen:
                    continue
                seen.add(child.id)
                child.path = child_path(parent.path, parent.name)
                updated += 1
                pending.append(child)
        return updated

    @classmethod
    async def delete_folder_cascade(cls, db: AsyncSession, owner_id: int, folder_id: int) -> Dict[str, int]:
        """
        级联删除文件夹及其全部子孙文件夹和笔记

        使用显式栈做后序遍历：对每个文件夹先删除全部子文件夹，
        再删除其中的笔记，最后删除文件夹本身。
        整个级联在一个事务中执行，任一步失败都会回滚并抛出 StorageError。

        Returns:
            dict: {"folders": 删除的文件夹数, "notes": 删除的笔记数}

        Raises:
            NotFoundError: 文件夹在该所有者下不存在
        """
        async with write_transaction(db, "delete_folder_cascade"):
            await cls.require_folder(db, owner_id, folder_id)
            order = await cls._post_order(db, owner_id, folder_id)

            deleted_folders = 0
            deleted_notes = 0
            for current_id in order:
                notes_result = await db.execute(
                    delete(Note).where(
                        and_(
                            Note.folder_id == current_id,
                            Note.owner_id == owner_id
                        )
                    )
                )
                deleted_notes += notes_result.rowcount or 0

                folder_result = await db.execute(
                    delete(Folder).where(
                        and_(
                            Folder.id == current_id,
                            Folder.owner_id == owner_id
                        )
                    )
                )
                deleted_folders += folder_result.rowcount or 0

        logger.info(
            "Cascade deleted folder %s for owner %s: %d folders, %d notes",
            folder_id, owner_id, deleted_folders, deleted_notes
        )
        return {"folders": deleted_folders, "notes": deleted_notes}

    @staticmethod
    async def _post_order(db: AsyncSession, owner_id: int, folder_id: int) -> List[int]:
        """返回以 folder_id 为根的子树的后序（子孙在前，自身在后）ID列表"""
        order: List[int] = []
        visited = set()
        stack = [(folder_id, False)]
        while stack:
            current_id, expanded = stack.pop()
            if expanded:
                order.append(current_id)
                continue
            if current_id in visited:
                continue
            visited.add(current_id)
            stack.append((current_id, True))

            result = await db.execute(
                select(Folder.id).where(
                    and_(
                        Folder.parent_id == current_id,
                        Folder.owner_id == owner_id
                    )
                )
            )
            for child_id in result.scalars().all():
                stack.append((child_id, False))
        return order

    @staticmethod
    async def list_children(db: AsyncSession, owner_id: int, parent_id: Optional[int]) -> List[Folder]:
        """列出指定父文件夹下的直接子文件夹，按名称升序；parent_id 为 None 时列出根级"""
        if parent_id is not None and not fits_id_column(parent_id):
            return []
        if parent_id is None:
            parent_clause = Folder.parent_id.is_(None)
        else:
            parent_clause = Folder.parent_id == parent_id

        result = await db.execute(
            select(Folder)
            .where(and_(Folder.owner_id == owner_id, parent_clause))
            .order_by(Folder.name.asc(), Folder.id.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_all(db: AsyncSession, owner_id: int) -> List[Folder]:
        """列出所有者的全部文件夹，按 (path, name) 升序"""
        result = await db.execute(
            select(Folder)
            .where(Folder.owner_id == owner_id)
            .order_by(Folder.path.asc(), Folder.name.asc(), Folder.id.asc())
        )
        return list(result.scalars().all())
