"""
目录导航

把文件夹查询和笔记查询组合成"文件夹内容"视图，并提供整棵树的数据。
"""
from dataclasses import dataclass, field
from typing import Optional, List, Union

from sqlalchemy.ext.asyncio import AsyncSession

from notetree.core.exceptions import NotFoundError
from notetree.models.folder import Folder
from notetree.models.note import Note
from notetree.models.types import fits_id_column
from notetree.services.folder_tree import FolderTreeStore
from notetree.services.note_service import NoteService

ROOT_TOKEN = "root"


@dataclass
class FolderContents:
    """文件夹内容视图，current_folder 为 None 表示根目录"""
    current_folder: Optional[Folder]
    subfolders: List[Folder]
    notes: List[Note]


@dataclass
class FolderNode:
    """树节点：文件夹及其子文件夹、笔记"""
    folder: Folder
    children: List["FolderNode"] = field(default_factory=list)
    notes: List[Note] = field(default_factory=list)


@dataclass
class FolderTree:
    """整棵树：根级文件夹和根目录下的笔记"""
    folders: List[FolderNode]
    notes: List[Note]


def parse_folder_ref(folder_ref: Union[str, int, None]) -> Optional[int]:
    """
    把外部传入的文件夹引用解析为文件夹ID

    字面量 "root" 和 None 表示根目录；其余值必须是整数ID，
    无法解析或超出ID列范围的值在任何所有者下都不存在，因此抛出 NotFoundError。
    """
    if folder_ref is None or folder_ref == ROOT_TOKEN:
        return None
    try:
        folder_id = int(folder_ref)
    except (TypeError, ValueError):
        raise NotFoundError("Folder", folder_ref)
    if not fits_id_column(folder_id):
        raise NotFoundError("Folder", folder_ref)
    return folder_id


class TreeNavigator:
    """目录导航"""

    @staticmethod
    async def get_contents(db: AsyncSession, owner_id: int, folder_ref: Union[str, int, None]) -> FolderContents:
        """
        获取文件夹内容

        Args:
            folder_ref: 文件夹ID，或字面量 "root" 表示根目录

        Raises:
            NotFoundError: 文件夹在该所有者下不存在
        """
        folder_id = parse_folder_ref(folder_ref)

        current_folder = None
        if folder_id is not None:
            current_folder = await FolderTreeStore.require_folder(db, owner_id, folder_id)

        subfolders = await FolderTreeStore.list_children(db, owner_id, folder_id)
        notes = await NoteService.list_notes_in_folder(db, owner_id, folder_id)
        return FolderContents(current_folder=current_folder, subfolders=subfolders, notes=notes)

    @staticmethod
    async def get_whole_tree(db: AsyncSession, owner_id: int) -> List[Folder]:
        """返回全部文件夹（按 path、name 排序），面包屑由调用方根据 parent/path 重建"""
        return await FolderTreeStore.list_all(db, owner_id)

    @staticmethod
    async def get_folder_tree(db: AsyncSession, owner_id: int) -> FolderTree:
        """
        构建嵌套的文件夹树

        只依据 parent 链构建，父节点总在子节点之前；
        同级文件夹按名称排序，笔记保持置顶优先、新建优先的顺序。
        """
        folders = await FolderTreeStore.list_all(db, owner_id)
        notes = await NoteService.list_notes(db, owner_id)

        nodes = {folder.id: FolderNode(folder=folder) for folder in folders}
        roots: List[FolderNode] = []
        for folder in sorted(folders, key=lambda f: (f.name, f.id)):
            node = nodes[folder.id]
            parent = nodes.get(folder.parent_id)
            if parent is None:
                roots.append(node)
            else:
                parent.children.append(node)

        root_notes: List[Note] = []
        for note in notes:
            node = nodes.get(note.folder_id)
            if node is None:
                root_notes.append(note)
            else:
                node.notes.append(note)

        return FolderTree(folders=roots, notes=root_notes)
