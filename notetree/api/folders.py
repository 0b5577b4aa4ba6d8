"""
文件夹管理API
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from notetree.db.database import get_db
from notetree.schemas.common import ResponseModel
from notetree.schemas.folder import (
    FolderCreate, FolderRename, FolderTreeNode, FolderTreeResponse,
    folder_response
)
from notetree.schemas.note import note_response
from notetree.services.folder_tree import FolderTreeStore
from notetree.services.navigation import TreeNavigator, FolderNode
from notetree.utils.auth import get_current_owner_id

router = APIRouter(prefix="/folders", tags=["文件夹"])


def build_tree_nodes(nodes: List[FolderNode]) -> List[FolderTreeNode]:
    """
    把导航层的树节点递归转换为响应模型
    """
    return [
        FolderTreeNode(
            id=node.folder.id,
            name=node.folder.name,
            parentId=node.folder.parent_id,
            path=node.folder.path,
            children=build_tree_nodes(node.children),
            notes=[note_response(note) for note in node.notes]
        )
        for node in nodes
    ]


@router.post("", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_folder(
    folder_data: FolderCreate,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_current_owner_id)
):
    """
    创建文件夹
    """
    folder = await FolderTreeStore.create_folder(db, owner_id, folder_data.name, folder_data.parentId)
    return ResponseModel(
        message="Folder created successfully",
        folder=folder_response(folder)
    )


@router.get("", response_model=ResponseModel)
async def list_folders(
    parentId: Optional[int] = Query(None, description="父文件夹ID，为空表示根级"),
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_current_owner_id)
):
    """
    获取某个父文件夹下的直接子文件夹
    """
    folders = await FolderTreeStore.list_children(db, owner_id, parentId)
    return ResponseModel(
        count=len(folders),
        folders=[folder_response(folder) for folder in folders]
    )


@router.get("/all", response_model=ResponseModel)
async def list_all_folders(
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_current_owner_id)
):
    """
    获取全部文件夹（按 path、name 排序）
    """
    folders = await TreeNavigator.get_whole_tree(db, owner_id)
    return ResponseModel(
        count=len(folders),
        folders=[folder_response(folder) for folder in folders]
    )


@router.get("/tree", response_model=ResponseModel)
async def get_folder_tree(
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_current_owner_id)
):
    """
    获取嵌套的文件夹树（含笔记）
    """
    tree = await TreeNavigator.get_folder_tree(db, owner_id)
    return ResponseModel(
        tree=FolderTreeResponse(
            folders=build_tree_nodes(tree.folders),
            notes=[note_response(note) for note in tree.notes]
        )
    )


@router.get("/{folder_id}/contents", response_model=ResponseModel)
async def get_folder_contents(
    folder_id: str,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_current_owner_id)
):
    """
    获取文件夹内容（子文件夹和笔记），folder_id 为 root 时表示根目录
    """
    contents = await TreeNavigator.get_contents(db, owner_id, folder_id)
    return ResponseModel(
        currentFolder=folder_response(contents.current_folder) if contents.current_folder else None,
        folders=[folder_response(folder) for folder in contents.subfolders],
        notes=[note_response(note) for note in contents.notes]
    )


@router.put("/{folder_id}", response_model=ResponseModel)
async def rename_folder(
    folder_id: int,
    rename_data: FolderRename,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_current_owner_id)
):
    """
    重命名文件夹
    """
    folder = await FolderTreeStore.rename_folder(db, owner_id, folder_id, rename_data.name)
    return ResponseModel(
        message="Folder updated successfully",
        folder=folder_response(folder)
    )


@router.delete("/{folder_id}", response_model=ResponseModel)
async def delete_folder(
    folder_id: int,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_current_owner_id)
):
    """
    删除文件夹及其全部子文件夹和笔记
    """
    deleted = await FolderTreeStore.delete_folder_cascade(db, owner_id, folder_id)
    return ResponseModel(
        message="Folder and all contents deleted successfully",
        deleted=deleted
    )
