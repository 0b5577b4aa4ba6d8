"""
测试文件夹树存储：path维护、所有者隔离、级联删除
"""
import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.sql.dml import Delete

from notetree.core.exceptions import ValidationError, NotFoundError, StorageError
from notetree.models.folder import Folder
from notetree.models.note import Note
from notetree.services.folder_tree import FolderTreeStore, child_path
from notetree.services.note_service import NoteService


def expected_path(parent):
    if parent is None:
        return "/"
    return child_path(parent.path, parent.name)


def test_child_path_formula():
    assert child_path("/", "Work") == "/Work"
    assert child_path("/Work", "Projects") == "/Work/Projects"
    assert child_path("/Work/Projects", "2024") == "/Work/Projects/2024"


async def test_create_root_and_nested_paths(db, owner):
    work = await FolderTreeStore.create_folder(db, owner, "Work")
    projects = await FolderTreeStore.create_folder(db, owner, "Projects", work.id)
    archive = await FolderTreeStore.create_folder(db, owner, "Archive", projects.id)

    assert work.path == "/"
    assert work.parent_id is None
    assert projects.path == "/Work"
    assert archive.path == "/Work/Projects"
    assert archive.path == expected_path(projects)


async def test_create_trims_name(db, owner):
    folder = await FolderTreeStore.create_folder(db, owner, "  Inbox  ")
    assert folder.name == "Inbox"


@pytest.mark.parametrize("name", ["", "   ", None])
async def test_create_rejects_empty_name(db, owner, name):
    with pytest.raises(ValidationError):
        await FolderTreeStore.create_folder(db, owner, name)


async def test_create_rejects_long_name(db, owner):
    with pytest.raises(ValidationError):
        await FolderTreeStore.create_folder(db, owner, "x" * 101)
    folder = await FolderTreeStore.create_folder(db, owner, "x" * 100)
    assert len(folder.name) == 100


async def test_create_with_missing_parent(db, owner):
    with pytest.raises(NotFoundError):
        await FolderTreeStore.create_folder(db, owner, "Orphan", 9999)
    assert await FolderTreeStore.list_all(db, owner) == []


async def test_create_under_other_owners_parent(db, owner, other_owner):
    foreign = await FolderTreeStore.create_folder(db, other_owner, "Private")

    with pytest.raises(NotFoundError):
        await FolderTreeStore.create_folder(db, owner, "X", foreign.id)
    assert await FolderTreeStore.list_all(db, owner) == []


async def test_rename_keeps_descendant_paths_stale(db, owner):
    work = await FolderTreeStore.create_folder(db, owner, "Work")
    projects = await FolderTreeStore.create_folder(db, owner, "Projects", work.id)

    job = await FolderTreeStore.rename_folder(db, owner, work.id, "Job", cascade_paths=False)
    assert job.name == "Job"
    assert job.path == "/"

    reloaded = await FolderTreeStore.get_folder(db, owner, projects.id)
    assert reloaded.path == "/Work"


async def test_rename_recomputes_own_path_from_parent(db, owner):
    work = await FolderTreeStore.create_folder(db, owner, "Work")
    projects = await FolderTreeStore.create_folder(db, owner, "Projects", work.id)
    await FolderTreeStore.rename_folder(db, owner, work.id, "Job", cascade_paths=False)

    renamed = await FolderTreeStore.rename_folder(db, owner, projects.id, "Plans", cascade_paths=False)
    assert renamed.path == "/Job"


async def test_rename_with_cascading_paths(db, owner):
    work = await FolderTreeStore.create_folder(db, owner, "Work")
    projects = await FolderTreeStore.create_folder(db, owner, "Projects", work.id)
    archive = await FolderTreeStore.create_folder(db, owner, "Archive", projects.id)
    other = await FolderTreeStore.create_folder(db, owner, "Home")

    await FolderTreeStore.rename_folder(db, owner, work.id, "Job", cascade_paths=True)

    assert (await FolderTreeStore.get_folder(db, owner, projects.id)).path == "/Job"
    assert (await FolderTreeStore.get_folder(db, owner, archive.id)).path == "/Job/Projects"
    assert (await FolderTreeStore.get_folder(db, owner, other.id)).path == "/"


async def test_rename_scoped_by_owner(db, owner, other_owner):
    foreign = await FolderTreeStore.create_folder(db, other_owner, "Private")
    foreign_id = foreign.id

    with pytest.raises(NotFoundError):
        await FolderTreeStore.rename_folder(db, owner, foreign_id, "Mine")

    unchanged = await FolderTreeStore.get_folder(db, other_owner, foreign_id)
    assert unchanged.name == "Private"


async def test_rename_rejects_empty_name(db, owner):
    folder = await FolderTreeStore.create_folder(db, owner, "Work")
    with pytest.raises(ValidationError):
        await FolderTreeStore.rename_folder(db, owner, folder.id, "  ")


async def test_cascade_delete_removes_subtree(db, owner):
    a = await FolderTreeStore.create_folder(db, owner, "A")
    b = await FolderTreeStore.create_folder(db, owner, "B", a.id)
    await NoteService.place_note(db, owner, b.id, title="N1", content="body")

    deleted = await FolderTreeStore.delete_folder_cascade(db, owner, a.id)

    assert deleted == {"folders": 2, "notes": 1}
    assert await FolderTreeStore.list_all(db, owner) == []
    assert await NoteService.list_notes(db, owner) == []


async def test_cascade_delete_rolls_back_on_storage_failure(db, owner, monkeypatch):
    a = await FolderTreeStore.create_folder(db, owner, "A")
    b = await FolderTreeStore.create_folder(db, owner, "B", a.id)
    note = await NoteService.place_note(db, owner, b.id, title="N1", content="body")
    a_id, b_id, note_id = a.id, b.id, note.id

    real_execute = db.execute
    deletes = []

    async def failing_execute(statement, *args, **kwargs):
        if isinstance(statement, Delete):
            deletes.append(statement)
            # 第三条 DELETE 是删除 A 中的笔记，此时 B 及其笔记已在事务中删除
            if len(deletes) == 3:
                raise OperationalError("DELETE", {}, Exception("disk I/O error"))
        return await real_execute(statement, *args, **kwargs)

    monkeypatch.setattr(db, "execute", failing_execute)

    with pytest.raises(StorageError) as exc:
        await FolderTreeStore.delete_folder_cascade(db, owner, a_id)

    assert isinstance(exc.value.__cause__, OperationalError)
    assert exc.value.operation == "delete_folder_cascade"

    monkeypatch.undo()
    remaining = await FolderTreeStore.list_all(db, owner)
    assert [(folder.id, folder.name) for folder in remaining] == [(a_id, "A"), (b_id, "B")]
    notes = await NoteService.list_notes(db, owner)
    assert [(item.id, item.folder_id) for item in notes] == [(note_id, b_id)]


async def test_cascade_delete_deep_tree_leaves_siblings(db, owner):
    top = await FolderTreeStore.create_folder(db, owner, "Top")
    keep = await FolderTreeStore.create_folder(db, owner, "Keep")
    kept_note = await NoteService.place_note(db, owner, keep.id, title="stay", content="here")
    root_note = await NoteService.place_note(db, owner, None, title="root", content="note")

    parent = top
    subtree_ids = [top.id]
    for depth in range(30):
        parent = await FolderTreeStore.create_folder(db, owner, f"level-{depth}", parent.id)
        subtree_ids.append(parent.id)
        await NoteService.place_note(db, owner, parent.id, title=f"n{depth}", content="x")
    # 同一层级的多个兄弟
    for name in ("x", "y", "z"):
        await FolderTreeStore.create_folder(db, owner, name, top.id)

    deleted = await FolderTreeStore.delete_folder_cascade(db, owner, top.id)
    assert deleted == {"folders": 34, "notes": 30}

    remaining = await FolderTreeStore.list_all(db, owner)
    assert [folder.id for folder in remaining] == [keep.id]

    notes = await NoteService.list_notes(db, owner)
    assert {note.id for note in notes} == {kept_note.id, root_note.id}

    orphans = await db.execute(select(Folder).where(Folder.parent_id.in_(subtree_ids)))
    assert orphans.scalars().all() == []
    orphan_notes = await db.execute(select(Note).where(Note.folder_id.in_(subtree_ids)))
    assert orphan_notes.scalars().all() == []


async def test_cascade_delete_scoped_by_owner(db, owner, other_owner):
    foreign = await FolderTreeStore.create_folder(db, other_owner, "Private")
    await NoteService.place_note(db, other_owner, foreign.id, title="secret", content="x")

    with pytest.raises(NotFoundError):
        await FolderTreeStore.delete_folder_cascade(db, owner, foreign.id)

    assert len(await FolderTreeStore.list_all(db, other_owner)) == 1
    assert len(await NoteService.list_notes(db, other_owner)) == 1


async def test_cascade_delete_missing_folder(db, owner):
    with pytest.raises(NotFoundError):
        await FolderTreeStore.delete_folder_cascade(db, owner, 12345)


async def test_list_children_sorted_by_name(db, owner, other_owner):
    parent = await FolderTreeStore.create_folder(db, owner, "Parent")
    for name in ("delta", "alpha", "charlie", "bravo"):
        await FolderTreeStore.create_folder(db, owner, name, parent.id)
    await FolderTreeStore.create_folder(db, owner, "Another root")
    await FolderTreeStore.create_folder(db, other_owner, "Foreign root")

    children = await FolderTreeStore.list_children(db, owner, parent.id)
    assert [folder.name for folder in children] == ["alpha", "bravo", "charlie", "delta"]

    roots = await FolderTreeStore.list_children(db, owner, None)
    assert [folder.name for folder in roots] == ["Another root", "Parent"]


async def test_list_all_sorted_by_path_then_name(db, owner, other_owner):
    work = await FolderTreeStore.create_folder(db, owner, "Work")
    home = await FolderTreeStore.create_folder(db, owner, "Home")
    await FolderTreeStore.create_folder(db, owner, "Taxes", home.id)
    await FolderTreeStore.create_folder(db, owner, "Projects", work.id)
    await FolderTreeStore.create_folder(db, owner, "Meetings", work.id)
    await FolderTreeStore.create_folder(db, other_owner, "Foreign")

    folders = await FolderTreeStore.list_all(db, owner)
    assert [(folder.path, folder.name) for folder in folders] == [
        ("/", "Home"),
        ("/", "Work"),
        ("/Home", "Taxes"),
        ("/Work", "Meetings"),
        ("/Work", "Projects"),
    ]
