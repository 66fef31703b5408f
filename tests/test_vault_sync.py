from datetime import timezone

import pytest

from services.engine.NoteSearchEngine import NoteSearchEngine
from services.note_index.IndexService import make_point_id
from sync.services.NoteLoader import iter_note_paths, load_note
from sync.services.VaultSyncService import VaultSyncService


@pytest.fixture
def vault(tmp_path):
    (tmp_path / "daily").mkdir()
    (tmp_path / ".obsidian").mkdir()
    (tmp_path / "daily" / "2025-07-04.md").write_text(
        "---\ntitle: Fourth of July\ntags: [holiday]\n---\n# Ignored heading\n\nMeeting with Bob about fireworks.\n",
        encoding="utf-8",
    )
    (tmp_path / "projects.md").write_text("# Projects\n\nLaunch plan for the rocket.\n", encoding="utf-8")
    (tmp_path / ".obsidian" / "workspace.md").write_text("internal", encoding="utf-8")
    (tmp_path / ".hidden.md").write_text("hidden note", encoding="utf-8")
    (tmp_path / "image.png").write_bytes(b"\x89PNG")
    return tmp_path


@pytest.fixture
def engine(helper_config, engine_config, rag_client, embed_client) -> NoteSearchEngine:
    return NoteSearchEngine(
        helper_config=helper_config,
        rag_client=rag_client,
        embed_client=embed_client,
        engine_config=engine_config,
    )


def test_iter_note_paths_skips_hidden_and_non_markdown(vault):
    assert list(iter_note_paths(vault)) == ["daily/2025-07-04.md", "projects.md"]


def test_load_note_splits_frontmatter(vault):
    doc = load_note(vault, "daily/2025-07-04.md")

    assert doc.id == doc.path == "daily/2025-07-04.md"
    assert doc.frontmatter == {"title": "Fourth of July", "tags": ["holiday"]}
    assert doc.content.startswith("# Ignored heading")
    assert "---" not in doc.content
    assert doc.last_modified.tzinfo == timezone.utc


def test_load_note_without_frontmatter(vault):
    doc = load_note(vault, "projects.md")
    assert doc.frontmatter == {}
    assert doc.content.startswith("# Projects")


@pytest.mark.asyncio
async def test_full_sync_indexes_every_note(helper_config, engine, rag_client, vault):
    service = VaultSyncService(helper_config=helper_config, engine=engine, rag_client=rag_client, notebook_path=vault)

    report = await service.do_full_sync()

    assert (report.synced, report.errors, report.removed) == (2, 0, 0)
    assert rag_client.collection_exists
    assert rag_client.paths() == {"daily/2025-07-04.md", "projects.md"}
    payload = rag_client.points[make_point_id("daily/2025-07-04.md", 0)]["payload"]
    assert payload["title"] == "Fourth of July"
    assert payload["tags"] == ["holiday"]


@pytest.mark.asyncio
async def test_failing_note_does_not_stop_the_others(helper_config, engine, rag_client, embed_client, vault):
    embed_client.fail_on_substring = "fireworks"
    service = VaultSyncService(helper_config=helper_config, engine=engine, rag_client=rag_client, notebook_path=vault)

    report = await service.do_full_sync()

    assert (report.synced, report.errors) == (1, 1)
    assert rag_client.paths() == {"projects.md"}


@pytest.mark.asyncio
async def test_full_sync_removes_deleted_notes(helper_config, engine, rag_client, vault):
    service = VaultSyncService(helper_config=helper_config, engine=engine, rag_client=rag_client, notebook_path=vault)
    await service.do_full_sync()

    (vault / "projects.md").unlink()
    report = await service.do_full_sync()

    assert report.removed == 1
    assert rag_client.paths() == {"daily/2025-07-04.md"}


@pytest.mark.asyncio
async def test_notebook_path_from_env(helper_config, engine, rag_client, vault, monkeypatch):
    monkeypatch.setenv("NOTEBOOK_PATH", str(vault))
    service = VaultSyncService(helper_config=helper_config, engine=engine, rag_client=rag_client)

    report = await service.do_full_sync()

    assert report.synced == 2


@pytest.mark.asyncio
async def test_missing_vault_directory_raises(helper_config, engine, rag_client, tmp_path):
    service = VaultSyncService(
        helper_config=helper_config, engine=engine, rag_client=rag_client, notebook_path=tmp_path / "nope"
    )
    with pytest.raises(ValueError, match="not a directory"):
        await service.do_full_sync()
