import hashlib
import uuid

from services.note_index.IndexService import make_point_id
from services.note_index.NoteMetadata import extract_tags, extract_title
from tests.conftest import make_document


def test_point_id_is_md5_of_path_and_index():
    expected = hashlib.md5(b"daily/2025-07-22.md_chunk_3").hexdigest()
    assert make_point_id("daily/2025-07-22.md", 3) == expected


def test_point_id_is_stable_and_distinct():
    assert make_point_id("a.md", 0) == make_point_id("a.md", 0)
    assert make_point_id("a.md", 0) != make_point_id("a.md", 1)
    assert make_point_id("a.md", 0) != make_point_id("b.md", 0)


def test_point_id_is_a_valid_uuid():
    point_id = make_point_id("projects/launch.md", 0)
    assert len(point_id) == 32
    assert uuid.UUID(point_id).hex == point_id


def test_title_from_frontmatter_wins():
    doc = make_document("notes/x.md", "# Heading\n\nbody", frontmatter={"title": "From Frontmatter"})
    assert extract_title(doc) == "From Frontmatter"


def test_title_from_first_h1():
    doc = make_document("notes/x.md", "intro\n## Sub\n# Real Title \n# Second")
    assert extract_title(doc) == "Real Title"


def test_title_falls_back_to_file_stem():
    doc = make_document("daily/2025-07-22.md", "no headings here\n## only h2")
    assert extract_title(doc) == "2025-07-22"


def test_tags_from_frontmatter_list_and_inline():
    doc = make_document(
        "x.md",
        "Talked about #project-x and #planning, also #project-x again.",
        frontmatter={"tags": ["planning", "work"]},
    )
    assert extract_tags(doc) == ["planning", "work", "project-x"]


def test_scalar_frontmatter_tag():
    doc = make_document("x.md", "body", frontmatter={"tags": "solo"})
    assert extract_tags(doc) == ["solo"]


def test_no_tags():
    doc = make_document("x.md", "plain body")
    assert extract_tags(doc) == []
