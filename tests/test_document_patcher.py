import pytest

from utils.document_patcher import (
    compose_changelog_section,
    extract_section,
    read_document,
    replace_between_markers,
    section_markers,
    write_document,
)

START, END = section_markers("changelog")

DOC = (
    "# Changelog\n"
    "\n"
    "Intro text.\n"
    f"{START}\n"
    "### v1.0.0\n"
    "- first release\n"
    f"{END}\n"
    "\n"
    "Footer $1 \\1 stays.\n"
)


def test_markers_use_namespace():
    assert section_markers("readme") == (
        "<!-- RELEASE-GENIE:readme-START -->",
        "<!-- RELEASE-GENIE:readme-END -->",
    )
    assert section_markers("x", namespace="NS") == ("<!-- NS:x-START -->", "<!-- NS:x-END -->")


def test_replace_preserves_outside_and_trims_body():
    out = replace_between_markers(DOC, "changelog", "\n\n  - new entry  \n\n")
    prefix, rest = DOC.split(START, 1)
    suffix = rest.split(END, 1)[1]
    assert out == f"{prefix}{START}\n- new entry\n{END}{suffix}"


def test_missing_markers_is_noop(caplog):
    doc = "# Readme\n\nNo markers here.\n"
    assert replace_between_markers(doc, "changelog", "body") == doc
    assert "Markers for section changelog not found" in caplog.text


def test_other_section_untouched():
    assert replace_between_markers(DOC, "whats-new", "body") == DOC


@pytest.mark.parametrize("body", [
    r"uses \1 and \g<0> and $& literally",
    "contains <!-- RELEASE-GENIE:changelog-END --> inside",
    "contains <!-- RELEASE-GENIE:changelog-START --> inside",
])
def test_body_is_inserted_literally(body):
    out = replace_between_markers(DOC, "changelog", body)
    start_idx = out.index(START) + len(START)
    end_idx = out.rindex(END)
    assert out[start_idx:end_idx] == f"\n{body}\n"
    assert out.startswith(DOC.split(START, 1)[0])
    assert out.endswith(DOC.split(END, 1)[1])


@pytest.mark.parametrize("body", [
    "- plain body",
    "contains <!-- RELEASE-GENIE:changelog-END --> inside",
])
def test_patch_is_idempotent(body):
    once = replace_between_markers(DOC, "changelog", body)
    assert replace_between_markers(once, "changelog", body) == once


def test_out_of_order_markers_are_noop():
    doc = f"a\n{END}\nb\n{START}\nc\n"
    assert replace_between_markers(doc, "changelog", "body") == doc


def test_duplicate_markers_are_noop():
    doc = f"{START}\none\n{END}\n{START}\ntwo\n{END}\n"
    assert replace_between_markers(doc, "changelog", "body") == doc
    assert extract_section(doc, "changelog") is None


def test_markers_are_case_sensitive():
    doc = DOC.replace("RELEASE-GENIE", "release-genie")
    assert replace_between_markers(doc, "changelog", "body") == doc


def test_extract_section():
    assert extract_section(DOC, "changelog") == "### v1.0.0\n- first release"
    assert extract_section("nothing", "changelog") is None


def test_compose_changelog_section_prepends():
    body = compose_changelog_section("v1.1.0", "- added X", "### v1.0.0\n- first release")
    assert body == "### v1.1.0\n\n- added X\n\n### v1.0.0\n- first release"
    assert compose_changelog_section("v1.0.0", "- first", None) == "### v1.0.0\n\n- first"


def test_compose_changelog_section_replaces_rerun_entry():
    previous = "### v1.1.0\n\n- stale notes\n\n### v1.0.0\n- first release"
    body = compose_changelog_section("v1.1.0", "- added X", previous)
    assert body == "### v1.1.0\n\n- added X\n\n### v1.0.0\n- first release"
    assert body.count("### v1.1.0") == 1
    assert compose_changelog_section("v1.0.0", "- again", "### v1.0.0\n- first") == "### v1.0.0\n\n- again"
    # Only a leading entry for the same tag is replaced
    assert compose_changelog_section("v1.0.0", "- x", "### v1.0.0-rc1\n- rc").endswith("### v1.0.0-rc1\n- rc")


def test_read_and_write_document(tmp_path):
    path = tmp_path / "CHANGELOG.md"
    assert read_document(str(path)) is None
    path.write_bytes(DOC.replace("\n", "\r\n").encode("utf-8"))
    content = read_document(str(path))
    assert "\r\n" in content
    assert write_document(str(path), content, content) is False
    patched = replace_between_markers(content, "changelog", "- new")
    assert write_document(str(path), content, patched) is True
    assert path.read_bytes().decode("utf-8") == patched
