import pytest

from utils.change_collector import (
    EMPTY_TREE_SHA,
    ChangeCollector,
    parse_git_log,
    resolve_previous_tag,
)
from utils.git_runner import GitCommandError


@pytest.mark.parametrize("tags, current, expected", [
    (["v3", "v2", "v1"], "v2", "v1"),
    (["v3", "v2", "v1"], "v3", "v2"),
    (["v3", "v2", "v1"], "v1", None),
    (["v3", "v2"], "v4", "v2"),
    (["v1"], "v1", None),
    (["v1"], "v9", None),
    ([], "v1", None),
])
def test_resolve_previous_tag(tags, current, expected):
    assert resolve_previous_tag(tags, current) == expected


def test_missing_tag_logs_warning(caplog):
    resolve_previous_tag(["v3", "v2"], "v4")
    assert "Current tag v4 not found in tags list" in caplog.text


def test_parse_git_log_keeps_multiline_bodies():
    output = (
        "abc123\x1ffeat: add X\x1fAda\x1fada@example.com\x1fMon Jan 1 2024\x1fline one\nline two || pipes\x1e\n"
        "def456\x1ffix: Y\x1fBob\x1fbob@example.com\x1fTue Jan 2 2024\x1f\x1e"
    )
    commits = parse_git_log(output)
    assert [c.hash for c in commits] == ["abc123", "def456"]
    assert commits[0].body == "line one\nline two || pipes"
    assert commits[1].author_email == "bob@example.com"
    assert commits[1].body == ""


def test_collect_with_previous_tag(fake_git_cls):
    git = fake_git_cls({
        ("tag",): "v2\nv1\n",
        ("log",): "abc\x1fsubject\x1fA\x1fa@x\x1fdate\x1fbody\x1e",
        ("diff",): " 1 file changed, 2 insertions(+)",
    })
    collector = ChangeCollector(git)
    prev = collector.get_previous_tag("v2")
    change_set = collector.collect("v2", prev)
    assert prev == "v1"
    assert ("tag", "--sort=-creatordate") in git.calls
    assert git.calls[1][:2] == ("log", "v1..v2")
    assert git.calls[2] == ("diff", "--stat", "v1", "v2")
    assert len(change_set.commits) == 1
    assert change_set.diff_stat == " 1 file changed, 2 insertions(+)"


def test_collect_without_previous_tag_uses_whole_history(fake_git_cls):
    git = fake_git_cls()
    change_set = ChangeCollector(git).collect("v1", None)
    assert git.calls[0][:2] == ("log", "v1")
    assert git.calls[1] == ("diff", "--stat", EMPTY_TREE_SHA, "v1")
    assert change_set.commits == ()


def test_git_failure_propagates(fake_git_cls):
    git = fake_git_cls(fail_on=("tag",))
    with pytest.raises(GitCommandError):
        ChangeCollector(git).get_previous_tag("v1")


def test_change_set_is_immutable(fake_git_cls):
    change_set = ChangeCollector(fake_git_cls()).collect("v1", None)
    with pytest.raises(Exception):
        change_set.diff_stat = "changed"
