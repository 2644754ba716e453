"""Tests for commit_graph.parsers: git-log text, JSON and format detection."""

import pytest

from commit_graph.parsers import GitLogParser, JsonLogParser, detect_type, parse


def test_detect_type():
    assert detect_type('[{"id": "a"}]') == "json"
    assert detect_type('  \n{"commits": []}') == "json"
    assert detect_type("abc123 def456\n") == "gitlog"
    assert detect_type("") == "gitlog"


def test_parse_tab_separated_log():
    input = "c3\tc2\tAdd feature\nc2\tc1 c0\tMerge branch 'x'\nc1\t\tInitial\n"
    history = parse(input)
    assert [r.id for r in history.records] == ["c3", "c2", "c1"]
    assert history.records[1].parent_ids == ("c1", "c0")
    assert history.records[2].parent_ids == ()
    assert history.records[1].subject == "Merge branch 'x'"
    assert history.head_id is None


def test_parse_subject_keeps_tabs():
    history = GitLogParser().parse("a\t\tfix:\tthing\n")
    assert history.records[0].subject == "fix:\tthing"


def test_parse_rev_list_parents():
    history = parse("c2 c1 c0\nc1\nc0\n")
    assert [r.parent_ids for r in history.records] == [("c1", "c0"), (), ()]
    assert history.records[0].subject == ""


def test_parse_skips_blank_and_comment_lines():
    history = parse("# exported\n\nb a\n\na\n")
    assert len(history) == 2


def test_parse_empty_log():
    assert parse("").records == []


def test_parse_tab_line_without_id_fails():
    with pytest.raises(ValueError, match="line 1"):
        GitLogParser().parse("\tabc\tsubject\n")


def test_parse_json_list():
    input = '[{"id": "b", "parents": ["a"], "subject": "second"}, {"id": "a", "parents": []}]'
    history = parse(input)
    assert [r.id for r in history.records] == ["b", "a"]
    assert history.records[0].parent_ids == ("a",)
    assert history.records[0].subject == "second"
    assert history.records[0].is_committed


def test_parse_json_object_with_head():
    input = '{"head": "b", "commits": [{"oid": "b", "parentOids": ["a"]}, {"hash": "a"}]}'
    history = parse(input)
    assert history.head_id == "b"
    assert [r.id for r in history.records] == ["b", "a"]
    assert history.records[1].parent_ids == ()


def test_parse_json_flags_and_summary():
    input = '[{"id": "w", "parentIds": ["a"], "isCommitted": false, "summary": "wip"}, {"id": "a", "isCurrent": true}]'
    history = parse(input)
    assert not history.records[0].is_committed
    assert history.records[0].subject == "wip"
    assert history.records[1].is_current


def test_parse_json_invalid_syntax():
    with pytest.raises(ValueError, match="invalid JSON"):
        parse("[{")


def test_parse_json_missing_id():
    with pytest.raises(ValueError, match="commit 0: missing commit id"):
        JsonLogParser().parse('[{"parents": []}]')


def test_parse_json_bad_parents():
    with pytest.raises(ValueError, match="parents must be a list"):
        parse('[{"id": "a", "parents": "b"}]')


def test_parse_json_wrong_top_level():
    with pytest.raises(ValueError, match="expected a list of commits"):
        parse('{"rows": []}')


def test_parse_json_non_object_commit():
    with pytest.raises(ValueError, match="expected an object"):
        parse('["a"]')
