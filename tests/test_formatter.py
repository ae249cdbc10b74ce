"""Tests for default path formatting."""

import pytest

from graphite_bridge.core.errors import ValidationError
from graphite_bridge.paths.formatter import default_path, sorted_label_names
from graphite_bridge.paths.models import OutputFormat

ESCAPED = r'abc!ABC:012-3!45%C3%B667~89%2E%2F\(\)\{\}\,%3D%2E\"\\'

METRIC = {
    "__name__": "test:metric",
    "testlabel": "test:value",
    "owner": "team-X",
    "many_chars": 'abc!ABC:012-3!45ö67~89./(){},=."\\',
}


class TestSortedLabelNames:
    def test_excludes_name_and_sorts(self):
        assert sorted_label_names(METRIC) == ["many_chars", "owner", "testlabel"]

    def test_insertion_order_irrelevant(self):
        reordered = dict(reversed(list(METRIC.items())))
        assert sorted_label_names(reordered) == sorted_label_names(METRIC)


class TestDefaultPath:
    """Tests for default_path() in each output format."""

    def test_plain_path(self):
        expected = (
            "prefix."
            "test:metric"
            ".many_chars." + ESCAPED +
            ".owner.team-X"
            ".testlabel.test:value"
        )
        assert default_path(METRIC, OutputFormat.PLAIN_PATH, "prefix.") == expected

    def test_tagged_path(self):
        expected = (
            "prefix."
            "test:metric"
            ";many_chars=" + ESCAPED +
            ";owner=team-X"
            ";testlabel=test:value"
        )
        assert default_path(METRIC, OutputFormat.TAGGED_PATH, "prefix.") == expected

    def test_brace_tagged(self):
        expected = (
            "prefix."
            "test:metric{"
            'many_chars="' + ESCAPED + '"'
            ',owner="team-X"'
            ',testlabel="test:value"'
            "}"
        )
        assert default_path(METRIC, OutputFormat.BRACE_TAGGED, "prefix.") == expected

    def test_name_only(self):
        metric = {"__name__": "up"}
        assert default_path(metric, OutputFormat.PLAIN_PATH, "") == "up"
        assert default_path(metric, OutputFormat.TAGGED_PATH, "") == "up"
        assert default_path(metric, OutputFormat.BRACE_TAGGED, "") == "up{}"

    def test_metric_name_is_escaped(self):
        metric = {"__name__": "a.b"}
        assert default_path(metric, OutputFormat.PLAIN_PATH, "p.") == "p.a%2Eb"

    def test_deterministic_across_insertion_order(self):
        a = {"__name__": "m", "b": "2", "a": "1", "c": "3"}
        b = {"c": "3", "a": "1", "__name__": "m", "b": "2"}
        for fmt in OutputFormat:
            assert default_path(a, fmt, "") == default_path(b, fmt, "")
        assert default_path(a, OutputFormat.PLAIN_PATH, "") == "m.a.1.b.2.c.3"

    def test_missing_name(self):
        with pytest.raises(ValidationError):
            default_path({"owner": "team-X"}, OutputFormat.PLAIN_PATH, "")
