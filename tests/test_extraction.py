import time

import pytest

from vision_relay.extraction import JSONExtractionError, extract_json_object, find_json_object


class TestFindJsonObject:
    def test_object_surrounded_by_noise(self):
        assert find_json_object('noise {"a":1,"b":{"c":2}} trailing') == '{"a":1,"b":{"c":2}}'

    def test_returns_first_object(self):
        assert find_json_object('{"first": 1} and {"second": 2}') == '{"first": 1}'

    def test_deep_nesting(self):
        text = 'Result: {"a": {"b": {"c": {"d": 4}}}} done'
        assert find_json_object(text) == '{"a": {"b": {"c": {"d": 4}}}}'

    def test_braces_inside_strings(self):
        text = 'x {"open": "{", "close": "}}", "quote": "a \\" }"} y'
        assert find_json_object(text) == '{"open": "{", "close": "}}", "quote": "a \\" }"}'

    def test_unclosed_prefix_is_skipped(self):
        assert find_json_object('{ broken {"ok": true}') == '{"ok": true}'

    @pytest.mark.parametrize("text", ["", "plain text", "} {", "{ never closed"])
    def test_no_object(self, text):
        assert find_json_object(text) is None


class TestExtractJsonObject:
    def test_markdown_fenced(self):
        text = 'Here you go:\n```json\n{"distance_metres": 5000, "confidence_level": "high"}\n```'
        assert extract_json_object(text) == {"distance_metres": 5000, "confidence_level": "high"}

    def test_invalid_json_in_braces(self):
        with pytest.raises(JSONExtractionError):
            extract_json_object("{not: json}")

    def test_none_content(self):
        with pytest.raises(JSONExtractionError):
            extract_json_object(None)

    def test_no_object(self):
        with pytest.raises(JSONExtractionError):
            extract_json_object("nothing to see")


class TestScannerCost:
    def test_many_unclosed_braces_finish_quickly(self):
        started = time.perf_counter()
        assert find_json_object("{" * 50000) is None
        assert time.perf_counter() - started < 1.0

    def test_object_after_unclosed_braces(self):
        text = "{" * 20000 + '{"a": {"b": 1}}' + " tail"
        started = time.perf_counter()
        assert extract_json_object(text) == {"a": {"b": 1}}
        assert time.perf_counter() - started < 1.0

    def test_earliest_closed_object_inside_unclosed_one(self):
        assert find_json_object('{ "x": {"first": 1}, "y": {"second": 2}') == '{"first": 1}'
