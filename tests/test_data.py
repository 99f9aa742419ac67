"""Tests for taft.data: merging, decoding, source resolution and the store."""

from __future__ import annotations

import io
import logging

import pytest

from taft.data import (
    DataStore,
    decode_data,
    deep_merge,
    parse_front_matter,
    read_data_file,
    resolve_sources,
    sniff_format,
)
from taft.data.decoders import format_for_path
from taft.exceptions import DecodeError


class TestDeepMerge:
    def test_later_layer_wins(self):
        assert deep_merge({"a": 1, "b": 1}, {"b": 2}) == {"a": 1, "b": 2}

    def test_nested_mappings_merge_keywise(self):
        merged = deep_merge(
            {"site": {"name": "X", "url": "http://x"}},
            {"site": {"name": "Y"}},
        )
        assert merged == {"site": {"name": "Y", "url": "http://x"}}

    def test_lists_are_replaced(self):
        assert deep_merge({"tags": [1, 2]}, {"tags": [3]}) == {"tags": [3]}

    def test_none_layers_ignored(self):
        assert deep_merge(None, {"a": 1}, None) == {"a": 1}

    def test_inputs_not_mutated(self):
        base = {"site": {"name": "X"}}
        merged = deep_merge(base, {"site": {"name": "Y"}})
        merged["site"]["extra"] = True
        assert base == {"site": {"name": "X"}}

    def test_explicit_none_overrides(self):
        assert deep_merge({"layout": "main"}, {"layout": None}) == {"layout": None}


class TestFrontMatter:
    def test_splits_data_and_body(self):
        doc = parse_front_matter("---\ntitle: Hi\npublished: true\n---\n\n<p>body</p>\n")
        assert doc.data == {"title": "Hi", "published": True}
        assert doc.content == "\n<p>body</p>\n"

    def test_no_front_matter(self):
        doc = parse_front_matter("just text")
        assert doc.data == {}
        assert doc.content == "just text"

    def test_empty_front_matter(self):
        doc = parse_front_matter("---\n---\nbody")
        assert doc.data == {}
        assert doc.content == "body"

    def test_non_mapping_is_error(self):
        with pytest.raises(DecodeError):
            parse_front_matter("---\n- a\n- b\n---\nbody")

    def test_invalid_yaml_is_error(self):
        with pytest.raises(DecodeError, match="invalid YAML"):
            parse_front_matter("---\ntitle: [unclosed\n---\nbody")


class TestDecodeData:
    def test_sniffing(self):
        assert sniff_format('{"a": 1}') == "json"
        assert sniff_format("---\na: 1\n---\n") == "front-matter"
        assert sniff_format("a: 1") == "yaml"

    def test_json(self):
        assert decode_data('{"a": {"b": 2}}') == {"a": {"b": 2}}

    def test_yaml_document_marker_without_closing(self):
        assert decode_data("---\na: 1\n") == {"a": 1}

    def test_front_matter_block(self):
        assert decode_data("---\na: 1\n---\nignored body") == {"a": 1}

    def test_ini_sections(self):
        data = decode_data("name = top\n[author]\nName = Ada\n", fmt="ini")
        assert data == {"name": "top", "author": {"Name": "Ada"}}

    def test_bad_json(self):
        with pytest.raises(DecodeError, match="invalid JSON"):
            decode_data("{not json}", fmt="json")

    def test_json_list_rejected(self):
        with pytest.raises(DecodeError, match="expected a mapping"):
            decode_data("[1, 2]", fmt="json")

    def test_read_data_file_uses_extension(self, write):
        path = write("data.json", '{"a": 1}')
        assert read_data_file(path) == {"a": 1}

    @pytest.mark.parametrize("name", ["post.md", "page.hbs", "page.handlebars", "index.html"])
    def test_template_extensions_decode_front_matter(self, write, name):
        assert format_for_path(name) == "front-matter"
        path = write(name, "\n---\ntitle: T\n---\n# {{ title }}\n")
        assert read_data_file(path) == {"title": "T"}

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(DecodeError):
            read_data_file(tmp_path / "missing.yaml")

    def test_read_directory(self, tmp_path):
        with pytest.raises(IsADirectoryError):
            read_data_file(tmp_path)


class TestResolveSources:
    def test_order_preserved(self, write):
        b = write("b.yaml", "x: b")
        a = write("a.yaml", "x: a")
        sources = resolve_sources([str(b), {"x": "inline"}, str(a)])
        assert [s.label for s in sources] == [str(b), "<mapping>", str(a)]

    def test_glob_expands_sorted(self, write, tmp_path):
        write("d/2.yaml", "n: 2")
        write("d/1.yaml", "n: 1")
        sources = resolve_sources(str(tmp_path / "d" / "*.yaml"))
        assert [s.path.name for s in sources] == ["1.yaml", "2.yaml"]

    def test_namespaced_source(self, write):
        path = write("authors.json", '{"ada": "Lovelace"}')
        (source,) = resolve_sources(f"authors={path}")
        assert source.load() == {"authors": {"ada": "Lovelace"}}

    def test_stdin_source(self, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO('{"from": "stdin"}'))
        (source,) = resolve_sources("-")
        assert source.load() == {"from": "stdin"}


class TestDataStore:
    def test_later_source_wins_and_keys_union(self):
        store = DataStore()
        store.add_data([{"a": 1, "shared": "A"}, {"b": 2, "shared": "B"}])
        assert store.snapshot() == {"a": 1, "b": 2, "shared": "B"}

    def test_successive_calls_accumulate(self):
        store = DataStore()
        store.add_data({"site": {"name": "X"}})
        store.add_data({"site": {"url": "u"}})
        assert store.snapshot() == {"site": {"name": "X", "url": "u"}}

    def test_snapshot_is_copy(self):
        store = DataStore()
        store.add_data({"site": {"name": "X"}})
        snap = store.snapshot()
        snap["site"]["name"] = "changed"
        assert store.snapshot()["site"]["name"] == "X"

    def test_failed_source_skipped(self, write, caplog):
        bad = write("bad.json", '{"a": 1,')
        good = write("good.yaml", "b: 2")
        store = DataStore()
        with caplog.at_level(logging.ERROR, logger="taft"):
            applied = store.add_data([str(bad), str(good)])
        assert applied == [str(good)]
        assert store.snapshot() == {"b": 2}
        assert "Skipping data source" in caplog.text

    def test_directory_skipped_silently(self, tmp_path):
        store = DataStore()
        assert store.add_data([str(tmp_path)]) == []
        assert len(store) == 0

    def test_clear(self):
        store = DataStore()
        store.add_data({"a": 1})
        store.clear()
        assert "a" not in store
