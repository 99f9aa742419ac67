"""Tests for taft.composer: building pages through layouts."""

from __future__ import annotations

import threading

import pytest

from taft import (
    Content,
    Failed,
    LayoutCycleError,
    LayoutRenderError,
    Rendered,
    Skipped,
    Taft,
    TemplateRenderError,
    render,
)
from taft.config import TaftConfig


def _body(result):
    assert isinstance(result, Rendered), result
    return result.content.body


class TestScenario:
    def test_page_and_layout_precedence(self, write):
        layout = write("layouts/main.hbs", '---\nlayout: null\n---\n{{ site }}: {% include "body" %}')
        page = write("page.hbs", "---\ntitle: Hi\n---\n<p>{{ title }}</p>")
        engine = Taft(data=[{"title": "Default", "site": "X"}], layouts=[layout])

        result = engine.build(page)
        assert _body(result) == "X: <p>Hi</p>"
        assert result.content.source == page

    def test_two_layouts_no_default_until_set(self, write):
        engine = Taft(layouts=[write("a.hbs", "A"), write("b.hbs", "B")])
        assert engine.default_layout is None
        engine.set_default_layout("a")
        assert engine.default_layout == "a"


class TestDefaultLayout:
    def test_single_layout_is_default_and_applied(self, write):
        engine = Taft(layouts=write("base.hbs", '<main>{% include "body" %}</main>'))
        assert engine.default_layout == "base"
        assert _body(engine.build(write("page.hbs", "hi"))) == "<main>hi</main>"

    def test_second_layout_keeps_default(self, write):
        engine = Taft(layouts=write("first.hbs", "1"))
        engine.set_layouts(write("second.hbs", "2"))
        assert engine.default_layout == "first"

    def test_layout_false_suppresses_default(self, write):
        engine = Taft(layouts=write("base.hbs", '<main>{% include "body" %}</main>'))
        page = write("plain.hbs", "---\nlayout: false\n---\nbare")
        assert _body(engine.build(page)) == "bare"

    def test_explicit_layout_beats_default(self, write):
        engine = Taft(layouts=[
            write("l/base.hbs", 'base:{% include "body" %}'),
            write("l/alt.hbs", 'alt:{% include "body" %}'),
        ], default_layout="base")
        page = write("page.hbs", "---\nlayout: alt\n---\nx")
        assert _body(engine.build(page)) == "alt:x"


class TestLayoutApplication:
    def test_page_data_available_under_page(self, write):
        layout = write(
            "main.hbs",
            '---\ntitle: Layout\n---\n{{ title }}|{{ page.title }}|{% include "body" %}',
        )
        page = write("page.hbs", "---\ntitle: Hi\n---\n{{ title }}")
        engine = Taft(layouts=layout)
        assert _body(engine.build(page)) == "Layout|Hi|Hi"

    def test_nested_layout_chain(self, write):
        outer = write("l/outer.hbs", '<html>{% include "body" %}</html>')
        inner = write("l/inner.hbs", '---\nlayout: outer\n---\n<main>{% include "body" %}</main>')
        page = write("page.hbs", "---\nlayout: inner\n---\n<p>x</p>")
        engine = Taft(layouts=[outer, inner])
        assert _body(engine.build(page)) == "<html><main><p>x</p></main></html>"

    def test_page_named_like_layout_is_not_wrapped_by_itself(self, write):
        layout = write("layouts/page.hbs", 'wrapped:{% include "body" %}')
        page = write("pages/page.hbs", "---\nlayout: page\n---\ncontent")
        engine = Taft(layouts=layout)
        assert _body(engine.build(page)) == "content"

    @pytest.mark.parametrize("value", ["main.html", "layouts/main.hbs", "main.hbs"])
    def test_layout_named_by_path_or_extension(self, write, value):
        engine = Taft(layouts=write("layouts/main.hbs", '<m>{% include "body" %}</m>'))
        page = write("page.hbs", f"---\nlayout: {value}\n---\nx")
        assert _body(engine.build(page)) == "<m>x</m>"

    def test_missing_layout_is_not_fatal(self, write):
        page = write("page.hbs", "---\nlayout: ghost\n---\ncontent")
        assert _body(Taft().build(page)) == "content"

    def test_unpublished_layout_ignored(self, write):
        layout = write("draft.hbs", '---\npublished: false\n---\nwrapped:{% include "body" %}')
        page = write("page.hbs", "---\nlayout: draft\n---\ncontent")
        assert _body(Taft(layouts=layout).build(page)) == "content"

    def test_layout_cycle_fails_fast(self, write):
        a = write("l/a.hbs", '---\nlayout: b\n---\na[{% include "body" %}]')
        b = write("l/b.hbs", '---\nlayout: a\n---\nb[{% include "body" %}]')
        page = write("page.hbs", "---\nlayout: a\n---\nx")
        engine = Taft(layouts=[a, b])

        result = engine.build(page)
        assert isinstance(result, Failed)
        assert isinstance(result.error, LayoutCycleError)
        assert result.error.chain == ["a", "b", "a"]
        assert not engine.engine.has_partial("body")

    def test_layout_render_error_wrapped_and_body_released(self, write):
        layout = write("main.hbs", '{{ explode() }}{% include "body" %}')
        page = write("page.hbs", "content")

        def explode():
            raise RuntimeError("kaboom")

        engine = Taft(layouts=layout, helpers={"explode": explode})
        result = engine.build(page)
        assert isinstance(result, Failed)
        assert isinstance(result.error, LayoutRenderError)
        assert result.error.layout == "main"
        assert "kaboom" in str(result.error)
        assert not engine.engine.has_partial("body")

        with pytest.raises(LayoutRenderError):
            result.unwrap()

    def test_body_partial_released_after_success(self, write):
        engine = Taft(layouts=write("main.hbs", '{% include "body" %}'))
        engine.build(write("page.hbs", "x"))
        assert "body" not in engine.partials

    def test_layout_sees_helpers_and_partials(self, write):
        engine = Taft(
            layouts=write("main.hbs", '{% include "nav" %}{{ body_title | shout }}{% include "body" %}'),
            partials={"nav": "<nav/>"},
            helpers={"shout": lambda s: s.upper()},
            data={"body_title": "t"},
        )
        assert _body(engine.build(write("page.hbs", "x"))) == "<nav/>Tx"

    def test_apply_layout_directly(self, write):
        engine = Taft(layouts=write("main.hbs", '[{% include "body" %}]'))
        content = engine.apply_layout("main", Content(body="raw", data={"title": "T"}))
        assert content.body == "[raw]"
        assert content.data["page"] == {"title": "T"}
        assert engine.apply_layout(None, content) is content


class TestBuild:
    def test_published_false_skipped(self, write):
        page = write("draft.hbs", "---\npublished: false\n---\nsecret")
        result = Taft().build(page)
        assert isinstance(result, Skipped)
        assert result.source == page
        assert result.unwrap() is None

    def test_unpublished_layout_built_directly_skipped(self, write):
        layout = write("main.hbs", '---\npublished: 0\n---\n{% include "body" %}')
        engine = Taft(layouts=layout)
        assert isinstance(engine.build(layout), Skipped)

    def test_directory_skipped(self, tmp_path):
        assert isinstance(Taft().build(tmp_path), Skipped)

    def test_decode_failure_reported(self, write):
        page = write("bad.hbs", "---\ntitle: [unclosed\n---\nx")
        result = Taft().build(page)
        assert isinstance(result, Failed)
        assert isinstance(result.error, TemplateRenderError)

    def test_call_data_wins_over_front_matter(self, write):
        page = write("page.hbs", "---\ntitle: Hi\n---\n{{ title }}")
        assert _body(Taft().build(page, {"title": "Call"})) == "Call"

    def test_idempotent(self, write):
        engine = Taft(
            data={"site": "X"},
            layouts=write("main.hbs", '{{ site }}{% include "body" %}'),
        )
        page = write("page.hbs", "---\ntitle: Hi\n---\n{{ title }}")
        assert _body(engine.build(page)) == _body(engine.build(page))

    def test_data_added_later_reaches_layouts(self, write):
        engine = Taft(layouts=write("main.hbs", '{{ site }}:{% include "body" %}'))
        page = write("page.hbs", "x")
        assert _body(engine.build(page)) == ":x"
        engine.set_data({"site": "S"})
        assert _body(engine.build(page)) == "S:x"

    def test_build_many_expands_globs(self, write, tmp_path):
        write("pages/a.hbs", "A")
        write("pages/b.hbs", "B")
        write("pages/c.hbs", "---\npublished: false\n---\nC")
        results = Taft().build_many([str(tmp_path / "pages" / "*.hbs")])
        assert [type(r) for r in results] == [Rendered, Rendered, Skipped]

    def test_render_convenience(self, write):
        page = write("page.hbs", "{{ x }}")
        assert render(page, {"x": 1}) == "1"
        assert render(write("d.hbs", "---\npublished: false\n---\n")) is None

    def test_from_config(self, write):
        config = TaftConfig(
            data=[{"site": "C"}],
            layouts=[write("main.hbs", '{{ site }}/{% include "body" %}')],
        )
        engine = Taft.from_config(config)
        assert _body(engine.build(write("page.hbs", "p"))) == "C/p"


class TestIsolation:
    def test_instances_do_not_share_state(self, write):
        first = Taft(partials={"p": "first"}, data={"k": 1})
        second = Taft()
        assert first.partials == ["p"]
        assert second.partials == []
        assert second.data == {}

    def test_concurrent_builds_share_one_engine(self, write):
        engine = Taft(layouts=write("main.hbs", '<{% include "body" %}>'))
        pages = [write(f"p{i}.hbs", f"page-{i}") for i in range(4)]
        errors = []

        def worker(i):
            for _ in range(25):
                body = _body(engine.build(pages[i]))
                if body != f"<page-{i}>":
                    errors.append(body)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []
