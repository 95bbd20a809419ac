"""Tests for the markup linter."""

from __future__ import annotations

from pathlib import Path

import pytest

from page_grader.config.models import MarkupLintConfig
from page_grader.linters.markup import MarkupLinter, MarkupViolation

FIXTURE = Path(__file__).parent / "fixtures" / "site" / "index.html"


def _page(body: str = "<p>Hello</p>", head: str = "<title>Page</title>", lang: str = ' lang="en"') -> str:
    return (
        "<!DOCTYPE html>\n"
        f"<html{lang}>\n"
        f"<head>\n<meta charset=\"utf-8\">\n{head}\n</head>\n"
        f"<body>\n{body}\n</body>\n"
        "</html>\n"
    )


def _rules(violations: list[MarkupViolation]) -> set[str]:
    return {v.rule for v in violations}


@pytest.fixture
def linter():
    return MarkupLinter(MarkupLintConfig())


class TestCleanDocuments:
    def test_fixture_is_clean(self, linter):
        assert linter.lint(FIXTURE.read_text(encoding="utf-8")) == []

    def test_minimal_page_is_clean(self, linter):
        assert linter.lint(_page()) == []

    def test_comment_before_doctype_allowed(self, linter):
        assert linter.lint("<!-- student: A -->\n" + _page()) == []


class TestDoctype:
    def test_missing_doctype(self, linter):
        text = _page().replace("<!DOCTYPE html>\n", "")
        assert "doctype-first" in _rules(linter.lint(text))

    def test_doctype_after_content(self, linter):
        text = "<p>early</p>\n" + _page()
        assert "doctype-first" in _rules(linter.lint(text))

    def test_legacy_doctype(self, linter):
        text = _page().replace(
            "<!DOCTYPE html>",
            '<!DOCTYPE HTML PUBLIC "-//W3C//DTD HTML 4.01//EN" "http://www.w3.org/TR/html4/strict.dtd">',
        )
        assert "doctype-html5" in _rules(linter.lint(text))

    def test_uppercase_html5_doctype_is_fine(self, linter):
        text = _page().replace("<!DOCTYPE html>", "<!DOCTYPE HTML>")
        assert linter.lint(text) == []

    def test_doctype_rules_can_be_disabled(self):
        linter = MarkupLinter(MarkupLintConfig(doctype_first=False))
        text = _page().replace("<!DOCTYPE html>\n", "")
        assert "doctype-first" not in _rules(linter.lint(text))


class TestAttributeAndTagRules:
    def test_missing_lang(self, linter):
        assert "html-req-lang" in _rules(linter.lint(_page(lang="")))

    def test_empty_lang(self, linter):
        assert "html-req-lang" in _rules(linter.lint(_page(lang=' lang=""')))

    @pytest.mark.parametrize("attr", ["style", "width", "height", "align", "bgcolor"])
    def test_banned_attribute(self, linter, attr):
        body = f'<p {attr}="1">Hello</p>'
        violations = linter.lint(_page(body=body))
        assert [v.rule for v in violations] == ["attr-bans"]

    def test_banned_attribute_position(self, linter):
        text = _page(body='<p>ok</p>\n  <p style="color: red">no</p>')
        (violation,) = linter.lint(text)
        lines = text.splitlines()
        assert lines[violation.line - 1].startswith("  <p style")
        assert violation.column == 3

    @pytest.mark.parametrize("tag", ["b", "i", "style"])
    def test_banned_tag(self, linter, tag):
        body = f"<p>Hello <{tag}>there</{tag}></p>"
        assert "tag-bans" in _rules(linter.lint(_page(body=body)))

    def test_image_without_alt(self, linter):
        assert "img-req-alt" in _rules(linter.lint(_page(body='<img src="img/a.png">')))

    def test_image_with_empty_alt_allowed(self, linter):
        assert linter.lint(_page(body='<img src="img/a.png" alt="">')) == []

    def test_image_without_src(self, linter):
        assert "img-req-src" in _rules(linter.lint(_page(body='<img alt="x">')))

    def test_duplicate_id(self, linter):
        body = '<p id="a">one</p>\n<p id="a">two</p>'
        violations = [v for v in linter.lint(_page(body=body)) if v.rule == "id-no-dup"]
        assert len(violations) == 1

    def test_missing_title(self, linter):
        assert "head-req-title" in _rules(linter.lint(_page(head="")))

    def test_duplicate_title(self, linter):
        head = "<title>One</title>\n<title>Two</title>"
        assert "title-no-dup" in _rules(linter.lint(_page(head=head)))

    def test_custom_bans(self):
        linter = MarkupLinter(MarkupLintConfig(attr_bans=["id"], tag_bans=[]))
        violations = linter.lint(_page(body='<p id="x">Hello <b>there</b></p>'))
        assert _rules(violations) == {"attr-bans"}


class TestParseErrors:
    def test_stray_end_tag(self, linter):
        violations = linter.lint(_page(body="<p>Hello</p></div>"))
        assert violations
        assert all(v.message for v in violations)

    def test_parse_errors_can_be_silenced(self):
        linter = MarkupLinter(MarkupLintConfig(report_parse_errors=False))
        assert linter.lint(_page(body="<p>Hello</p></div>")) == []


class TestWhitespaceRules:
    def test_disabled_by_default(self, linter):
        text = _page(body="\t  <p>mixed</p>").replace("\n", "\r\n")
        assert linter.lint(text) == []

    def test_line_end_lf(self):
        linter = MarkupLinter(MarkupLintConfig(line_end_style="lf"))
        text = _page().replace("\n", "\r\n")
        violations = linter.lint(text)
        assert _rules(violations) == {"line-end-style"}
        assert len(violations) == len(text.splitlines())

    def test_line_end_crlf(self):
        linter = MarkupLinter(MarkupLintConfig(line_end_style="crlf"))
        assert "line-end-style" in _rules(linter.lint(_page()))

    def test_indent_nonmixed(self):
        linter = MarkupLinter(MarkupLintConfig(indent_style="nonmixed"))
        violations = linter.lint(_page(body="\t  <p>mixed</p>"))
        assert [v.rule for v in violations] == ["indent-style"]

    def test_indent_spaces(self):
        linter = MarkupLinter(MarkupLintConfig(indent_style="spaces"))
        assert "indent-style" in _rules(linter.lint(_page(body="\t<p>tab</p>")))

    def test_indent_width(self):
        linter = MarkupLinter(MarkupLintConfig(indent_width=2))
        violations = linter.lint(_page(body="   <p>three</p>\n  <p>two</p>"))
        assert [v.rule for v in violations] == ["indent-width"]


class TestOrdering:
    def test_sorted_by_position(self, linter):
        body = '<p style="x">a</p>\n<b>bold</b>\n<img src="img/a.png">'
        violations = linter.lint(_page(body=body, lang=""))
        positions = [(v.line, v.column) for v in violations]
        assert positions == sorted(positions)
