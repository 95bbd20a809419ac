"""The submitted HTML document and the DOM front ends built from it.

The text is read once; every parse works from that same immutable copy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import css_inline
from bs4 import BeautifulSoup

from page_grader.domain.errors import DocumentLoadError, InliningError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceDocument:
    """A student-authored HTML file loaded from disk."""

    path: Path
    text: str

    @classmethod
    def load(cls, path: Path) -> SourceDocument:
        """Read the document as UTF-8.

        Raises:
            DocumentLoadError: The file is missing or cannot be decoded.
        """
        path = Path(path)
        if not path.is_file():
            raise DocumentLoadError(f"Document not found: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentLoadError(f"Cannot read {path}: {exc}") from exc
        logger.debug("Loaded %s (%d characters)", path, len(text))
        return cls(path=path, text=text)

    @property
    def base_dir(self) -> Path:
        return self.path.resolve().parent

    @property
    def base_url(self) -> str:
        """``file://`` URL of the document's directory, with trailing slash."""
        return self.base_dir.as_uri() + "/"

    def resolve(self, relative: str) -> Path:
        """Resolve a path written relative to the document."""
        return self.base_dir / relative

    def parse(self) -> BeautifulSoup:
        """Parse with the html5lib tree builder (browser-equivalent tree)."""
        return BeautifulSoup(self.text, "html5lib")

    def parse_with_positions(self) -> BeautifulSoup:
        """Parse with ``html.parser``, which keeps tags as written and records
        ``sourceline`` / ``sourcepos`` for each of them."""
        return BeautifulSoup(self.text, "html.parser")

    def inline_styles(self) -> BeautifulSoup:
        """Inline linked stylesheets into ``style`` attributes and parse the result.

        Relative stylesheet links resolve against :attr:`base_url`; the
        ``<link>`` tags themselves are kept in the output.

        Raises:
            InliningError: A stylesheet could not be loaded or parsed.
        """
        try:
            inliner = css_inline.CSSInliner(base_url=self.base_url, keep_link_tags=True)
            inlined = inliner.inline(self.text)
        except (css_inline.InlineError, ValueError) as exc:
            raise InliningError(f"Could not inline styles for {self.path}: {exc}") from exc
        logger.debug("Inlined styles for %s using base %s", self.path, self.base_url)
        return BeautifulSoup(inlined, "html5lib")
