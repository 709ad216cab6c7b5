"""Split a raw snippet file into markup and style text."""

from __future__ import annotations

from pathlib import Path

from bs4 import BeautifulSoup

from unigalaxy.core.errors import MalformedSourceError


def split_snippet(raw: str) -> tuple[str, str]:
    """Return ``(html, css)``.

    CSS is the text of the first ``<style>`` element (empty if none). HTML
    is the body markup with that element removed; snippets without a
    ``<body>`` use the whole fragment.
    """
    soup = BeautifulSoup(raw, "html.parser")
    style = soup.find("style")
    css = ""
    if style is not None:
        css = "".join(str(node) for node in style.contents)
        style.decompose()
    body = soup.body or soup
    return body.decode_contents(), css


def read_snippet(path: Path, identity: str) -> tuple[str, str]:
    """Read and split a snippet file, raising MalformedSourceError if it is unreadable."""
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedSourceError(identity, str(e)) from e
    return split_snippet(raw)
