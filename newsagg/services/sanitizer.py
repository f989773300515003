"""HTML and URL sanitization for untrusted article fields.

Titles lose all markup. Rich-text fields keep a small allowlist of
formatting tags; ``<script>`` and ``<style>`` blocks are removed together
with their content before anything else so the allowlist pass cannot leave
fragments of them behind. URLs that do not parse as absolute URLs are
cleared.
"""

import html
from collections.abc import Callable
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Comment

from newsagg.core.constants import ALLOWED_HTML_TAGS, ALLOWED_URL_SCHEMES, DANGEROUS_HTML_TAGS
from newsagg.models.domain import NormalizedArticle

# Entity decoding in rich text can surface new markup; passes repeat until it settles
MAX_SANITIZE_PASSES = 5


def is_valid_url(value: Optional[str]) -> bool:
    """Whether ``value`` is an absolute http(s)/ftp URL with a host."""
    if not value or any(ch.isspace() for ch in value):
        return False
    try:
        parsed = urlparse(value)
        return parsed.scheme.lower() in ALLOWED_URL_SCHEMES and bool(parsed.hostname)
    except ValueError:
        return False


def _parse(markup: str) -> BeautifulSoup:
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup.find_all(list(DANGEROUS_HTML_TAGS)):
        tag.decompose()
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
    return soup


def _strip_to_allowlist_once(markup: str) -> str:
    soup = _parse(markup)
    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_HTML_TAGS:
            tag.unwrap()
            continue

        href = tag.get("href") if tag.name == "a" else None
        tag.attrs = {}
        if isinstance(href, str) and is_valid_url(href.strip()):
            tag["href"] = href.strip()

    return html.unescape(str(soup))


def _until_stable(clean: Callable[[str], str], value: str) -> tuple[str, bool]:
    """Apply ``clean`` until the text stops changing; report whether it did."""
    for _ in range(MAX_SANITIZE_PASSES):
        cleaned = clean(value)
        if cleaned == value:
            return value, True
        value = cleaned
    return value, False


def strip_all_markup(text: str) -> str:
    """Plain text of ``text`` with every tag removed and entities decoded.

    A single pass: the result is text, so decoded entities stay literal.
    """
    return _parse(text).get_text().strip()


def sanitize_html(markup: Optional[str]) -> Optional[str]:
    """Reduce ``markup`` to the allowed formatting tags."""
    if not markup:
        return markup
    cleaned, settled = _until_stable(_strip_to_allowlist_once, markup)
    if not settled:
        # Still decoding into new markup: fall back to escaped plain text
        cleaned = html.escape(strip_all_markup(cleaned))
    return cleaned.strip()


def sanitize_article(article: NormalizedArticle) -> NormalizedArticle:
    """Return a sanitized copy of ``article``.

    Never raises for bad input: offending fields are degraded instead
    (``url`` becomes "" and ``image_url`` becomes None).
    """
    return article.model_copy(
        update={
            "title": strip_all_markup(article.title),
            "content": sanitize_html(article.content),
            "summary": sanitize_html(article.summary),
            "url": article.url if is_valid_url(article.url) else "",
            "image_url": article.image_url if is_valid_url(article.image_url) else None,
        }
    )
