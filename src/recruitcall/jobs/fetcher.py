"""
Job description fetcher.

Downloads the job page and reduces it to the visible text of ``<body>``,
whitespace-collapsed.
"""

from __future__ import annotations

import re
from html.parser import HTMLParser

import httpx

from recruitcall.shared.http import AsyncHTTPClientOwner
from recruitcall.shared.logging import get_logger

logger = get_logger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")

# Elements whose text content is never rendered
_SKIPPED_TAGS = frozenset({"script", "style", "noscript", "template", "head", "title"})


class ContentFetchError(Exception):
    """Job page could not be downloaded."""

    def __init__(self, message: str, status_code: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class _BodyTextExtractor(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._chunks: list[str] = []
        self._body_chunks: list[str] = []
        self._in_body = False
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag == "body":
            self._in_body = True
        elif tag in _SKIPPED_TAGS:
            self._skip_depth += 1

    def handle_endtag(self, tag: str) -> None:
        if tag == "body":
            self._in_body = False
        elif tag in _SKIPPED_TAGS and self._skip_depth:
            self._skip_depth -= 1

    def handle_data(self, data: str) -> None:
        if self._skip_depth:
            return
        self._chunks.append(data)
        if self._in_body:
            self._body_chunks.append(data)

    def text(self) -> str:
        # Pages without an explicit <body> fall back to all visible text
        chunks = self._body_chunks or self._chunks
        return _WHITESPACE_RE.sub(" ", " ".join(chunks)).strip()


def extract_text(html: str) -> str:
    """Return the visible body text of an HTML document."""
    parser = _BodyTextExtractor()
    parser.feed(html)
    parser.close()
    return parser.text()


class JobDescriptionFetcher(AsyncHTTPClientOwner):
    """Fetches a URL and returns its plain-text content."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        super().__init__(http_client=http_client, timeout=timeout, follow_redirects=True)

    async def fetch_text(self, url: str) -> str:
        """Download ``url`` and return its text.

        Raises:
            ContentFetchError: On transport failure, a non-2xx status or a
                page without text.
        """
        client = self._get_client()
        logger.info("Fetching job description", extra={"url": url})

        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise ContentFetchError(f"Failed to fetch {url}: {e!s}", url=url) from e

        if not response.is_success:
            raise ContentFetchError(
                f"Failed to fetch {url}: HTTP {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

        content_type = response.headers.get("content-type", "")
        if "html" in content_type or response.text.lstrip().startswith("<"):
            text = extract_text(response.text)
        else:
            text = _WHITESPACE_RE.sub(" ", response.text).strip()

        if not text:
            raise ContentFetchError(
                f"No text content at {url}",
                status_code=response.status_code,
                url=url,
            )

        logger.info(
            "Job description fetched",
            extra={"url": url, "status_code": response.status_code, "chars": len(text)},
        )
        return text
