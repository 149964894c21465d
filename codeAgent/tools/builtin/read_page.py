"""Fetch web pages as text: plain HTTP retrieval or the Jina rendering reader."""

from __future__ import annotations

import logging
from typing import Annotated, Optional

import httpx
from bs4 import BeautifulSoup
from langchain_core.tools import BaseTool, tool

from codeAgent.config.settings import WebSettings

LOGGER = logging.getLogger(__name__)

__all__ = ["build_read_page_tool", "fetch_plain", "fetch_rendered", "html_to_text"]

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)
NOISE_TAGS = ["script", "style", "noscript", "svg", "iframe", "nav", "footer"]


def html_to_text(html: str) -> tuple[Optional[str], str]:
    """Return ``(title, visible_text)`` for an HTML document."""
    soup = BeautifulSoup(html, "html.parser")
    title = soup.title.get_text(strip=True) if soup.title else None
    for tag in soup(NOISE_TAGS):
        tag.decompose()
    lines = [line for line in soup.get_text("\n", strip=True).splitlines() if line]
    return title, "\n".join(lines)


def _truncate(text: str, max_chars: int) -> str:
    if len(text) > max_chars:
        return text[:max_chars] + f"\n\n... (truncated, {len(text)} chars total)"
    return text


async def fetch_plain(url: str, settings: WebSettings) -> str:
    """GET the page and strip it down to readable text."""
    async with httpx.AsyncClient(
        timeout=settings.fetch_timeout_seconds,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    ) as client:
        response = await client.get(url)
        response.raise_for_status()

    content_type = response.headers.get("content-type", "")
    if "html" not in content_type:
        return _truncate(response.text, settings.max_page_chars)

    title, text = html_to_text(response.text)
    header = f"Title: {title}\n\n" if title else ""
    return header + _truncate(text, settings.max_page_chars)


async def fetch_rendered(url: str, settings: WebSettings) -> str:
    """Render the page through the Jina Reader endpoint (handles JavaScript pages)."""
    headers = {
        "Accept": "text/plain",
        "X-Return-Format": "markdown",
        "X-Retain-Images": "none",
    }
    if settings.jina_api_key:
        headers["Authorization"] = f"Bearer {settings.jina_api_key}"

    async with httpx.AsyncClient(timeout=settings.fetch_timeout_seconds) as client:
        response = await client.get(f"{settings.jina_reader_url}{url}", headers=headers)
        response.raise_for_status()

    return _truncate(response.text, settings.max_page_chars)


def build_read_page_tool(settings: WebSettings) -> BaseTool:
    """Build read_page bound to the web settings."""

    @tool
    async def read_page(
        url: Annotated[str, "Absolute http(s) URL of the page"],
        use_browser: Annotated[bool, "Render the page in a browser first (for JavaScript-heavy sites)"] = False,
    ) -> str:
        """Read a web page and return its text content.

        Plain retrieval is used by default. Set use_browser=True when the plain
        text comes back empty or the site needs JavaScript.

        Examples:
            read_page("https://docs.python.org/3/library/asyncio.html")
            read_page("https://example.com/app", use_browser=True)
        """
        mode = "browser" if use_browser else "plain"
        LOGGER.info(f"Reading page ({mode}): {url}")
        try:
            if use_browser:
                text = await fetch_rendered(url, settings)
            else:
                text = await fetch_plain(url, settings)
        except httpx.HTTPStatusError as e:
            return f"Error: HTTP {e.response.status_code} while fetching {url}"
        except httpx.TimeoutException:
            return f"Error: Timed out fetching {url} ({settings.fetch_timeout_seconds:g}s)"
        except httpx.HTTPError as e:
            return f"Error: Failed to fetch {url}: {str(e)}"

        LOGGER.info(f"Read page {url}: {len(text)} chars")
        return text or f"Error: No readable content at {url}"

    return read_page
