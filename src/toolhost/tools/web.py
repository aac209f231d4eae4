"""WebFetch tool: fetch a page and return its readable article text.

The page is fetched with httpx, the main article is located by
readability-lxml (bound to the page URL so relative links resolve), and
BeautifulSoup renders the article HTML to plain text and reads the author
and description metadata.
"""

import logging
from collections.abc import Callable
from typing import Annotated
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup
from pydantic import Field
from readability import Document
from readability.readability import Unparseable

from toolhost.catalogue import ToolName
from toolhost.config.constants import OUTPUT_LIMIT, WEB_TRUNCATION_SUFFIX
from toolhost.config.schema import HostSettings
from toolhost.tools.toolset import HostToolset

logger = logging.getLogger(__name__)


def is_valid_url(url: str) -> bool:
    """Validate URL format.

    Args:
        url: URL to validate

    Returns:
        True if URL is valid (http/https), False otherwise
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _meta_content(soup: BeautifulSoup, *keys: str) -> str | None:
    """Return the first non-empty <meta> content matching a name or property."""
    for key in keys:
        tag = soup.find("meta", attrs={"name": key}) or soup.find("meta", attrs={"property": key})
        if tag and tag.get("content", "").strip():
            return tag["content"].strip()
    return None


def extract_article(html: str, url: str) -> dict | None:
    """Extract title, byline, excerpt and plain text from an HTML page.

    Args:
        html: Raw page HTML
        url: Page URL, used to resolve relative links

    Returns:
        Dict with title, byline, excerpt, text; or None if no article body was found
    """
    try:
        doc = Document(html, url=url)
        article_html = doc.summary(html_partial=True)
        title = doc.short_title() or doc.title()
    except Unparseable as e:
        logger.debug(f"readability could not parse {url}: {e}")
        return None

    text = BeautifulSoup(article_html, "html.parser").get_text(separator="\n", strip=True)
    if not text:
        return None

    page = BeautifulSoup(html, "html.parser")
    return {
        "title": title,
        "byline": _meta_content(page, "author", "article:author"),
        "excerpt": _meta_content(page, "description", "og:description"),
        "text": text,
    }


def format_article(url: str, article: dict) -> str:
    """Format an extracted article, truncating with an explicit marker."""
    result = (
        f"WebFetch Results for {url}:\n\n"
        f"Title: {article['title']}\n"
        f"Byline: {article['byline'] or 'N/A'}\n"
        f"Excerpt: {article['excerpt'] or 'N/A'}\n"
        f"Length: {len(article['text'])} characters\n\n"
        f"Plain Text Content:\n{article['text']}"
    )
    if len(result) > OUTPUT_LIMIT:
        return result[:OUTPUT_LIMIT] + WEB_TRUNCATION_SUFFIX
    return result


class WebTools(HostToolset):
    """Web content tools.

    Example:
        >>> tools = WebTools(settings)
        >>> result = await tools.web_fetch("https://example.com/post")
        >>> print(result["result"].splitlines()[0])
        WebFetch Results for https://example.com/post:
    """

    def __init__(self, settings: HostSettings, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize WebTools.

        Args:
            settings: Host settings with web timeout and user agent
            transport: Optional httpx transport (tests inject httpx.MockTransport)
        """
        super().__init__(settings)
        self.transport = transport

    def get_tools(self) -> dict[ToolName, Callable]:
        """Get web tools keyed by tool name."""
        return {ToolName.WEB_FETCH: self.web_fetch}

    async def web_fetch(
        self,
        url: Annotated[str, Field(description="http(s) URL of the page to fetch")],
    ) -> dict:
        """Fetch a URL and return the readable article content as text.

        Pages without a recognizable article body produce an explanatory
        message, not an error.

        Args:
            url: Page URL

        Returns:
            Success response with the formatted article, or error response for
            invalid URLs, non-2xx statuses and network failures.
        """
        if not is_valid_url(url):
            return self._create_error_response(
                error="invalid_arguments",
                message=f"URL must start with http:// or https://. Got: {url}",
            )

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.web_timeout_seconds,
                follow_redirects=True,
                headers={"User-Agent": self.settings.web_user_agent},
                transport=self.transport,
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException:
            return self._create_error_response(
                error="request_error",
                message=f"Request timed out after {self.settings.web_timeout_seconds} seconds",
            )
        except httpx.HTTPError as e:
            return self._create_error_response(
                error="request_error", message=f"Request failed: {e}"
            )

        if not response.is_success:
            return self._create_error_response(
                error="http_error",
                message=f"HTTP {response.status_code}: {response.reason_phrase}",
            )

        article = extract_article(response.text, str(response.url))
        if article is None:
            return self._create_success_response(
                result=(
                    f"WebFetch: Could not extract article content from {url}. "
                    "The page may not contain readable content."
                ),
                message="No article content found",
            )

        return self._create_success_response(
            result=format_article(url, article),
            message=f"Extracted {len(article['text'])} characters from {url}",
        )
