"""Browser rendering of the comment endpoint.

The comment API refuses plain HTTP clients (HTTP/2 requests fail with a
framing error and HTTP/1.x requests hang), so the endpoint is opened in a real
Chromium instance and the JSON is read back out of the ``<pre>`` element the
browser wraps it in.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from bs4 import BeautifulSoup
from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import JSON_TAG, ScrapeConfig
from .errors import ErrorKind, ScrapeError

logger = logging.getLogger("dm_scrape.render")


class RenderClient(Protocol):
    """Anything that can render a URL and hand back the target element's text."""

    async def render(self, url: str, timeout: float) -> str: ...


def extract_tag_text(html: str, tag: str = JSON_TAG) -> str:
    """Return the text of the first ``tag`` element in ``html``."""
    soup = BeautifulSoup(html, "html.parser")
    element = soup.find(tag)
    if element is None:
        raise ScrapeError(
            ErrorKind.RENDER_FAILURE, f"failed to get text from {tag} tag"
        )
    return element.get_text()


class PlaywrightRenderClient:
    """Render client backed by a headless Chromium browser.

    Use as an async context manager: entering launches one browser for the
    run, and every :meth:`render` call gets its own context and page which are
    closed before the call returns.
    """

    def __init__(
        self,
        config: ScrapeConfig,
        tag: str = JSON_TAG,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.tag = tag
        self.logger = log or logger
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> "PlaywrightRenderClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        self.logger.info("Spinning up headless browser to scrape comments")
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless
            )
        except PlaywrightError as exc:
            await self.close()
            raise ScrapeError(
                ErrorKind.RENDER_FAILURE, "failed to setup browser"
            ) from exc

    async def close(self) -> None:
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        try:
            if browser is not None:
                await browser.close()
        except PlaywrightError as exc:
            self.logger.warning("Failed to close browser: %s", exc)
        finally:
            if playwright is not None:
                try:
                    await playwright.stop()
                except PlaywrightError as exc:
                    self.logger.warning("Failed to stop playwright: %s", exc)

    async def _release(
        self, page: Optional[Page], context: Optional[BrowserContext]
    ) -> None:
        try:
            if page is not None:
                await page.close()
        except PlaywrightError as exc:
            self.logger.warning("Failed to close page: %s", exc)
        finally:
            if context is not None:
                try:
                    await context.close()
                except PlaywrightError as exc:
                    self.logger.warning("Failed to close browser context: %s", exc)

    async def render(self, url: str, timeout: float) -> str:
        if self._browser is None:
            raise ScrapeError(ErrorKind.RENDER_FAILURE, "browser session is not open")

        timeout_ms = timeout * 1000
        context: Optional[BrowserContext] = None
        page: Optional[Page] = None
        try:
            context = await self._browser.new_context()
            page = await context.new_page()
            page.set_default_timeout(timeout_ms)
            self.logger.debug("Loading %s", url)
            await page.goto(url, timeout=timeout_ms, wait_until="networkidle")
            if self.config.wait_after_load:
                await page.wait_for_timeout(self.config.wait_after_load * 1000)
            html = await page.content()
        except PlaywrightTimeoutError as exc:
            raise ScrapeError(
                ErrorKind.RENDER_TIMEOUT, f"no stable page within {timeout:g}s"
            ) from exc
        except PlaywrightError as exc:
            raise ScrapeError(ErrorKind.RENDER_FAILURE, "failed to fetch comments") from exc
        finally:
            await self._release(page, context)

        text = extract_tag_text(html, self.tag)
        self.logger.info("Comments scraped", extra={"characters": len(text)})
        return text
