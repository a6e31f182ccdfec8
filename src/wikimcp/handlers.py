"""Page operation handlers behind the four wiki tools.

Handlers return a ``ToolCallResult`` on success and raise the exceptions from
``wikimcp.errors`` on failure; the dispatcher turns those into error results.
"""

import datetime
import logging
from typing import List, Optional, Tuple

from .catalog import DEFAULT_EDITOR, DEFAULT_LIMIT, DEFAULT_ORDER_BY
from .client import WikiGraphQLClient
from .errors import NotFound, UpstreamError
from .models import Failure, Page, Result, ToolCallResult
from .paths import PathPolicy, normalize_path

logger = logging.getLogger(__name__)

# Wiki.js reports these on updates that were in fact applied
KNOWN_UPDATE_QUIRKS = (
    "Cannot read properties of undefined (reading 'map')",
    "Cannot read property 'map' of undefined",
)


def is_known_update_quirk(message: Optional[str]) -> bool:
    """Return True if an update failure message is the Wiki.js ``map`` defect.

    Only the exact signatures in ``KNOWN_UPDATE_QUIRKS`` match, so unrelated
    failures are still reported as errors.
    """
    if not message:
        return False
    return any(signature in message for signature in KNOWN_UPDATE_QUIRKS)


def format_timestamp(value: str) -> str:
    """Render an ISO timestamp in local time using the current locale."""
    try:
        parsed = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.astimezone().strftime("%x %X")


def _attempted(paths: List[str]) -> str:
    if len(paths) < 2:
        return ""
    return "\nAttempted paths: " + ", ".join(paths)


class PageHandlers:
    def __init__(self, client: WikiGraphQLClient, path_policy: Optional[PathPolicy] = None):
        self.client = client
        self.path_policy = path_policy or PathPolicy()

    async def list_pages(self, order_by: str = DEFAULT_ORDER_BY, limit: int = DEFAULT_LIMIT) -> ToolCallResult:
        result = await self.client.list_pages(order_by, limit)
        if isinstance(result, Failure):
            raise UpstreamError(f"Error listing pages: {result.message}")

        pages = result.value
        if not pages:
            return ToolCallResult("No pages found")

        entries = []
        for page in pages:
            entry = f"- {page.title} (ID: {page.id}, Path: {page.path})"
            if page.updated_at:
                entry += f"\n  Last Updated: {format_timestamp(page.updated_at)}"
            entries.append(entry)
        return ToolCallResult("\n\n".join(entries))

    async def find_page_by_path(self, path: str) -> Tuple[Result[Page], List[str]]:
        """Look a page up by each path variant in turn, stopping at the first hit.

        Only a not-found result moves on to the next variant; any other failure
        is returned as-is. Returns the last lookup result together with the
        variants tried.
        """
        attempts = []
        for variant in self.path_policy.variants(path):
            attempts.append(variant)
            result = await self.client.get_page_by_path(variant)
            if not isinstance(result, Failure):
                logger.debug(f"Found page '{result.value.title}' at path '{variant}'")
                break
            logger.debug(f"Lookup of path '{variant}' failed: {result.message}")
            if not result.not_found:
                break
        return result, attempts

    async def get_page(self, page_id: Optional[int] = None, path: Optional[str] = None) -> ToolCallResult:
        attempts: List[str] = []
        if page_id is not None:
            key = f"ID: {page_id}"
            result = await self.client.get_page_by_id(page_id)
        else:
            key = f"path: {path}"
            result, attempts = await self.find_page_by_path(path)

        if isinstance(result, Failure):
            if result.not_found:
                raise NotFound(f"Page not found for {key}{_attempted(attempts)}")
            raise UpstreamError(f"Error fetching page for {key}: {result.message}{_attempted(attempts)}")

        page = result.value
        return ToolCallResult(f"# {page.title}\n\n{page.content or ''}")

    async def create_page(
        self,
        path: str,
        title: str,
        content: str,
        editor: str = DEFAULT_EDITOR,
        is_published: bool = True,
    ) -> ToolCallResult:
        attempts = []
        last_message = "Unknown error"
        for variant in self.path_policy.variants(path):
            attempts.append(variant)
            logger.debug(f"Creating page '{title}' at path '{variant}' (attempt {len(attempts)})")
            result = await self.client.create_page(variant, title, content, editor, is_published)
            if isinstance(result, Failure):
                # The write may have gone through; another variant could duplicate it
                raise UpstreamError(f"Error creating page: {result.message}{_attempted(attempts)}")

            outcome = result.value
            if outcome.response_result.succeeded:
                if outcome.page is None:
                    logger.warning(f"Wiki.js created '{title}' at '{variant}' without returning the page")
                    return ToolCallResult(
                        f"Page created successfully at path: {variant}, but no page details were returned."
                    )
                page = outcome.page
                logger.info(f"Created page: {page.title} (ID: {page.id}) at path: {page.path}")
                return ToolCallResult(
                    f"Page created successfully:\nTitle: {page.title}\nID: {page.id}\nPath: {page.path}"
                )

            last_message = outcome.response_result.message or "Unknown error"
            logger.debug(f"Create at path '{variant}' rejected: {last_message}")

        if len(attempts) > 1:
            raise UpstreamError(
                f"Failed to create page after multiple attempts: {last_message}{_attempted(attempts)}"
            )
        raise UpstreamError(f"Failed to create page at path '{attempts[0]}': {last_message}")

    async def update_page(
        self,
        page_id: Optional[int] = None,
        path: Optional[str] = None,
        title: Optional[str] = None,
        content: Optional[str] = None,
        editor: Optional[str] = None,
        is_published: Optional[bool] = None,
    ) -> ToolCallResult:
        if page_id is None:
            lookup, attempts = await self.find_page_by_path(path)
            if isinstance(lookup, Failure):
                if lookup.not_found:
                    raise NotFound(f"Page not found for path: {normalize_path(path)}{_attempted(attempts)}")
                raise UpstreamError(
                    f"Error resolving page for path: {normalize_path(path)}: {lookup.message}{_attempted(attempts)}"
                )
            page_id = lookup.value.id

        result = await self.client.update_page(
            page_id,
            title=title,
            content=content,
            editor=editor,
            is_published=is_published,
        )
        if isinstance(result, Failure):
            raise UpstreamError(f"Error updating page {page_id}: {result.message}")

        outcome = result.value
        response_result = outcome.response_result
        if response_result.succeeded:
            logger.info(f"Updated page ID: {page_id}")
            if outcome.page is None:
                return ToolCallResult("Page updated successfully, but no page details were returned.")
            page = outcome.page
            return ToolCallResult(
                f"Page updated successfully:\nTitle: {page.title}\nID: {page.id}\nPath: {page.path}"
            )

        if is_known_update_quirk(response_result.message):
            logger.warning(f"Update of page {page_id} hit the known Wiki.js map error; treating as success")
            return ToolCallResult(
                f"Page was likely updated successfully despite error: {response_result.message}\n"
                "This is a known issue with the Wiki.js API."
            )

        raise UpstreamError(f"Failed to update page: {response_result.message or 'Unknown error'}")
