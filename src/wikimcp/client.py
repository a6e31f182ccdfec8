"""Wiki.js GraphQL client adapter.

The adapter owns all knowledge of the GraphQL payload layout. Every public
method returns a tagged result (``Success`` carrying a typed record, or
``Failure`` carrying a diagnostic), so callers never probe nested optional
fields themselves and upstream problems never surface as exceptions.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import Settings
from .models import NOT_FOUND, Failure, MutationOutcome, Page, PageSummary, Result, Success

logger = logging.getLogger(__name__)

LIST_PAGES_QUERY = """
query ListPages($orderBy: PageOrderBy!, $limit: Int) {
    pages {
        list(orderBy: $orderBy, limit: $limit) {
            id
            path
            title
            createdAt
            updatedAt
        }
    }
}
"""

GET_PAGE_BY_ID_QUERY = """
query GetPageById($id: Int!) {
    pages {
        single(id: $id) {
            id
            path
            title
            description
            content
            createdAt
            updatedAt
            editor
            isPublished
        }
    }
}
"""

GET_PAGE_BY_PATH_QUERY = """
query GetPageByPath($path: String!) {
    pages {
        singleByPath(path: $path) {
            id
            path
            title
            description
            content
            createdAt
            updatedAt
            editor
            isPublished
        }
    }
}
"""

CREATE_PAGE_MUTATION = """
mutation CreatePage($content: String!, $description: String, $editor: String!, $isPublished: Boolean!, $path: String!, $title: String!) {
    pages {
        create(content: $content, description: $description, editor: $editor, isPublished: $isPublished, path: $path, title: $title) {
            responseResult {
                succeeded
                errorCode
                slug
                message
            }
            page {
                id
                path
                title
            }
        }
    }
}
"""

UPDATE_PAGE_MUTATION = """
mutation UpdatePage($id: Int!, $content: String, $description: String, $editor: String, $isPublished: Boolean, $title: String) {
    pages {
        update(id: $id, content: $content, description: $description, editor: $editor, isPublished: $isPublished, title: $title) {
            responseResult {
                succeeded
                errorCode
                slug
                message
            }
            page {
                id
                path
                title
            }
        }
    }
}
"""

# Connection never established, so the request cannot have reached the server
RETRYABLE_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)


def _dig(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


class WikiGraphQLClient:
    """Wiki.js GraphQL API client for handling requests."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.url = settings.graphql_url
        self.transport = transport
        self.client = self._open()

    def _open(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.WIKI_REQUEST_TIMEOUT,
            transport=self.transport,
            headers={
                "Authorization": f"Bearer {self.settings.WIKI_API_TOKEN}",
                "Content-Type": "application/json",
            },
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        if self.client.is_closed:
            logger.debug("HTTP client was closed, opening a new one")
            self.client = self._open()

        response = None
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.settings.WIKI_RETRY_ATTEMPTS),
            wait=wait_exponential(multiplier=1, min=4, max=10),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                response = await self.client.post(self.url, json=payload)
        return response

    async def graphql_request(self, query: str, variables: Dict = None) -> Result[Dict[str, Any]]:
        """Make GraphQL request to Wiki.js and return its ``data`` member."""
        payload = {"query": query}
        if variables:
            payload["variables"] = variables
        logger.debug(f"GraphQL variables: {variables}")

        try:
            response = await self._post(payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            message = f"Wiki.js GraphQL HTTP error {e.response.status_code}: {e.response.text}"
            logger.error(message)
            return Failure(message)
        except httpx.RequestError as e:
            message = f"Wiki.js connection error: {str(e) or type(e).__name__}"
            logger.error(message)
            return Failure(message)
        except ValueError as e:
            message = f"Wiki.js returned a non-JSON response: {e}"
            logger.error(message)
            return Failure(message)
        except RuntimeError as e:
            # httpx raises this when the client is closed mid-request
            message = f"Wiki.js client unavailable: {e}"
            logger.error(message)
            return Failure(message)

        logger.debug(f"GraphQL response: {data}")
        if not isinstance(data, dict):
            return Failure("Unexpected GraphQL response: top level is not an object")

        # Check for GraphQL errors
        if data.get("errors"):
            error_msg = "; ".join(
                err.get("message", str(err)) if isinstance(err, dict) else str(err)
                for err in data["errors"]
            )
            logger.error(f"GraphQL error: {error_msg}")
            return Failure(f"GraphQL error: {error_msg}")

        return Success(data.get("data") or {})

    async def list_pages(self, order_by: str, limit: int) -> Result[List[PageSummary]]:
        result = await self.graphql_request(LIST_PAGES_QUERY, {"orderBy": order_by, "limit": limit})
        if isinstance(result, Failure):
            return result

        items = _dig(result.value, "pages", "list")
        if not isinstance(items, list):
            return Failure("Unexpected response shape for pages.list")
        try:
            return Success([PageSummary.model_validate(item) for item in items])
        except ValidationError as e:
            return Failure(f"Unexpected page entry in pages.list: {e}")

    async def get_page_by_id(self, page_id: int) -> Result[Page]:
        result = await self.graphql_request(GET_PAGE_BY_ID_QUERY, {"id": page_id})
        return self._unwrap_page(result, "single", f"ID {page_id}")

    async def get_page_by_path(self, path: str) -> Result[Page]:
        result = await self.graphql_request(GET_PAGE_BY_PATH_QUERY, {"path": path})
        return self._unwrap_page(result, "singleByPath", f"path {path}")

    def _unwrap_page(self, result: Result[Dict[str, Any]], field: str, key: str) -> Result[Page]:
        if isinstance(result, Failure):
            return result

        node = _dig(result.value, "pages", field)
        if not node:
            return Failure(f"No page with {key}", kind=NOT_FOUND)
        try:
            return Success(Page.model_validate(node))
        except ValidationError as e:
            return Failure(f"Unexpected page record for {key}: {e}")

    async def create_page(
        self,
        path: str,
        title: str,
        content: str,
        editor: str = "markdown",
        is_published: bool = True,
    ) -> Result[MutationOutcome]:
        variables = {
            "path": path,
            "title": title,
            "content": content,
            "editor": editor,
            "isPublished": is_published,
            "description": "",
        }
        result = await self.graphql_request(CREATE_PAGE_MUTATION, variables)
        return self._unwrap_mutation(result, "create")

    async def update_page(
        self,
        page_id: int,
        title: Optional[str] = None,
        content: Optional[str] = None,
        editor: Optional[str] = None,
        is_published: Optional[bool] = None,
    ) -> Result[MutationOutcome]:
        """Update a page, sending only the fields that were provided.

        Omitted fields are left out of the GraphQL variables entirely so that
        Wiki.js keeps their current values.
        """
        variables = {"id": page_id}
        for name, value in (
            ("title", title),
            ("content", content),
            ("editor", editor),
            ("isPublished", is_published),
        ):
            if value is not None:
                variables[name] = value

        result = await self.graphql_request(UPDATE_PAGE_MUTATION, variables)
        return self._unwrap_mutation(result, "update")

    def _unwrap_mutation(self, result: Result[Dict[str, Any]], field: str) -> Result[MutationOutcome]:
        if isinstance(result, Failure):
            return result

        node = _dig(result.value, "pages", field)
        if not isinstance(node, dict) or not isinstance(node.get("responseResult"), dict):
            return Failure(f"Unexpected response shape for pages.{field}")
        try:
            return Success(MutationOutcome.model_validate(node))
        except ValidationError as e:
            return Failure(f"Unexpected result for pages.{field}: {e}")
