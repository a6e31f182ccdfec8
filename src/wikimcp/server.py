#!/usr/bin/env python3
"""Wiki.js MCP server using FastMCP - GraphQL version."""

import logging
import sys
from typing import Any, Callable, Dict, Literal, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool

from .catalog import (
    CREATE_PAGE,
    CREATE_PAGE_TOOL,
    DEFAULT_EDITOR,
    DEFAULT_LIMIT,
    DEFAULT_ORDER_BY,
    GET_PAGE,
    GET_PAGE_TOOL,
    LIST_PAGES,
    LIST_PAGES_TOOL,
    UPDATE_PAGE,
    UPDATE_PAGE_TOOL,
    ToolDefinition,
)
from .client import WikiGraphQLClient
from .config import Settings, load_settings, setup_logging
from .dispatcher import Dispatcher
from .errors import ConfigurationError
from .handlers import PageHandlers
from .paths import PathPolicy

logger = logging.getLogger(__name__)

SERVER_NAME = "wikimcp"

OrderBy = Literal["ID", "PATH", "TITLE", "CREATED", "UPDATED"]


def build_path_policy(settings: Settings) -> PathPolicy:
    try:
        return PathPolicy.from_tokens(settings.path_fallbacks)
    except ValueError as e:
        raise ConfigurationError(f"Invalid WIKI_PATH_FALLBACKS: {e}") from e


def register_tool(mcp: FastMCP, fn: Callable[..., Any], definition: ToolDefinition) -> Tool:
    """Register ``fn`` under ``definition``, advertising the catalog schema as-is.

    FastMCP derives an input schema from the function signature, which cannot
    express "id or path is required". The advertised schema is replaced with the
    catalog's, while arguments are still bound through the signature.
    """
    tool = Tool.from_function(fn, name=definition.name, description=definition.description)
    return mcp.add_tool(tool.model_copy(update={"parameters": dict(definition.parameters)}))


def build_server(settings: Settings, client: Optional[WikiGraphQLClient] = None) -> FastMCP:
    """Create the FastMCP server with the four wiki tools registered.

    The GraphQL client is shared by every MCP session and lives as long as the
    process does.
    """
    path_policy = build_path_policy(settings)
    client = client or WikiGraphQLClient(settings)
    dispatcher = Dispatcher(PageHandlers(client, path_policy))

    mcp = FastMCP(SERVER_NAME)

    async def invoke(name: str, arguments: Dict[str, Any]) -> str:
        # Unset optional parameters are dropped so the wiki keeps current values
        result = await dispatcher.call_tool(
            name, {key: value for key, value in arguments.items() if value is not None}
        )
        if result.is_error:
            raise ToolError(result.text)
        return result.text

    async def wiki_list_pages(orderBy: OrderBy = DEFAULT_ORDER_BY, limit: int = DEFAULT_LIMIT) -> str:
        return await invoke(LIST_PAGES, {"orderBy": orderBy, "limit": limit})

    async def wiki_get_page(id: Optional[int] = None, path: Optional[str] = None) -> str:
        return await invoke(GET_PAGE, {"id": id, "path": path})

    async def wiki_create_page(
        path: str,
        title: str,
        content: str,
        editor: str = DEFAULT_EDITOR,
        isPublished: bool = True,
    ) -> str:
        return await invoke(
            CREATE_PAGE,
            {"path": path, "title": title, "content": content, "editor": editor, "isPublished": isPublished},
        )

    async def wiki_update_page(
        id: Optional[int] = None,
        path: Optional[str] = None,
        title: Optional[str] = None,
        content: Optional[str] = None,
        editor: Optional[str] = None,
        isPublished: Optional[bool] = None,
    ) -> str:
        return await invoke(
            UPDATE_PAGE,
            {
                "id": id,
                "path": path,
                "title": title,
                "content": content,
                "editor": editor,
                "isPublished": isPublished,
            },
        )

    register_tool(mcp, wiki_list_pages, LIST_PAGES_TOOL)
    register_tool(mcp, wiki_get_page, GET_PAGE_TOOL)
    register_tool(mcp, wiki_create_page, CREATE_PAGE_TOOL)
    register_tool(mcp, wiki_update_page, UPDATE_PAGE_TOOL)

    return mcp


def main():
    """Main entry point for the MCP server."""
    load_dotenv()
    try:
        settings = load_settings()
        mcp = build_server(settings)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(settings)
    logger.info(f"Wiki.js MCP Server running on stdio (endpoint: {settings.graphql_url}, token: {settings.masked_token})")
    mcp.run()


if __name__ == "__main__":
    main()
