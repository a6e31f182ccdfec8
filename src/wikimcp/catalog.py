"""Declarative descriptions of the tools exposed to the MCP host."""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

LIST_PAGES = "wiki_list_pages"
GET_PAGE = "wiki_get_page"
CREATE_PAGE = "wiki_create_page"
UPDATE_PAGE = "wiki_update_page"

ORDER_BY_VALUES = ("ID", "PATH", "TITLE", "CREATED", "UPDATED")
DEFAULT_ORDER_BY = "TITLE"
DEFAULT_LIMIT = 10
DEFAULT_EDITOR = "markdown"


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)


LIST_PAGES_TOOL = ToolDefinition(
    name=LIST_PAGES,
    description="Get a list of pages from Wiki.js with optional filters",
    parameters={
        "type": "object",
        "properties": {
            "orderBy": {
                "type": "string",
                "description": "Order pages by this field (ID, PATH, TITLE, CREATED, UPDATED)",
                "enum": list(ORDER_BY_VALUES),
                "default": DEFAULT_ORDER_BY,
            },
            "limit": {
                "type": "integer",
                "description": "Maximum number of pages to return (optional)",
                "default": DEFAULT_LIMIT,
            },
        },
    },
)

GET_PAGE_TOOL = ToolDefinition(
    name=GET_PAGE,
    description="Get a single page from Wiki.js by ID or path",
    parameters={
        "type": "object",
        "properties": {
            "id": {"type": "integer", "description": "The ID of the page to retrieve"},
            "path": {"type": "string", "description": "The path of the page to retrieve"},
        },
        "oneOf": [{"required": ["id"]}, {"required": ["path"]}],
    },
)

CREATE_PAGE_TOOL = ToolDefinition(
    name=CREATE_PAGE,
    description="Create a new page in Wiki.js",
    parameters={
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "The path where the page will be created"},
            "title": {"type": "string", "description": "The title of the page"},
            "content": {"type": "string", "description": "The content of the page"},
            "editor": {
                "type": "string",
                "description": "The editor to use (markdown, html, etc.)",
                "default": DEFAULT_EDITOR,
            },
            "isPublished": {
                "type": "boolean",
                "description": "Whether the page should be published",
                "default": True,
            },
        },
        "required": ["path", "title", "content"],
    },
)

UPDATE_PAGE_TOOL = ToolDefinition(
    name=UPDATE_PAGE,
    description="Update an existing page in Wiki.js",
    parameters={
        "type": "object",
        "properties": {
            "id": {"type": "integer", "description": "The ID of the page to update"},
            "path": {
                "type": "string",
                "description": "The path of the page to update (if ID is not provided)",
            },
            "title": {"type": "string", "description": "The new title for the page (optional)"},
            "content": {"type": "string", "description": "The new content for the page (optional)"},
            "editor": {"type": "string", "description": "The editor to use (markdown, html, etc.)"},
            "isPublished": {"type": "boolean", "description": "Whether the page should be published"},
        },
        "oneOf": [{"required": ["id"]}, {"required": ["path"]}],
    },
)

TOOLS: Tuple[ToolDefinition, ...] = (LIST_PAGES_TOOL, GET_PAGE_TOOL, CREATE_PAGE_TOOL, UPDATE_PAGE_TOOL)
