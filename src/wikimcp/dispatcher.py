"""Routes tool calls to page handlers and converts every failure into a result."""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from .catalog import (
    CREATE_PAGE,
    DEFAULT_EDITOR,
    DEFAULT_LIMIT,
    DEFAULT_ORDER_BY,
    GET_PAGE,
    LIST_PAGES,
    ORDER_BY_VALUES,
    TOOLS,
    UPDATE_PAGE,
    ToolDefinition,
)
from .errors import InvalidArgument, UnknownTool, WikiMCPError
from .handlers import PageHandlers
from .models import ToolCallResult

logger = logging.getLogger(__name__)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _field(
    tool: str,
    arguments: Mapping[str, Any],
    name: str,
    check: Callable[[Any], bool],
    expected: str,
    required: bool = False,
) -> Any:
    """Fetch one argument, checking its presence and primitive type.

    ``None`` counts as absent.
    """
    value = arguments.get(name)
    if value is None:
        if required:
            raise InvalidArgument(f"Invalid arguments for {tool}: '{name}' is required")
        return None
    if not check(value):
        raise InvalidArgument(f"Invalid arguments for {tool}: '{name}' must be {expected}")
    return value


class Dispatcher:
    """Single entry point for tool calls coming from the MCP host."""

    def __init__(self, handlers: PageHandlers):
        self.handlers = handlers
        self._routes = {
            LIST_PAGES: self._list_pages,
            GET_PAGE: self._get_page,
            CREATE_PAGE: self._create_page,
            UPDATE_PAGE: self._update_page,
        }

    def list_tools(self) -> List[ToolDefinition]:
        return list(TOOLS)

    async def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]]) -> ToolCallResult:
        """Run a tool. Never raises; failures come back with ``is_error`` set."""
        try:
            route = self._routes.get(name)
            if route is None:
                raise UnknownTool(f"Unknown tool: {name}")
            if arguments is None:
                raise InvalidArgument(f"Invalid arguments for {name}: no arguments provided")
            if not isinstance(arguments, Mapping):
                raise InvalidArgument(f"Invalid arguments for {name}: arguments must be an object")
            return await route(arguments)
        except WikiMCPError as e:
            logger.warning(f"Tool {name} failed: {e}")
            return ToolCallResult(str(e), is_error=True)
        except Exception as e:
            logger.exception(f"Unexpected error in tool {name}")
            return ToolCallResult(f"Error: {e}", is_error=True)

    async def _list_pages(self, arguments: Mapping[str, Any]) -> ToolCallResult:
        order_by = _field(LIST_PAGES, arguments, "orderBy", _is_str, "a string")
        if order_by is not None and order_by not in ORDER_BY_VALUES:
            raise InvalidArgument(
                f"Invalid arguments for {LIST_PAGES}: 'orderBy' must be one of {', '.join(ORDER_BY_VALUES)}"
            )
        limit = _field(LIST_PAGES, arguments, "limit", _is_int, "an integer")
        if limit is not None and limit < 1:
            raise InvalidArgument(f"Invalid arguments for {LIST_PAGES}: 'limit' must be positive")

        return await self.handlers.list_pages(
            order_by=order_by or DEFAULT_ORDER_BY,
            limit=limit or DEFAULT_LIMIT,
        )

    async def _get_page(self, arguments: Mapping[str, Any]) -> ToolCallResult:
        page_id = _field(GET_PAGE, arguments, "id", _is_int, "an integer")
        path = _field(GET_PAGE, arguments, "path", _is_str, "a string")
        if page_id is None and path is None:
            raise InvalidArgument(f"Invalid arguments for {GET_PAGE}: either 'id' or 'path' must be provided")

        return await self.handlers.get_page(page_id=page_id, path=path)

    async def _create_page(self, arguments: Mapping[str, Any]) -> ToolCallResult:
        fields: Dict[str, Any] = {
            name: _field(CREATE_PAGE, arguments, name, _is_str, "a string", required=True)
            for name in ("path", "title", "content")
        }
        editor = _field(CREATE_PAGE, arguments, "editor", _is_str, "a string")
        is_published = _field(CREATE_PAGE, arguments, "isPublished", _is_bool, "a boolean")

        return await self.handlers.create_page(
            editor=editor or DEFAULT_EDITOR,
            is_published=True if is_published is None else is_published,
            **fields,
        )

    async def _update_page(self, arguments: Mapping[str, Any]) -> ToolCallResult:
        page_id = _field(UPDATE_PAGE, arguments, "id", _is_int, "an integer")
        path = _field(UPDATE_PAGE, arguments, "path", _is_str, "a string")
        if page_id is None and path is None:
            raise InvalidArgument(f"Invalid arguments for {UPDATE_PAGE}: either 'id' or 'path' must be provided")

        return await self.handlers.update_page(
            page_id=page_id,
            path=path,
            title=_field(UPDATE_PAGE, arguments, "title", _is_str, "a string"),
            content=_field(UPDATE_PAGE, arguments, "content", _is_str, "a string"),
            editor=_field(UPDATE_PAGE, arguments, "editor", _is_str, "a string"),
            is_published=_field(UPDATE_PAGE, arguments, "isPublished", _is_bool, "a boolean"),
        )
