import httpx
import pytest
from fastmcp import Client

from wikimcp.catalog import TOOLS
from wikimcp.client import WikiGraphQLClient
from wikimcp.server import build_server


@pytest.fixture
def mcp(settings, fake_client):
    return build_server(settings, client=fake_client)


def input_schema(tool):
    return tool.model_dump(by_alias=True)["inputSchema"]


async def test_listed_tools_advertise_catalog_schemas(mcp):
    async with Client(mcp) as client:
        tools = await client.list_tools()

    listed = {tool.name: tool for tool in tools}
    assert sorted(listed) == sorted(definition.name for definition in TOOLS)
    for definition in TOOLS:
        assert listed[definition.name].description == definition.description
        assert input_schema(listed[definition.name]) == definition.parameters
    assert input_schema(listed["wiki_get_page"])["oneOf"] == [{"required": ["id"]}, {"required": ["path"]}]
    assert input_schema(listed["wiki_update_page"])["oneOf"] == [{"required": ["id"]}, {"required": ["path"]}]


async def test_get_without_id_or_path_is_an_error_result(mcp, fake_client):
    async with Client(mcp) as client:
        result = await client.call_tool("wiki_get_page", {}, raise_on_error=False)

    assert result.is_error is True
    assert "Invalid arguments" in result.content[0].text
    assert fake_client.calls == []


async def test_get_page_returns_text(mcp):
    async with Client(mcp) as client:
        result = await client.call_tool("wiki_get_page", {"path": "/home"})

    assert result.is_error is False
    assert result.content[0].text == "# Home\n\nWelcome"


async def test_not_found_is_an_error_result(mcp):
    async with Client(mcp) as client:
        result = await client.call_tool("wiki_get_page", {"id": 99}, raise_on_error=False)

    assert result.is_error is True
    assert result.content[0].text == "Page not found for ID: 99"


async def test_list_pages_uses_defaults(mcp, fake_client):
    async with Client(mcp) as client:
        result = await client.call_tool("wiki_list_pages", {})

    assert "Home" in result.content[0].text
    assert fake_client.calls == [("list_pages", "TITLE", 10)]


async def test_create_page_fills_defaults(mcp, fake_client):
    async with Client(mcp) as client:
        await client.call_tool("wiki_create_page", {"path": "new", "title": "New", "content": "Body"})

    assert fake_client.calls == [("create_page", "new", "New", "Body", "markdown", True)]


async def test_update_leaves_unset_fields_unset(mcp, fake_client):
    async with Client(mcp) as client:
        result = await client.call_tool("wiki_update_page", {"path": "home", "content": "New body"})

    assert result.is_error is False
    assert fake_client.calls == [
        ("get_page_by_path", "home"),
        ("update_page", 1, None, "New body", None, None),
    ]


async def test_sessions_share_a_live_client(settings):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"data": {"pages": {"list": []}}})

    wiki = WikiGraphQLClient(settings, transport=httpx.MockTransport(handler))
    mcp = build_server(settings, client=wiki)

    for _ in range(2):
        async with Client(mcp) as client:
            result = await client.call_tool("wiki_list_pages", {})
        assert result.content[0].text == "No pages found"

    assert len(requests) == 2
    await wiki.aclose()
