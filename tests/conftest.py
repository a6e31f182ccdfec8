import pytest

from wikimcp.config import Settings
from wikimcp.dispatcher import Dispatcher
from wikimcp.handlers import PageHandlers
from wikimcp.models import NOT_FOUND, Failure, MutationOutcome, Page, PageSummary, Success


def make_page(**overrides) -> Page:
    data = {
        "id": 1,
        "path": "home",
        "title": "Home",
        "description": "",
        "content": "Welcome",
        "createdAt": "2024-01-01T10:00:00Z",
        "updatedAt": "2024-01-02T10:00:00Z",
        "editor": "markdown",
        "isPublished": True,
    }
    data.update(overrides)
    return Page.model_validate(data)


def make_outcome(succeeded=True, message=None, page=None) -> MutationOutcome:
    return MutationOutcome.model_validate({
        "responseResult": {"succeeded": succeeded, "errorCode": 0 if succeeded else 1, "slug": "x", "message": message},
        "page": page,
    })


class FakeWikiClient:
    """In-memory stand-in for WikiGraphQLClient that records every call."""

    def __init__(self, pages=(), summaries=(), list_failure=None, lookup_failure=None,
                 path_results=None, create_results=None, update_result=None):
        self.calls = []
        self.pages = list(pages)
        self.summaries = list(summaries)
        self.list_failure = list_failure
        self.lookup_failure = lookup_failure
        self.path_results = path_results or {}
        self.create_results = create_results or {}
        self.update_result = update_result

    @property
    def call_names(self):
        return [call[0] for call in self.calls]

    async def list_pages(self, order_by, limit):
        self.calls.append(("list_pages", order_by, limit))
        if self.list_failure:
            return self.list_failure
        return Success(self.summaries[:limit])

    async def get_page_by_id(self, page_id):
        self.calls.append(("get_page_by_id", page_id))
        if self.lookup_failure:
            return self.lookup_failure
        for page in self.pages:
            if page.id == page_id:
                return Success(page)
        return Failure(f"No page with ID {page_id}", kind=NOT_FOUND)

    async def get_page_by_path(self, path):
        self.calls.append(("get_page_by_path", path))
        if path in self.path_results:
            return self.path_results[path]
        if self.lookup_failure:
            return self.lookup_failure
        for page in self.pages:
            if page.path == path:
                return Success(page)
        return Failure(f"No page with path {path}", kind=NOT_FOUND)

    async def create_page(self, path, title, content, editor="markdown", is_published=True):
        self.calls.append(("create_page", path, title, content, editor, is_published))
        if path in self.create_results:
            return self.create_results[path]
        return Success(make_outcome(page={"id": 42, "path": path, "title": title}))

    async def update_page(self, page_id, title=None, content=None, editor=None, is_published=None):
        self.calls.append(("update_page", page_id, title, content, editor, is_published))
        if self.update_result is not None:
            return self.update_result
        return Success(make_outcome(page={"id": page_id, "path": "home", "title": title or "Home"}))


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        WIKI_API_URL="https://wiki.example.com/",
        WIKI_API_TOKEN="secret-token",
        WIKI_RETRY_ATTEMPTS=1,
    )


@pytest.fixture
def home_page():
    return make_page()


@pytest.fixture
def fake_client(home_page):
    return FakeWikiClient(
        pages=[home_page, make_page(id=2, path="docs/setup", title="Setup", content="Steps")],
        summaries=[
            PageSummary.model_validate({"id": 1, "path": "home", "title": "Home", "updatedAt": "2024-01-02T10:00:00Z"}),
            PageSummary.model_validate({"id": 2, "path": "docs/setup", "title": "Setup", "updatedAt": None}),
        ],
    )


@pytest.fixture
def handlers(fake_client):
    return PageHandlers(fake_client)


@pytest.fixture
def dispatcher(handlers):
    return Dispatcher(handlers)
