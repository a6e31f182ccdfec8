"""Typed shapes for Wiki.js GraphQL payloads and adapter results."""

from dataclasses import dataclass
from typing import Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

NOT_FOUND = "not_found"
UPSTREAM = "upstream"


class WikiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PageSummary(WikiModel):
    """Entry returned by ``pages.list``."""

    id: int
    path: str
    title: str
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")


class Page(WikiModel):
    """Full page record returned by ``pages.single`` and ``pages.singleByPath``."""

    id: int
    path: str
    title: str
    description: Optional[str] = ""
    content: Optional[str] = ""
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    editor: Optional[str] = None
    is_published: Optional[bool] = Field(default=None, alias="isPublished")


class PageRef(WikiModel):
    id: int
    path: str
    title: str


class ResponseResult(WikiModel):
    """Mutation-level status envelope, distinct from transport success."""

    succeeded: bool = False
    error_code: Optional[int] = Field(default=None, alias="errorCode")
    slug: Optional[str] = None
    message: Optional[str] = None


class MutationOutcome(WikiModel):
    response_result: ResponseResult = Field(alias="responseResult")
    page: Optional[PageRef] = None


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    message: str
    kind: str = UPSTREAM

    @property
    def not_found(self) -> bool:
        return self.kind == NOT_FOUND


Result = Union[Success[T], Failure]


@dataclass(frozen=True)
class ToolCallResult:
    """Text result handed back to the MCP host."""

    text: str
    is_error: bool = False

    @property
    def content(self) -> List[Dict[str, str]]:
        return [{"type": "text", "text": self.text}]
