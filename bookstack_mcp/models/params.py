from __future__ import annotations

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

ExportFormat = Literal["html", "pdf", "plaintext", "markdown"]
ContentType = Literal["book", "chapter", "page", "bookshelf"]


class Params(BaseModel):
    """
    Base class for validated tool parameters.

    Unknown keys are dropped; strict mode rejects them before validation.
    """

    model_config = ConfigDict(extra="ignore")


class Tag(Params):
    name: str = Field(min_length=1, max_length=255)
    value: str = Field(max_length=255)


class ListParams(Params):
    count: int = Field(default=20, ge=1, le=500)
    offset: int = Field(default=0, ge=0)


# Books


class BookFilter(Params):
    name: Optional[str] = None
    created_by: Optional[int] = None


class BooksList(ListParams):
    sort: Literal["name", "created_at", "updated_at"] = "name"
    filter: Optional[BookFilter] = None


class BookCreate(Params):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1900)
    description_html: Optional[str] = Field(default=None, max_length=2000)
    tags: Optional[List[Tag]] = None
    default_template_id: Optional[int] = None


class BookUpdate(Params):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1900)
    description_html: Optional[str] = Field(default=None, max_length=2000)
    tags: Optional[List[Tag]] = None
    default_template_id: Optional[int] = None


# Pages


class PageFilter(Params):
    name: Optional[str] = None
    book_id: Optional[int] = None
    chapter_id: Optional[int] = None
    draft: Optional[bool] = None
    template: Optional[bool] = None


class PagesList(ListParams):
    sort: Literal["name", "created_at", "updated_at", "priority"] = "name"
    filter: Optional[PageFilter] = None


class PageCreate(Params):
    book_id: Optional[int] = None
    chapter_id: Optional[int] = None
    name: str = Field(min_length=1, max_length=255)
    html: Optional[str] = None
    markdown: Optional[str] = None
    tags: Optional[List[Tag]] = None
    priority: Optional[int] = None

    @model_validator(mode="after")
    def _check_parent_and_content(self) -> "PageCreate":
        if self.book_id is None and self.chapter_id is None:
            raise ValueError("either book_id or chapter_id is required")
        if self.html is None and self.markdown is None:
            raise ValueError("either html or markdown content is required")
        return self


class PageUpdate(Params):
    book_id: Optional[int] = None
    chapter_id: Optional[int] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    html: Optional[str] = None
    markdown: Optional[str] = None
    tags: Optional[List[Tag]] = None
    priority: Optional[int] = None


# Chapters


class ChapterFilter(Params):
    name: Optional[str] = None
    book_id: Optional[int] = None
    created_by: Optional[int] = None


class ChaptersList(ListParams):
    sort: Literal["name", "created_at", "updated_at", "priority"] = "name"
    filter: Optional[ChapterFilter] = None


class ChapterCreate(Params):
    book_id: int = Field(ge=1)
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1900)
    description_html: Optional[str] = Field(default=None, max_length=2000)
    tags: Optional[List[Tag]] = None
    priority: Optional[int] = None


class ChapterUpdate(Params):
    book_id: Optional[int] = Field(default=None, ge=1)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1900)
    description_html: Optional[str] = Field(default=None, max_length=2000)
    tags: Optional[List[Tag]] = None
    priority: Optional[int] = None


# Shelves


class ShelvesList(ListParams):
    sort: Literal["name", "created_at", "updated_at"] = "name"
    filter: Optional[BookFilter] = None


class ShelfCreate(Params):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1900)
    description_html: Optional[str] = Field(default=None, max_length=2000)
    tags: Optional[List[Tag]] = None
    books: Optional[List[int]] = None


class ShelfUpdate(Params):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1900)
    description_html: Optional[str] = Field(default=None, max_length=2000)
    tags: Optional[List[Tag]] = None
    books: Optional[List[int]] = None


# Users


class UserFilter(Params):
    name: Optional[str] = None
    email: Optional[str] = None
    active: Optional[bool] = None


class UsersList(ListParams):
    sort: Literal["name", "email", "created_at", "updated_at"] = "name"
    filter: Optional[UserFilter] = None


class UserCreate(Params):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: Optional[str] = Field(default=None, min_length=8)
    roles: Optional[List[int]] = None
    send_invite: bool = False
    external_auth_id: Optional[str] = None


class UserUpdate(Params):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(
        default=None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$"
    )
    password: Optional[str] = Field(default=None, min_length=8)
    roles: Optional[List[int]] = None
    active: Optional[bool] = None
    external_auth_id: Optional[str] = None


# Roles


class RoleFilter(Params):
    display_name: Optional[str] = None
    system_name: Optional[str] = None


class RolesList(ListParams):
    sort: Literal["display_name", "system_name", "created_at", "updated_at"] = "display_name"
    filter: Optional[RoleFilter] = None


class RoleCreate(Params):
    display_name: str = Field(min_length=1, max_length=180)
    description: Optional[str] = Field(default=None, max_length=1000)
    mfa_enforced: bool = False
    external_auth_id: Optional[str] = None
    permissions: Optional[Dict[str, bool]] = None


class RoleUpdate(Params):
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=180)
    description: Optional[str] = Field(default=None, max_length=1000)
    mfa_enforced: Optional[bool] = None
    external_auth_id: Optional[str] = None
    permissions: Optional[Dict[str, bool]] = None


# Attachments


class AttachmentFilter(Params):
    name: Optional[str] = None
    uploaded_to: Optional[int] = None
    extension: Optional[str] = None


class AttachmentsList(ListParams):
    sort: Literal["name", "created_at", "updated_at"] = "name"
    filter: Optional[AttachmentFilter] = None


class AttachmentCreate(Params):
    uploaded_to: int = Field(ge=1)
    name: str = Field(min_length=1, max_length=255)
    file: Optional[str] = None
    link: Optional[str] = None

    @model_validator(mode="after")
    def _check_file_or_link(self) -> "AttachmentCreate":
        if not self.file and not self.link:
            raise ValueError("either file or link is required")
        return self


class AttachmentUpdate(Params):
    uploaded_to: Optional[int] = Field(default=None, ge=1)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    file: Optional[str] = None
    link: Optional[str] = None


# Images


class ImageFilter(Params):
    name: Optional[str] = None
    type: Optional[Literal["gallery", "drawio"]] = None
    uploaded_to: Optional[int] = None


class ImagesList(ListParams):
    sort: Literal["name", "created_at", "updated_at"] = "created_at"
    filter: Optional[ImageFilter] = None


class ImageCreate(Params):
    name: str = Field(min_length=1, max_length=255)
    image: str = Field(min_length=1)
    type: Literal["gallery", "drawio"] = "gallery"
    uploaded_to: Optional[int] = None


class ImageUpdate(Params):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    image: Optional[str] = None
    uploaded_to: Optional[int] = None


# Search, recycle bin, audit log, permissions


class Search(Params):
    query: str = Field(min_length=1)
    page: int = Field(default=1, ge=1)
    count: int = Field(default=20, ge=1, le=100)


class RecycleBinList(ListParams):
    pass


class AuditLogFilter(Params):
    event: Optional[str] = None
    user_id: Optional[int] = None
    entity_type: Optional[Literal["page", "book", "chapter", "bookshelf", "user", "role"]] = None
    entity_id: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


class AuditLogList(ListParams):
    sort: Literal["created_at"] = "created_at"
    filter: Optional[AuditLogFilter] = None


class FallbackPermissions(Params):
    inheriting: Optional[bool] = None
    restricted: Optional[bool] = None


class PermissionEntry(Params):
    role_id: Optional[int] = None
    user_id: Optional[int] = None
    view: Optional[bool] = None
    create: Optional[bool] = None
    update: Optional[bool] = None
    delete: Optional[bool] = None

    @model_validator(mode="after")
    def _check_target(self) -> "PermissionEntry":
        if self.role_id is None and self.user_id is None:
            raise ValueError("each permission needs a role_id or user_id")
        return self


class ContentPermissionsUpdate(Params):
    owner_id: Optional[int] = None
    fallback_permissions: Optional[FallbackPermissions] = None
    permissions: Optional[List[PermissionEntry]] = None


SCHEMAS: Dict[str, type] = {
    "booksList": BooksList,
    "bookCreate": BookCreate,
    "bookUpdate": BookUpdate,
    "pagesList": PagesList,
    "pageCreate": PageCreate,
    "pageUpdate": PageUpdate,
    "chaptersList": ChaptersList,
    "chapterCreate": ChapterCreate,
    "chapterUpdate": ChapterUpdate,
    "shelvesList": ShelvesList,
    "shelfCreate": ShelfCreate,
    "shelfUpdate": ShelfUpdate,
    "usersList": UsersList,
    "userCreate": UserCreate,
    "userUpdate": UserUpdate,
    "rolesList": RolesList,
    "roleCreate": RoleCreate,
    "roleUpdate": RoleUpdate,
    "attachmentsList": AttachmentsList,
    "attachmentCreate": AttachmentCreate,
    "attachmentUpdate": AttachmentUpdate,
    "imagesList": ImagesList,
    "imageCreate": ImageCreate,
    "imageUpdate": ImageUpdate,
    "search": Search,
    "recycleBinList": RecycleBinList,
    "auditLogList": AuditLogList,
    "contentPermissionsUpdate": ContentPermissionsUpdate,
}
