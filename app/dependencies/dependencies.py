# app/dependencies/dependencies.py

"""Application dependencies: sessions, repositories, services and form parsing."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, File, Form, Query, UploadFile
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs import settings
from app.db import get_session
from app.errors.post import InvalidPostError
from app.errors.validation import format_errors
from app.repositories import FeaturedRegistry, PostRepository
from app.schemas.post import PostCreate
from app.services import MediaService, PostService
from app.utils.helpers import parse_tags

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_post_repository(session: SessionDep) -> PostRepository:
    """
    Resolve the `PostRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    PostRepository
        Repository instance bound to the session.
    """
    return PostRepository(session)


def get_featured_registry(session: SessionDep) -> FeaturedRegistry:
    return FeaturedRegistry(session)


def get_media_service() -> MediaService:
    return MediaService()


PostRepoDep = Annotated[PostRepository, Depends(get_post_repository)]
FeaturedRegistryDep = Annotated[FeaturedRegistry, Depends(get_featured_registry)]
MediaDep = Annotated[MediaService, Depends(get_media_service)]


def get_post_service(
    repo: PostRepoDep,
    registry: FeaturedRegistryDep,
    media: MediaDep,
) -> PostService:
    """
    Resolve the `PostService` dependency.

    Repository and registry share the request's session, so a request's
    writes commit or roll back together.

    Returns
    -------
    PostService
        Service bound to the current request.
    """
    return PostService(repo, registry, media)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]


@dataclass(frozen=True)
class PostPageQuery:
    """
    Query container for post pagination.

    Parameters
    ----------
    page_no : int
        Zero-based page number.
    limit : int
        Page size.
    """

    page_no: int = 0
    limit: int = 10


def get_post_page_query(
    page_no: Annotated[
        int,
        Query(alias="pageNo", ge=0, description="Zero-based page number"),
    ] = 0,
    limit: Annotated[
        int,
        Query(ge=1, le=settings.MAX_PAGE_SIZE, description="Number of posts per page"),
    ] = settings.DEFAULT_PAGE_SIZE,
) -> PostPageQuery:
    return PostPageQuery(page_no=page_no, limit=limit)


PostPageQueryDep = Annotated[PostPageQuery, Depends(get_post_page_query)]


def get_post_form(
    title: Annotated[str | None, Form(description="Post title")] = None,
    meta: Annotated[str | None, Form(description="Meta description")] = None,
    content: Annotated[str | None, Form(description="Post content")] = None,
    slug: Annotated[str | None, Form(description="Unique slug")] = None,
    author: Annotated[str | None, Form(description="Author name")] = None,
    tags: Annotated[
        str | None,
        Form(description='JSON array (["a","b"]) or comma-separated tags'),
    ] = None,
    featured: Annotated[str | None, Form(description="true to feature the post")] = None,
) -> PostCreate:
    """
    Build a `PostCreate` from multipart form fields.

    Every field is read as optional text so that missing or malformed
    values surface as `InvalidPostError` rather than a request validation
    error.

    Raises
    ------
    InvalidPostError
        If tags cannot be parsed or the fields fail validation.
    """
    try:
        tag_list = parse_tags(tags)
    except ValueError as e:
        raise InvalidPostError(str(e)) from e

    fields = {
        "title": title,
        "meta": meta,
        "content": content,
        "slug": slug,
        "author": author,
        "featured": featured,
    }
    data = {key: value for key, value in fields.items() if value is not None}
    data["tags"] = tag_list

    try:
        return PostCreate.model_validate(data)
    except ValidationError as e:
        raise InvalidPostError(errors=format_errors(list(e.errors()), skip_location=0)) from e


def get_thumbnail(
    thumbnail: Annotated[UploadFile | None, File(description="Thumbnail image")] = None,
) -> UploadFile | None:
    # browsers send an empty part when no file was picked
    if thumbnail is None or not thumbnail.filename:
        return None
    return thumbnail


PostFormDep = Annotated[PostCreate, Depends(get_post_form)]
ThumbnailDep = Annotated[UploadFile | None, Depends(get_thumbnail)]
