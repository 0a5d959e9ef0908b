# app/dependencies/__init__.py

from app.dependencies.dependencies import (
    FeaturedRegistryDep,
    MediaDep,
    PostFormDep,
    PostPageQuery,
    PostPageQueryDep,
    PostRepoDep,
    PostServiceDep,
    SessionDep,
    ThumbnailDep,
    get_featured_registry,
    get_media_service,
    get_post_form,
    get_post_page_query,
    get_post_repository,
    get_post_service,
    get_thumbnail,
)

__all__ = [
    "FeaturedRegistryDep",
    "MediaDep",
    "PostFormDep",
    "PostPageQuery",
    "PostPageQueryDep",
    "PostRepoDep",
    "PostServiceDep",
    "SessionDep",
    "ThumbnailDep",
    "get_featured_registry",
    "get_media_service",
    "get_post_form",
    "get_post_page_query",
    "get_post_repository",
    "get_post_service",
    "get_thumbnail",
]
