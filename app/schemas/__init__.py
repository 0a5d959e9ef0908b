from app.schemas.health import HealthCheckResponse, ServicesStatus
from app.schemas.post import (
    ImageUploadResponse,
    MessageResponse,
    PaginatedPosts,
    PostCreate,
    PostDetail,
    PostDetailEnvelope,
    PostFullDetail,
    PostFullDetailEnvelope,
    PostItemList,
    PostListItem,
    PostSummary,
    PostSummaryEnvelope,
    PostSummaryList,
    UploadedImage,
)

__all__ = [
    "HealthCheckResponse",
    "ServicesStatus",
    "ImageUploadResponse",
    "MessageResponse",
    "PaginatedPosts",
    "PostCreate",
    "PostDetail",
    "PostDetailEnvelope",
    "PostFullDetail",
    "PostFullDetailEnvelope",
    "PostItemList",
    "PostListItem",
    "PostSummary",
    "PostSummaryEnvelope",
    "PostSummaryList",
    "UploadedImage",
]
