from app.services.media import MediaService
from app.services.post import PostService

__all__ = ["MediaService", "PostService"]
