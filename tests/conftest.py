# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os
from tempfile import mkdtemp

# Must happen before app settings are imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["STORAGE_PROVIDER"] = "local"
os.environ["LOG_TO_FILE"] = "false"
os.environ["UPLOADS_DIR"] = mkdtemp(prefix="blog-uploads-")

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from io import BytesIO  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession  # noqa: E402

from app.db import build_engine, build_session_maker, init_db  # noqa: E402
from app.models import PostDB  # noqa: E402
from app.repositories import PostRepository  # noqa: E402
from app.schemas.post import PostCreate, UploadedImage  # noqa: E402
from app.services.storage.base import StorageService  # noqa: E402

PostFactory = Callable[..., Awaitable[PostDB]]


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database per test."""
    test_engine = build_engine("sqlite+aiosqlite://")
    await init_db(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    maker = build_session_maker(engine)
    async with maker() as db_session:
        yield db_session


@pytest.fixture
def post_repo(session: AsyncSession) -> PostRepository:
    return PostRepository(session)


@pytest.fixture
def make_post(post_repo: PostRepository) -> PostFactory:
    """Create and flush a post; any field can be overridden."""
    counter = {"n": 0}

    async def factory(
        thumbnail: UploadedImage | None = None,
        **overrides: object,
    ) -> PostDB:
        counter["n"] += 1
        fields: dict[str, object] = {
            "title": f"Post number {counter['n']}",
            "meta": "Meta description",
            "content": "Some content",
            "slug": f"post-{counter['n']}",
            "tags": [],
        }
        fields.update(overrides)
        return await post_repo.create(PostCreate.model_validate(fields), thumbnail)

    return factory


@pytest.fixture
def valid_jpeg_bytes() -> bytes:
    """Create valid JPEG image bytes."""
    img = Image.new("RGB", (200, 200), color="red")
    buffer = BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def valid_png_bytes() -> bytes:
    """Create valid PNG image bytes."""
    img = Image.new("RGBA", (200, 200), color="blue")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def uploaded_image() -> UploadedImage:
    return UploadedImage(
        url="https://res.cloudinary.com/demo/image/upload/blog/thumbnails/abc.jpg",
        public_id="blog/thumbnails/abc",
    )


@pytest.fixture
def mock_storage(uploaded_image: UploadedImage) -> MagicMock:
    """Image store that accepts every upload and confirms every deletion."""
    mock = MagicMock(spec=StorageService)
    mock.upload_image = AsyncMock(return_value=uploaded_image)
    mock.destroy_image = AsyncMock(return_value=True)
    return mock
