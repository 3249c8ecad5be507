"""Pydantic request/response schemas."""

from etiquetas.schemas.article import (
    ArticleCreate,
    ArticleListResponse,
    ArticleOut,
    ArticleResponse,
    ArticleUpdate,
    CategoriesResponse,
)
from etiquetas.schemas.auth import (
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    TokenCheckResponse,
    UserProfile,
)
from etiquetas.schemas.common import MessageResponse, Pagination, StatusUpdate
from etiquetas.schemas.health import HealthResponse, InfoResponse
from etiquetas.schemas.user import (
    UserCreate,
    UserListResponse,
    UserOut,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "ArticleCreate",
    "ArticleListResponse",
    "ArticleOut",
    "ArticleResponse",
    "ArticleUpdate",
    "CategoriesResponse",
    "ChangePasswordRequest",
    "CurrentUser",
    "HealthResponse",
    "InfoResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "Pagination",
    "ProfileResponse",
    "StatusUpdate",
    "TokenCheckResponse",
    "UserCreate",
    "UserListResponse",
    "UserOut",
    "UserProfile",
    "UserResponse",
    "UserUpdate",
]
