"""API routes mounted under settings.API_PREFIX."""

from fastapi import APIRouter

from etiquetas.api.v1 import articles, auth, users

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(articles.router, prefix="/articulos", tags=["articulos"])
router.include_router(users.router, prefix="/usuarios", tags=["usuarios"])
