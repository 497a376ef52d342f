"""API v1 router."""

from fastapi import APIRouter

from filebay.api.v1.files import router as files_router

router = APIRouter()

router.include_router(files_router, prefix="/file", tags=["files"])
