"""FastAPI dependencies."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from filebay.services.files import FileService


def get_file_service(request: Request) -> FileService:
    """FileService built by create_app for this application."""
    return request.app.state.file_service


def get_request_path(request: Request) -> str:
    """Resource path of the request, relative to the /file mount."""
    return request.path_params.get("path", "")


FileServiceDep = Annotated[FileService, Depends(get_file_service)]
RequestPathDep = Annotated[str, Depends(get_request_path)]
