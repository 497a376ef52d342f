"""File resource endpoints.

GET    /file/{path}  - stream a file (gzip) or list a directory
POST   /file/{dir}   - upload a new file into a directory
PATCH  /file/{dir}   - overwrite an existing file in a directory
DELETE /file/{path}  - delete a file

Error values from FileService become JSON ``{"err": ...}`` bodies: 404 for
reads, 403 for writes and deletes.
"""

from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, File, Query, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from filebay.api.dependencies import FileServiceDep, RequestPathDep
from filebay.errors import FsError
from filebay.fs.models import ListingResult
from filebay.services.files import FileDescriptor, ReadQuery

router = APIRouter()

MSG_INVALID_UPLOAD = "invalid/empty file"


class ListingResponse(BaseModel):
    """Directory listing response."""

    isDirectory: bool
    files: list[str]


class MessageResponse(BaseModel):
    """Write/delete success response."""

    msg: str


def _error(err: FsError, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=err.to_payload())


async def _descriptor(file: UploadFile | None) -> FileDescriptor | None:
    """Read an upload into memory; None when no usable file was sent."""
    if file is None or not file.filename:
        return None
    return FileDescriptor(name=file.filename, buffer=await file.read())


def _attachment(filename: str) -> str:
    """RFC 5987 Content-Disposition value; header values must stay latin-1."""
    return f"attachment; filename*=UTF-8''{quote(filename, safe='')}"


def _upload_target(base: str, name: str) -> str:
    return base.rstrip("/") + "/" + name


@router.get("")
@router.get("/{path:path}")
async def read_resource(
    service: FileServiceDep,
    resource_path: RequestPathDep,
    order_by: str | None = Query(None, alias="orderBy"),
    order_by_direction: str | None = Query(None, alias="orderByDirection"),
    filter_by_name: str | None = Query(None, alias="filterByName"),
):
    """Stream a file as a gzip attachment, or list a directory."""
    result = await service.read(
        resource_path,
        ReadQuery(
            order_by=order_by,
            order_by_direction=order_by_direction,
            filter_by_name=filter_by_name,
        ),
    )
    if isinstance(result, FsError):
        return _error(result, 404)
    if isinstance(result, ListingResult):
        return ListingResponse(**result.to_payload())

    name = resource_path.rstrip("/").rsplit("/", 1)[-1]
    try:
        return StreamingResponse(
            result,
            media_type="application/gzip",
            headers={"Content-Disposition": _attachment(f"{name}.gz")},
        )
    except Exception:
        await result.aclose()
        raise


@router.post("", status_code=201, response_model=MessageResponse)
@router.post("/{path:path}", status_code=201, response_model=MessageResponse)
async def create_resource(
    service: FileServiceDep,
    resource_path: RequestPathDep,
    file: UploadFile | None = File(None, description="File to upload"),
):
    """Upload a new file into the directory at ``path``."""
    descriptor = await _descriptor(file)
    if descriptor is None:
        return JSONResponse(status_code=422, content={"err": MSG_INVALID_UPLOAD})

    result = await service.create(_upload_target(resource_path, descriptor.name), descriptor)
    if isinstance(result, FsError):
        return _error(result, 403)
    return MessageResponse(msg="write success")


@router.patch("", response_model=MessageResponse)
@router.patch("/{path:path}", response_model=MessageResponse)
async def patch_resource(
    service: FileServiceDep,
    resource_path: RequestPathDep,
    file: UploadFile | None = File(None, description="Replacement file"),
):
    """Overwrite an existing file in the directory at ``path``."""
    descriptor = await _descriptor(file)
    if descriptor is None:
        return JSONResponse(status_code=422, content={"err": MSG_INVALID_UPLOAD})

    result = await service.patch(_upload_target(resource_path, descriptor.name), descriptor)
    if isinstance(result, FsError):
        return _error(result, 403)
    return MessageResponse(msg="overwrite success")


@router.delete("/{path:path}", response_model=MessageResponse)
async def delete_resource(service: FileServiceDep, resource_path: RequestPathDep):
    """Delete the file at ``path``."""
    err = await service.delete(resource_path)
    if err is not None:
        return _error(err, 403)
    return MessageResponse(msg="delete success")
