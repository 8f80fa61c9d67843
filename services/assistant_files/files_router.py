"""
Assistant Files Router - upload, list, search and delete the assistant's files.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from services.assistant_files.dependencies import get_file_service
from services.assistant_files.errors import FileNotInVectorStoreError, VectorStoreNotReadyError
from services.assistant_files.file_service import AssistantFileService
from services.assistant_files.models import DeleteFileRequest, FileInfo, SearchHit
from services.common.decorators import error_responder

logger = logging.getLogger(__name__)

assistant_files_router = APIRouter(prefix="/assistants/files", tags=["assistant_files"])

ERROR_STATUS = {
    FileNotInVectorStoreError: 404,
    VectorStoreNotReadyError: 503,
}


@assistant_files_router.get("", response_model=List[FileInfo])
@error_responder(ERROR_STATUS)
async def list_files(service: AssistantFileService = Depends(get_file_service)):
    """List the files attached to the assistant's vector store."""
    files = await service.list_files()
    return JSONResponse(content=[f.model_dump() for f in files], status_code=200)


@assistant_files_router.get("/search", response_model=List[SearchHit])
@error_responder(ERROR_STATUS)
async def search_files(
    query: Optional[str] = Query(None),
    service: AssistantFileService = Depends(get_file_service),
):
    """Return the files most relevant to the query."""
    if not query or not query.strip():
        logger.warning("Search rejected: query parameter is missing")
        raise HTTPException(status_code=400, detail="Query parameter is required")

    hits = await service.search_files(query.strip())
    return JSONResponse(content=[h.model_dump() for h in hits], status_code=200)


@assistant_files_router.get("/status")
@error_responder(ERROR_STATUS)
async def vector_store_status(service: AssistantFileService = Depends(get_file_service)):
    """Succeeds once the vector store has no files left to ingest."""
    await service.ensure_ready()
    return PlainTextResponse(
        "Vector store ready. Query will be handled by the assistant automatically."
    )


@assistant_files_router.post("")
@error_responder(ERROR_STATUS)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    service: AssistantFileService = Depends(get_file_service),
):
    """Upload a file into the assistant's vector store."""
    if file is None:
        raise HTTPException(status_code=400, detail="File is required")

    content = await file.read()
    result = await service.upload_file(file.filename or "upload", content)
    logger.info(f"Upload finished: {result.file_id} ({result.status})")
    return Response(status_code=200)


@assistant_files_router.delete("")
@error_responder(ERROR_STATUS)
async def delete_file(
    request: Optional[DeleteFileRequest] = Body(None),
    service: AssistantFileService = Depends(get_file_service),
):
    """Delete a file from the assistant's vector store."""
    if request is None or not request.fileId:
        raise HTTPException(status_code=400, detail="fileId is required")

    await service.delete_file(request.fileId)
    return Response(status_code=200)
