import io
import logging
from contextlib import contextmanager
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from post_editor import dependencies as deps
from post_editor.backends.post_editor import PostEditorBackend
from post_editor.errors import (
    DatabaseConnectionError,
    DecodeError,
    DuplicateKeyError,
    InvalidPathError,
    OperationNotAllowedError,
    PostEditorError,
)
from post_editor.schemas.fs import Entry, Metadata

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files")

OK = {"status": "ok"}

# Order matters: DuplicateKeyError is a QueryError and must match first.
_STATUS_BY_ERROR = (
    (InvalidPathError, 400),
    (DecodeError, 400),
    (OperationNotAllowedError, 405),
    (DuplicateKeyError, 409),
    (DatabaseConnectionError, 503),
)


@contextmanager
def _translate_errors(action: str, path: str):
    try:
        yield
    except HTTPException:
        raise
    except PostEditorError as e:
        for error_type, status_code in _STATUS_BY_ERROR:
            if isinstance(e, error_type):
                logger.warning(f"Rejected {action} on {path!r}: {e}")
                raise HTTPException(status_code=status_code, detail=str(e))
        logger.error(f"Failed to {action} {path!r}: {e}")
        raise HTTPException(status_code=500, detail="Operation failed")
    except Exception as e:
        logger.error(f"Unexpected error during {action} of {path!r}: {e}")
        raise HTTPException(status_code=500, detail="Operation failed")


@router.get("/ls", response_model=List[Entry])
def ls(path: str = "", backend: PostEditorBackend = Depends(deps.get_backend)):
    """List languages at the root, or the posts of one language."""
    with _translate_errors("list", path):
        return backend.list_dir(path)


@router.get("/cat")
def cat(path: str, backend: PostEditorBackend = Depends(deps.get_backend)):
    with _translate_errors("read", path):
        stream = backend.read(path)
    return StreamingResponse(stream, media_type="application/json")


@router.post("/cat")
async def save(
    path: str,
    request: Request,
    backend: PostEditorBackend = Depends(deps.get_backend),
):
    body = await request.body()
    with _translate_errors("save", path):
        await run_in_threadpool(backend.write, path, io.BytesIO(body))
    return OK


@router.post("/touch")
def touch(path: str, backend: PostEditorBackend = Depends(deps.get_backend)):
    with _translate_errors("create", path):
        backend.create_file(path)
    return OK


@router.delete("/rm")
def rm(path: str, backend: PostEditorBackend = Depends(deps.get_backend)):
    with _translate_errors("delete", path):
        backend.delete(path)
    return OK


@router.post("/mkdir")
def mkdir(path: str, backend: PostEditorBackend = Depends(deps.get_backend)):
    with _translate_errors("mkdir", path):
        backend.create_directory(path)
    return OK


@router.post("/mv")
def mv(
    src: str = Query("", alias="from"),
    dst: str = Query("", alias="to"),
    backend: PostEditorBackend = Depends(deps.get_backend),
):
    with _translate_errors("move", src):
        backend.move(src, dst)
    return OK


@router.get("/meta", response_model=Metadata)
def meta(path: str = "", backend: PostEditorBackend = Depends(deps.get_backend)):
    return backend.metadata(path)
