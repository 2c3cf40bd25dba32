import logging
import threading
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from post_editor.backends.post_editor import PostEditorBackend
from post_editor.backends.registry import BackendRegistry, build_registry
from post_editor.errors import DatabaseConnectionError
from post_editor.settings import settings

logger = logging.getLogger(__name__)

BACKEND_NAME = "post_editor"

_backend: Optional[PostEditorBackend] = None
_backend_lock = threading.Lock()


@lru_cache
def get_registry() -> BackendRegistry:
    return build_registry()


def get_backend(registry: BackendRegistry = Depends(get_registry)) -> PostEditorBackend:
    global _backend
    with _backend_lock:
        if _backend is None or _backend.closed:
            factory = registry.get(BACKEND_NAME)
            try:
                _backend = factory(
                    settings.backend_params,
                    driver=settings.DB_DRIVER,
                    database=settings.DB_DATABASE,
                    query_timeout=settings.DB_QUERY_TIMEOUT,
                    pool_size=settings.DB_POOL_SIZE,
                )
            except DatabaseConnectionError as e:
                logger.error(f"Backend unavailable: {e}")
                raise HTTPException(
                    status_code=HTTP_503_SERVICE_UNAVAILABLE,
                    detail="Database unavailable",
                )
        return _backend


def close_backend() -> None:
    global _backend
    with _backend_lock:
        if _backend is not None:
            _backend.close()
            _backend = None
