"""HTTP proxy in front of the repository file store."""

import logging
import secrets
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from ghstore import FileStore

from . import __version__
from .settings import ProxySettings

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_PROBE = "README.md"

router = APIRouter()
data_router = APIRouter()


def get_store(request: Request) -> FileStore:
    return request.app.state.store


def require_secret(request: Request) -> None:
    """Reject requests whose shared-secret header is absent or wrong."""
    settings: ProxySettings = request.app.state.settings
    supplied = request.headers.get(settings.secret_header)
    if supplied is None or not secrets.compare_digest(
        supplied.encode("utf-8"), settings.secret.encode("utf-8")
    ):
        logger.warning("Forbidden: %s %s", request.method, request.url.path)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")


def body(content: str | bytes) -> Response:
    if isinstance(content, bytes):
        return Response(content=content, media_type="application/octet-stream")
    return PlainTextResponse(content)


async def timed(f: Callable[[], Awaitable[T]]) -> tuple[T, float]:
    """Await ``f`` and return its result with the elapsed seconds."""
    start = time.perf_counter()
    value = await f()
    return value, time.perf_counter() - start


# ============ Diagnostics ============

@router.get("/")
async def root() -> PlainTextResponse:
    return PlainTextResponse("ha?")


@router.get("/health")
async def health() -> dict[str, str]:
    return {"version": __version__}


@router.get("/status")
async def store_status(store: FileStore = Depends(get_store)) -> dict[str, Any]:
    """
    Probe both read paths on README.md.

    Reports timings in seconds, whether the structured and raw reads agree,
    and the first line of the file.
    """
    exist, exist_elapsed = await timed(lambda: store.exist(STATUS_PROBE))
    if not exist:
        logger.error("%s does not exist", STATUS_PROBE)

    read, read_elapsed = await timed(lambda: store.get(STATUS_PROBE))
    raw, raw_elapsed = await timed(lambda: store.raw(STATUS_PROBE))

    content = read.content if read else None
    ok = content == raw
    if not ok:
        logger.error("read=%r != raw=%r", content, raw)

    header = raw.split("\n")[0] if isinstance(raw, str) else "?"
    return {
        "version": __version__,
        "exist": exist_elapsed,
        "read": read_elapsed,
        "raw": raw_elapsed,
        "ok": ok,
        "header": header,
    }


# ============ Files ============

@data_router.get("/data/{path:path}")
async def read_file(
    path: str,
    binary: str | None = Query(None, description="Any non-empty value returns bytes"),
    store: FileStore = Depends(get_store),
) -> Response:
    logger.info("get %s binary=%s", path, bool(binary))
    record = await store.get(path, binary=bool(binary))
    logger.info("get/data %s size=%s", path, record.size if record else None)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")
    return body(record.content)


@data_router.get("/raw/{path:path}")
async def read_raw(
    path: str,
    binary: str | None = Query(None, description="Any non-empty value returns bytes"),
    store: FileStore = Depends(get_store),
) -> Response:
    logger.info("raw %s", path)
    data = await store.raw(path, binary=bool(binary))
    logger.info("raw/data %s size=%s", path, len(data) if data is not None else None)
    if data is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")
    return body(data)


@data_router.delete("/data/{path:path}")
async def delete_file(path: str, store: FileStore = Depends(get_store)) -> PlainTextResponse:
    logger.info("delete %s", path)
    if not await store.delete(path):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="failed to delete")
    return PlainTextResponse("deleted")


@data_router.post("/data/{path:path}")
async def create_file(
    path: str, request: Request, store: FileStore = Depends(get_store)
) -> PlainTextResponse:
    data = await request.body()
    logger.info("create %s", path)
    if not await store.create(path, data):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="failed to create")
    return PlainTextResponse("created")


@data_router.put("/data/{path:path}")
async def update_file(
    path: str, request: Request, store: FileStore = Depends(get_store)
) -> PlainTextResponse:
    data = await request.body()
    logger.info("update %s", path)
    if not await store.commit(path, data):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="failed to update")
    return PlainTextResponse("updated")


@data_router.head("/data/{path:path}")
async def head_file(path: str, store: FileStore = Depends(get_store)) -> PlainTextResponse:
    logger.info("head %s", path)
    if not await store.exist(path):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")
    return PlainTextResponse("exist")


# ============ Application ============

async def handle_broad_exceptions(request: Request, call_next):
    """Turn unexpected errors into a bare 500 so upstream details never leak."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error: %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def create_app(
    settings: ProxySettings | None = None, store: FileStore | None = None
) -> FastAPI:
    """Create the FastAPI application."""
    settings = settings or ProxySettings.from_env()
    store = store or FileStore.from_config(settings.store)

    app = FastAPI(
        title="ghdrive",
        summary="Files stored in a GitHub repository",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.store = store

    app.include_router(router, tags=["diagnostics"])
    app.include_router(data_router, tags=["files"], dependencies=[Depends(require_secret)])
    app.middleware("http")(handle_broad_exceptions)

    logger.info("ghdrive %s app created", __version__)
    return app
