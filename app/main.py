"""FastAPI app exposing mounted master-data list views."""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


_load_env_file(ROOT / "app" / ".env")

import time
import logging

import anyio

from app.entities import entity_kind, filter_dimensions, get_entity, list_entities
from app.i18n import SUPPORTED_LANGUAGES, Translator, check_dictionary, load_dictionary, translator_for
from app.seed import demo_records
from app.stores import MemoryViewStore
from app.student_api import StudentApiClient, StudentApiError
from list_view import ListView
from masterdata.pagination import Page


app = FastAPI(title="Master Data")
logger = logging.getLogger("masterdata")
_view_logger = logging.getLogger("masterdata.views")
logging.basicConfig(level=logging.INFO)
_LOCAL_CORS_ORIGINS = {
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
}
_LOCAL_CORS_REGEX = re.compile(r"^http://(localhost|127\.0\.0\.1):\d+$")
_EXTRA_CORS_ORIGINS = {
    origin.strip().rstrip("/")
    for origin in os.getenv("MASTERDATA_CORS_ORIGINS", "").split(",")
    if origin.strip()
}
_CORS_ORIGINS = _LOCAL_CORS_ORIGINS | _EXTRA_CORS_ORIGINS
REQ_SLOW_MS = float(os.getenv("MASTERDATA_REQ_SLOW_MS", "250"))

STUDENT_KIND = "student"

views = MemoryViewStore()
# Replaced in tests with a factory bound to an httpx.MockTransport.
student_client: Callable[[], StudentApiClient] = StudentApiClient


@app.middleware("http")
async def local_cors_fallback_middleware(request: Request, call_next):
    origin = request.headers.get("origin")
    if request.method == "OPTIONS":
        response = JSONResponse({}, status_code=200)
    else:
        response = await call_next(request)
    normalized_origin = origin.rstrip("/") if isinstance(origin, str) else origin
    if normalized_origin and (normalized_origin in _CORS_ORIGINS or _LOCAL_CORS_REGEX.match(normalized_origin)):
        response.headers.setdefault("Access-Control-Allow-Origin", origin)
        response.headers.setdefault("Access-Control-Allow-Credentials", "true")
        response.headers.setdefault("Access-Control-Allow-Headers", "*")
        response.headers.setdefault("Access-Control-Allow-Methods", "*")
        response.headers.setdefault("Vary", "Origin")
    return response


@app.middleware("http")
async def timing_middleware(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    total_ms = (time.perf_counter() - start) * 1000
    route = request.scope.get("route")
    route_name = getattr(route, "name", None) or getattr(request.scope.get("endpoint"), "__name__", None) or "unknown"
    logger.info(
        "%s %s %s route=%s total_ms=%.1f",
        request.method,
        request.url.path,
        response.status_code,
        route_name,
        total_ms,
    )
    if total_ms >= REQ_SLOW_MS:
        logger.warning(
            "slow_request method=%s path=%s route=%s total_ms=%.1f status=%s",
            request.method,
            request.url.path,
            route_name,
            total_ms,
            response.status_code,
        )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=sorted(_CORS_ORIGINS),
    allow_origin_regex=r"http://localhost:\d+|http://127\.0\.0\.1:\d+",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(code: str, message: str, path: str | None = None, detail: dict | None = None, status: int = 400) -> JSONResponse:
    body = {
        "ok": False,
        "errors": [{"code": code, "message": message, "path": path, "detail": detail}],
        "warnings": [],
    }
    return JSONResponse(jsonable_encoder(body), status_code=status)


def _ok_response(payload: dict, warnings: list | None = None, status: int = 200) -> JSONResponse:
    body = {"ok": True, **payload, "errors": [], "warnings": warnings or []}
    return JSONResponse(jsonable_encoder(body), status_code=status)


def _validation_response(errors: list, field_errors: dict | None = None, status: int = 400) -> JSONResponse:
    body = {
        "ok": False,
        "errors": errors,
        "field_errors": field_errors or {},
        "warnings": [],
    }
    return JSONResponse(jsonable_encoder(body), status_code=status)


async def _safe_json(request: Request) -> dict:
    try:
        body = await request.json()
    except Exception:
        return {}
    return body if isinstance(body, dict) else {}


def _is_page_size(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def _translator(request: Request) -> Translator:
    return translator_for(request.query_params.get("lang"))


def _lookup_view(request: Request, view_id: str) -> ListView | None:
    view = views.get(view_id)
    if view is not None:
        view.set_lookup(_translator(request))
    return view


def _view_missing(view_id: str) -> JSONResponse:
    return _error_response("VIEW_NOT_FOUND", "View not found", "view_id", detail={"view_id": view_id}, status=404)


def _page_summary(page: Page, t: Translator) -> str:
    if page.total_items == 0:
        return t("pagination.empty")
    return t(
        "pagination.summary",
        start=page.start_index + 1,
        end=page.start_index + len(page.items),
        total=page.total_items,
    )


def _view_payload(view_id: str, view: ListView, t: Translator) -> dict:
    snapshot = view.snapshot()
    page = view.visible_page()
    return {
        "view_id": view_id,
        "entity_id": snapshot["entity_id"],
        "records": page.items,
        "page": snapshot["page"],
        "summary": _page_summary(page, t),
        "filters": snapshot["filters"],
        "options": snapshot["options"],
        "session": snapshot["session"],
    }


def _fetch_students() -> list[dict]:
    return student_client().list_students()


@app.get("/entities")
async def list_entity_kinds() -> JSONResponse:
    return _ok_response({"entities": list_entities()})


@app.get("/entities/{kind}")
async def get_entity_kind(kind: str) -> JSONResponse:
    entity = get_entity(kind)
    if not entity:
        return _error_response("ENTITY_NOT_FOUND", "Entity not found", "entity", detail={"entity": kind}, status=404)
    return _ok_response({"entity": entity})


@app.post("/views")
async def mount_view(request: Request) -> JSONResponse:
    body = await _safe_json(request)
    requested = body.get("entity")
    entity = get_entity(requested) if isinstance(requested, str) else None
    if not entity:
        return _error_response("ENTITY_NOT_FOUND", "Entity not found", "entity", detail={"entity": requested}, status=404)
    page_size = body.get("page_size")
    if page_size is not None and not _is_page_size(page_size):
        return _error_response("INVALID_PAGE_SIZE", "page_size must be a positive integer", "page_size", status=400)

    seed = body.get("seed")
    records: list[dict] = []
    if seed == "api":
        if entity_kind(entity) != STUDENT_KIND:
            return _error_response(
                "SEED_UNSUPPORTED",
                "Only student views can be seeded from the student API",
                "seed",
                detail={"entity": entity["id"]},
                status=400,
            )
        try:
            records = await anyio.to_thread.run_sync(_fetch_students)
        except StudentApiError as exc:
            return _error_response("UPSTREAM_FETCH_FAILED", str(exc), "seed", status=502)
    elif seed is True or seed == "demo":
        records = demo_records(entity)
    elif seed not in (None, False):
        return _error_response("INVALID_SEED", "seed must be 'demo' or 'api'", "seed", status=400)

    t = _translator(request)
    view = ListView(entity, page_size=page_size, t=t)
    if records:
        view.store.seed(records)
    view_id = views.mount(view)
    _view_logger.info("view_mounted view_id=%s entity_id=%s seed=%s records=%s", view_id, entity["id"], seed, len(view.store))
    return _ok_response(_view_payload(view_id, view, t), status=201)


@app.get("/views/{view_id}")
async def get_view(request: Request, view_id: str) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    return _ok_response(_view_payload(view_id, view, _translator(request)))


@app.delete("/views/{view_id}")
async def unmount_view(view_id: str) -> JSONResponse:
    if not views.unmount(view_id):
        return _view_missing(view_id)
    _view_logger.info("view_unmounted view_id=%s", view_id)
    return _ok_response({"deleted": True})


@app.put("/views/{view_id}/query")
async def set_view_query(request: Request, view_id: str) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    body = await _safe_json(request)
    query = body.get("query")
    if query is not None and not isinstance(query, str):
        return _error_response("INVALID_QUERY", "query must be a string", "query", status=400)
    view.set_query(query or "")
    return _ok_response(_view_payload(view_id, view, _translator(request)))


@app.put("/views/{view_id}/filters/{dimension}")
async def set_view_filter(request: Request, view_id: str, dimension: str) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    body = await _safe_json(request)
    if not view.select(dimension, body.get("value")):
        return _error_response(
            "UNKNOWN_DIMENSION",
            "Unknown filter dimension",
            "dimension",
            detail={"dimension": dimension, "allowed": sorted(filter_dimensions(view.entity))},
            status=400,
        )
    return _ok_response(_view_payload(view_id, view, _translator(request)))


@app.post("/views/{view_id}/filters/reset")
async def reset_view_filters(request: Request, view_id: str) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    view.reset_filters()
    return _ok_response(_view_payload(view_id, view, _translator(request)))


@app.put("/views/{view_id}/page")
async def set_view_page(request: Request, view_id: str) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    body = await _safe_json(request)
    view.go_to_page(body.get("page"))
    return _ok_response(_view_payload(view_id, view, _translator(request)))


@app.put("/views/{view_id}/page_size")
async def set_view_page_size(request: Request, view_id: str) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    body = await _safe_json(request)
    page_size = body.get("page_size")
    if not _is_page_size(page_size):
        return _error_response("INVALID_PAGE_SIZE", "page_size must be a positive integer", "page_size", status=400)
    view.set_page_size(page_size)
    return _ok_response(_view_payload(view_id, view, _translator(request)))


@app.post("/views/{view_id}/session")
async def open_view_session(request: Request, view_id: str) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    body = await _safe_json(request)
    record_id = body.get("record_id")
    if record_id is None:
        return _ok_response({"session": view.on_add(), "applied": True})
    session = view.on_edit(str(record_id))
    return _ok_response({"session": session, "applied": session is not None})


@app.get("/views/{view_id}/session")
async def get_view_session(request: Request, view_id: str) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    return _ok_response({"session": view.sessions.form_props()})


@app.post("/views/{view_id}/session/save")
async def save_view_session(request: Request, view_id: str) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    body = await _safe_json(request)
    values = body.get("values") if "values" in body else body
    result = view.sessions.save(values)
    if not result["ok"]:
        status = 409 if result["mode"] is None else 400
        return _validation_response(result["errors"], result["field_errors"], status=status)
    return _ok_response(
        {
            "record": result["record"],
            "mode": result["mode"],
            "applied": result["record"] is not None,
            "view": _view_payload(view_id, view, _translator(request)),
        }
    )


@app.delete("/views/{view_id}/session")
async def close_view_session(request: Request, view_id: str) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    view.sessions.close()
    return _ok_response({"session": None})


@app.patch("/views/{view_id}/records/{record_id}")
async def update_view_record(request: Request, view_id: str, record_id: str) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    body = await _safe_json(request)
    fields = body.get("record") if "record" in body else body
    result = view.update_details(record_id, fields)
    if not result["ok"]:
        return _validation_response(result["errors"], result["field_errors"])
    return _ok_response({"record": result["record"], "record_id": record_id, "applied": result["applied"]})


@app.delete("/views/{view_id}/records/{record_id}")
async def delete_view_record(request: Request, view_id: str, record_id: str) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    deleted = view.on_delete(record_id)
    return _ok_response({"deleted": deleted, "applied": deleted, "view": _view_payload(view_id, view, _translator(request))})


@app.post("/views/{view_id}/records/{record_id}/tags/{field_id}")
async def toggle_view_record_tag(request: Request, view_id: str, record_id: str, field_id: str) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    body = await _safe_json(request)
    value = body.get("value")
    if not isinstance(value, str) or not value.strip():
        return _error_response("INVALID_PAYLOAD", "value must be a non-empty string", "value", status=400)
    result = view.toggle_tag(record_id, field_id, value)
    if not result["ok"]:
        return _validation_response(result["errors"])
    return _ok_response({"record": result["record"], "record_id": record_id, "applied": result["applied"]})


@app.get("/views/{view_id}/tally/{field_id}")
async def tally_view_field(request: Request, view_id: str, field_id: str, values: str | None = None) -> JSONResponse:
    view = _lookup_view(request, view_id)
    if view is None:
        return _view_missing(view_id)
    wanted = [v.strip() for v in values.split(",") if v.strip()] if isinstance(values, str) and values.strip() else None
    return _ok_response({"tally": view.tally(field_id, wanted)})


@app.get("/i18n/{language}")
async def get_dictionary(language: str) -> JSONResponse:
    language = language.strip().lower()
    if language not in SUPPORTED_LANGUAGES:
        return _error_response(
            "LANGUAGE_NOT_FOUND",
            "Unsupported language",
            "language",
            detail={"language": language, "supported": list(SUPPORTED_LANGUAGES)},
            status=404,
        )
    messages = load_dictionary(language)
    return _ok_response({"language": language, "messages": messages}, warnings=check_dictionary(messages))
