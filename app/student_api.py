"""Student list fetch and normalization of loosely shaped upstream rows."""

from __future__ import annotations

import logging
import math
import os
from typing import Any

import httpx

logger = logging.getLogger("masterdata.student_api")

DEFAULT_IMAGE = "/images/cards/card-01.jpg"
STUDENT_LIST_PATH = "/student/list"


class StudentApiError(RuntimeError):
    pass


def to_safe_string(value: Any, fallback: str = "") -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if isinstance(value, float):
            if not math.isfinite(value):
                return fallback
            if value.is_integer():
                return str(int(value))
        return str(value)
    return fallback


def to_safe_number(value: Any, fallback: int | float = 0) -> int | float:
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else fallback
    if isinstance(value, str):
        text = value.strip()
        if text == "":
            return 0
        try:
            parsed = float(text)
        except ValueError:
            return fallback
        if not math.isfinite(parsed):
            return fallback
        return int(parsed) if parsed.is_integer() else parsed
    return fallback


def to_gender(value: Any) -> str:
    return "female" if to_safe_string(value).lower() == "female" else "male"


def extract_students_array(raw_data: Any) -> list:
    if isinstance(raw_data, list):
        return raw_data
    if isinstance(raw_data, dict):
        for key in ("students", "list", "items"):
            if isinstance(raw_data.get(key), list):
                return raw_data[key]
    return []


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def normalize_student(raw: Any, index: int) -> dict:
    row = raw if isinstance(raw, dict) else {}
    college = row.get("college") if isinstance(row.get("college"), dict) else {}
    return {
        "id": to_safe_string(row.get("id"), f"STU-{index + 1}"),
        "name": to_safe_string(row.get("name"), "Unknown Student"),
        "image": to_safe_string(row.get("image"), DEFAULT_IMAGE),
        "age": to_safe_number(row.get("age"), 0),
        "gender": to_gender(row.get("gender")),
        "college": to_safe_string(_first(row.get("college_name"), college.get("name")), "Unknown College"),
        "college_url": to_safe_string(_first(row.get("college_url"), college.get("url"))),
        "graduation_year": to_safe_number(_first(row.get("graduation_year"), row.get("graduationYear")), 0),
        "department": to_safe_string(row.get("department"), "-"),
        "japanese_level": to_safe_string(_first(row.get("japanese_level"), row.get("japaneseLevel")), "-"),
        "status": to_safe_string(row.get("status"), "-"),
        "self_intro": to_safe_string(_first(row.get("self_intro"), row.get("selfIntro")), "-"),
        "facebook_url": to_safe_string(_first(row.get("facebook"), row.get("facebook_url"))),
        "linkedin_url": to_safe_string(_first(row.get("linkedin"), row.get("linkedin_url"))),
        "instagram_url": to_safe_string(_first(row.get("instagram"), row.get("instagram_url"))),
        "x_url": to_safe_string(_first(row.get("x"), row.get("x_url"))),
    }


def api_base_url() -> str:
    return os.getenv("MASTERDATA_API_BASE_URL", "").strip().rstrip("/")


def api_timeout() -> float:
    try:
        return float(os.getenv("MASTERDATA_API_TIMEOUT", "10"))
    except ValueError:
        return 10.0


class StudentApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url if base_url is not None else api_base_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else api_timeout()
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    def list_students(self) -> list[dict]:
        if not self.base_url:
            raise StudentApiError("MASTERDATA_API_BASE_URL is not configured")
        try:
            with self._client() as client:
                resp = client.get(STUDENT_LIST_PATH)
        except httpx.HTTPError as exc:
            logger.warning("student_fetch_failed base_url=%s error=%s", self.base_url, exc)
            raise StudentApiError(f"Student list request failed: {exc}") from exc
        if resp.status_code >= 400:
            logger.warning("student_fetch_failed base_url=%s status=%s", self.base_url, resp.status_code)
            raise StudentApiError(f"Student list error: {resp.status_code}")
        try:
            body = resp.json()
        except ValueError as exc:
            raise StudentApiError("Student list response is not JSON") from exc
        data = body.get("data") if isinstance(body, dict) else None
        rows = extract_students_array(data)
        students = [normalize_student(row, idx) for idx, row in enumerate(rows)]
        logger.info("student_fetch_ok base_url=%s count=%s", self.base_url, len(students))
        return students
