"""Demo rows for views mounted with ``seed: "demo"``."""

from __future__ import annotations

import copy

from app.entities import entity_kind

_STUDENT_APPROVALS = [
    {"id": "STD-1001", "name": "Aarav Sharma", "email": "aarav.sharma@example.com", "approval_status": "Pending", "classification": "A", "status": "Active", "tags": ["N5", "Frontend"]},
    {"id": "STD-1002", "name": "Mia Johnson", "email": "mia.johnson@example.com", "approval_status": "Approved", "classification": "B", "status": "Active", "tags": ["N4", "Backend"]},
    {"id": "STD-1003", "name": "Noah Wilson", "email": "noah.wilson@example.com", "approval_status": "Rejected", "classification": "C", "status": "Inactive", "tags": ["N5", "Design"]},
    {"id": "STD-1004", "name": "Yui Nakamura", "email": "yui.nakamura@example.com", "approval_status": "Pending", "classification": "A", "status": "Active", "tags": ["N3", "Data"]},
    {"id": "STD-1005", "name": "Liam Brown", "email": "liam.brown@example.com", "approval_status": "Pending", "classification": "B", "status": "On Hold", "tags": ["N4", "DevOps"]},
    {"id": "STD-1006", "name": "Sofia Davis", "email": "sofia.davis@example.com", "approval_status": "Approved", "classification": "A", "status": "Active", "tags": ["N2", "QA"]},
    {"id": "STD-1007", "name": "Riku Sato", "email": "riku.sato@example.com", "approval_status": "Pending", "classification": "C", "status": "Active", "tags": ["N5", "Mobile"]},
]

_STUDENTS = [
    {"id": "STU-3001", "name": "Aarav Sharma", "image": "/images/cards/card-01.jpg", "age": 22, "gender": "male", "college": "Tokyo University", "college_url": "https://www.u-tokyo.ac.jp/", "graduation_year": 2026, "department": "Computer Science", "japanese_level": "N3", "status": "Q3"},
    {"id": "STU-3002", "name": "Yui Nakamura", "image": "/images/cards/card-02.jpg", "age": 21, "gender": "female", "college": "Osaka University", "college_url": "https://www.osaka-u.ac.jp/", "graduation_year": 2025, "department": "Design", "japanese_level": "N2", "status": "Q3"},
    {"id": "STU-3003", "name": "Noah Wilson", "image": "/images/cards/card-03.jpg", "age": 23, "gender": "male", "college": "Kyoto University", "graduation_year": 2024, "department": "Mechanical", "japanese_level": "N4", "status": "Q2"},
    {"id": "STU-3004", "name": "Mia Johnson", "image": "/images/cards/card-01.png", "age": 20, "gender": "female", "college": "Tokyo University", "college_url": "https://www.u-tokyo.ac.jp/", "graduation_year": 2027, "department": "Business", "japanese_level": "N5", "status": "Q4"},
    {"id": "STU-3005", "name": "Riku Sato", "image": "/images/cards/card-02.png", "age": 24, "gender": "male", "college": "Osaka University", "college_url": "https://www.osaka-u.ac.jp/", "graduation_year": 2025, "department": "Computer Science", "japanese_level": "N1", "status": "Q1"},
    {"id": "STU-3006", "name": "Sofia Davis", "image": "/images/cards/card-03.png", "age": 22, "gender": "female", "college": "Kyoto University", "graduation_year": 2026, "department": "Computer Science", "japanese_level": "N2", "status": "Q3"},
]

_NAMES = {
    "college": [
        {"name": "Tokyo University", "location": "Tokyo"},
        {"name": "Osaka University", "location": "Osaka"},
        {"name": "Kyoto University", "location": "Kyoto"},
    ],
    "department": [{"name": n} for n in ("Computer Science", "Business", "Design", "Mechanical")],
    "classification": [{"name": n} for n in ("A", "B", "C", "D")],
    "status": [{"name": n} for n in ("Active", "Inactive", "On Hold")],
    "tag": [{"name": n} for n in ("Frontend", "Backend", "DevOps", "QA", "Design", "Data", "Mobile")],
    "japanese_level": [{"name": n} for n in ("N5", "N4", "N3", "N2", "N1")],
}


def demo_records(entity: dict) -> list[dict]:
    """Rows for ``entity``; kinds without demo data start empty."""
    kind = entity_kind(entity)
    if kind == "student_approval":
        return copy.deepcopy(_STUDENT_APPROVALS)
    if kind == "student":
        return copy.deepcopy(_STUDENTS)
    return copy.deepcopy(_NAMES.get(kind, []))
