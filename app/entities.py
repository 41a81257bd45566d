"""Entity kind catalogue.

Every kind managed by the admin front-end is described by one definition dict
of the same shape, so a single store, validator, filter pipeline and paginator
serve all of them:

    {
        "id": "entity.client",
        "label": "<text key>",
        "fields": [{"id", "type", "required", "label", "options", "default", "messages"}],
        "search_fields": [...],
        "filters": [{"id": <dimension>, "field": <field id>}],
        "page_size": 5,
        "sort": {"field": "id", "digits": True, "descending": True},
    }

Labels and messages are text-lookup keys, never literal text.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List

ENTITY_PREFIX = "entity."
DEFAULT_PAGE_SIZE = 5
FIELD_TYPES = {"string", "text", "email", "url", "enum", "tags", "number", "date"}

GENDER_OPTIONS = ["male", "female", "other"]
APPROVAL_STATUS_OPTIONS = ["Pending", "Approved", "Rejected"]


def _field(field_id: str, ftype: str = "string", required: bool = False, label: str | None = None, **extra: Any) -> dict:
    field = {"id": field_id, "type": ftype, "required": required, "label": label or field_id}
    field.update(extra)
    return field


def _name_only(kind: str, section: str) -> dict:
    return {
        "id": f"{ENTITY_PREFIX}{kind}",
        "label": f"settings.{section}.title",
        "fields": [
            _field(
                "name",
                required=True,
                label=f"settings.{section}.name",
                messages={"required": f"settings.{section}.errors.nameRequired"},
            ),
        ],
        "search_fields": ["name"],
        "filters": [],
        "page_size": DEFAULT_PAGE_SIZE,
    }


def _person(kind: str, section: str) -> dict:
    return {
        "id": f"{ENTITY_PREFIX}{kind}",
        "label": f"{section}.title",
        "fields": [
            _field(
                "first_name",
                required=True,
                label="profile.firstName",
                messages={"required": f"{section}.errors.firstNameRequired"},
            ),
            _field(
                "last_name",
                required=True,
                label="profile.lastName",
                messages={"required": f"{section}.errors.lastNameRequired"},
            ),
            _field(
                "email",
                "email",
                required=True,
                label="profile.email",
                messages={
                    "required": f"{section}.errors.emailRequired",
                    "invalid": f"{section}.errors.emailInvalid",
                },
            ),
        ],
        "search_fields": ["first_name", "last_name", "email"],
        "filters": [],
        "page_size": DEFAULT_PAGE_SIZE,
    }


ENTITIES: List[dict] = [
    _person("client", "addClient"),
    _person("teacher", "addTeacher"),
    {
        "id": "entity.college",
        "label": "settings.college.title",
        "fields": [
            _field(
                "name",
                required=True,
                label="settings.college.name",
                messages={"required": "settings.college.errors.nameRequired"},
            ),
            _field(
                "location",
                required=True,
                label="settings.college.location",
                messages={"required": "settings.college.errors.locationRequired"},
            ),
        ],
        "search_fields": ["name", "location"],
        "filters": [],
        "page_size": DEFAULT_PAGE_SIZE,
    },
    _name_only("department", "department"),
    _name_only("classification", "classification"),
    _name_only("status", "status"),
    _name_only("tag", "tags"),
    _name_only("japanese_level", "japaneseLevel"),
    {
        "id": "entity.student",
        "label": "studentList.title",
        "fields": [
            _field("image", required=True, label="addStudent.photo", messages={"required": "addStudent.errors.photoRequired"}),
            _field("name", required=True, label="addStudent.name", messages={"required": "addStudent.errors.nameRequired"}),
            _field(
                "gender",
                "enum",
                required=True,
                label="addStudent.gender",
                options=GENDER_OPTIONS,
                messages={"required": "addStudent.errors.genderRequired"},
            ),
            _field("age", "number", label="addStudent.age"),
            _field("college", required=True, label="addStudent.college", messages={"required": "addStudent.errors.collegeRequired"}),
            _field("college_url", "url", label="addStudent.collegeUrl"),
            _field("department", label="addStudent.department"),
            _field("graduation_year", "number", label="addStudent.graduationYear"),
            _field("dob", "date", label="addStudent.dob"),
            _field("japanese_level", label="addStudent.japaneseLevel"),
            _field("status", label="studentList.status"),
            _field("self_intro", "text", label="addStudent.selfIntro"),
            _field(
                "linkedin_url",
                "url",
                required=True,
                label="addStudent.linkedInUrl",
                messages={
                    "required": "addStudent.errors.linkedInRequired",
                    "invalid": "addStudent.errors.linkedInInvalid",
                },
            ),
            _field("git_url", "url", label="addStudent.gitUrl"),
            _field("portfolio_url", "url", label="addStudent.portfolioUrl"),
            _field("facebook_url", "url", label="studentList.facebook"),
            _field("instagram_url", "url", label="studentList.instagram"),
            _field("x_url", "url", label="studentList.x"),
            _field(
                "email",
                "email",
                required=True,
                label="addStudent.email",
                messages={
                    "required": "addStudent.errors.emailRequired",
                    "invalid": "addStudent.errors.emailInvalid",
                },
            ),
            _field("whatsapp", label="addStudent.whatsapp"),
        ],
        "search_fields": ["name"],
        "filters": [
            {"id": "college", "field": "college"},
            {"id": "department", "field": "department"},
            {"id": "japanese_level", "field": "japanese_level"},
            {"id": "status", "field": "status"},
        ],
        "page_size": 6,
    },
    {
        "id": "entity.student_approval",
        "label": "approvalStudent.title",
        "fields": [
            _field("name", required=True, label="approvalStudent.name"),
            _field("email", "email", required=True, label="approvalStudent.email"),
            _field(
                "approval_status",
                "enum",
                label="approvalStudent.approvalStatus",
                options=APPROVAL_STATUS_OPTIONS,
                default="Pending",
            ),
            _field("classification", label="approvalStudent.classification"),
            _field("status", label="approvalStudent.status"),
            _field("tags", "tags", label="approvalStudent.tags"),
        ],
        "search_fields": ["id", "name"],
        "filters": [{"id": "approval_status", "field": "approval_status"}],
        "page_size": 10,
        "sort": {"field": "id", "digits": True, "descending": True},
    },
]


def normalize_entity_id(entity_id: str) -> str:
    return entity_id.strip("/").strip()


def match_entity_id(requested: str, declared: str) -> bool:
    if requested == declared:
        return True
    if declared.startswith(ENTITY_PREFIX) and requested == declared[len(ENTITY_PREFIX) :]:
        return True
    if requested.startswith(ENTITY_PREFIX) and requested[len(ENTITY_PREFIX) :] == declared:
        return True
    return False


def entity_kind(entity: dict) -> str:
    entity_id = entity.get("id") or ""
    if entity_id.startswith(ENTITY_PREFIX):
        return entity_id[len(ENTITY_PREFIX) :]
    return entity_id


def list_entities() -> list[dict]:
    return [copy.deepcopy(ent) for ent in ENTITIES]


def get_entity(entity_id: str) -> dict | None:
    if not isinstance(entity_id, str) or not entity_id.strip():
        return None
    entity_id = normalize_entity_id(entity_id)
    for ent in ENTITIES:
        if match_entity_id(entity_id, ent["id"]):
            return copy.deepcopy(ent)
    return None


def fields_by_id(entity: dict) -> Dict[str, dict]:
    fields = entity.get("fields") or []
    if isinstance(fields, dict):
        fields = [{"id": fid, **fdef} if isinstance(fdef, dict) else {"id": fid} for fid, fdef in fields.items()]
    return {f.get("id"): f for f in fields if isinstance(f, dict) and f.get("id")}


def empty_value(field: dict) -> Any:
    if "default" in field:
        return copy.deepcopy(field["default"])
    ftype = field.get("type")
    if ftype == "tags":
        return []
    if ftype == "number":
        return None
    return ""


def blank_record(entity: dict) -> dict:
    """Initial form values for a create session."""
    return {field_id: empty_value(field) for field_id, field in fields_by_id(entity).items()}


def enum_values(field: dict) -> list:
    options = field.get("options") or field.get("values") or []
    values = []
    for opt in options:
        if isinstance(opt, dict) and "value" in opt:
            values.append(opt["value"])
        else:
            values.append(opt)
    return values


def filter_dimensions(entity: dict) -> Dict[str, str]:
    dims: Dict[str, str] = {}
    for dim in entity.get("filters") or []:
        if not isinstance(dim, dict):
            continue
        dim_id = dim.get("id")
        if isinstance(dim_id, str) and dim_id:
            dims[dim_id] = dim.get("field") or dim_id
    return dims


def page_size_for(entity: dict) -> int:
    size = entity.get("page_size")
    if isinstance(size, int) and not isinstance(size, bool) and size > 0:
        return size
    return DEFAULT_PAGE_SIZE
