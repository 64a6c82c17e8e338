# Overview: Lookups over the static permission table.

from .definitions import PERMISSION_DEFINITIONS

_BY_CODE = {code: (code, name, description, category) for code, name, description, category in PERMISSION_DEFINITIONS}


def get_all_permission_codes() -> list[str]:
    """Permission codes in definition order."""
    return [code for code, *_ in PERMISSION_DEFINITIONS]


def validate_permission_code(code: str) -> bool:
    return code in _BY_CODE


def get_permission_definition(code: str) -> dict | None:
    perm = _BY_CODE.get(code)
    if perm is None:
        return None
    code, name, description, category = perm
    return {"code": code, "name": name, "description": description, "category": category}
