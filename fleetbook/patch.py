"""Partial-update field states.

A patch maps field names to one of three states:

* ``UNSET``: leave the stored value alone. Absent keys and explicit JSON
  ``null`` both parse to this.
* ``CLEAR``: reset the stored value. Only meaningful for nullable columns;
  services reject it for required fields.
* ``SetTo(value)``: replace the stored value.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable


class _Marker:
    def __init__(self, name):
        self._name = name

    def __repr__(self):
        return self._name

    def __bool__(self):
        return False


UNSET = _Marker("UNSET")
CLEAR = _Marker("CLEAR")


@dataclass(frozen=True)
class SetTo:
    value: Any


def patch_from_payload(payload: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    patch = {}
    for field in fields:
        raw = payload.get(field)
        patch[field] = UNSET if raw is None else SetTo(raw)
    return patch


def set_fields(patch: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``{field: value}`` for every ``SetTo`` entry."""
    return {field: state.value for field, state in patch.items() if isinstance(state, SetTo)}


def cleared_fields(patch: Dict[str, Any]):
    return [field for field, state in patch.items() if state is CLEAR]
