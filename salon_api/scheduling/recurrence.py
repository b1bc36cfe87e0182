"""
Recurrence Resolution

Decides which records an edit or delete touches when the target may belong
to a series. Everything here is pure: the caller passes a snapshot of the
store and gets back the write set (updated records) or the delete set (ids).

| Operation | In a series | Scope  | Affected records                              |
|-----------|-------------|--------|-----------------------------------------------|
| edit      | no          | -      | target                                        |
| edit      | yes         | SINGLE | target (stays in its series)                  |
| edit      | yes         | FUTURE | target and members dated on/after the target  |
| delete    | no          | -      | target                                        |
| delete    | yes         | SINGLE | target                                        |
| delete    | yes         | SERIES | every member, target included                 |

A series member without a scope raises ``ScopeRequiredError``; the scope is
never guessed.
"""

from enum import Enum
from typing import Iterable, List, Optional

from salon_api.scheduling.errors import ScopeRequiredError
from salon_api.scheduling.records import Appointment, AppointmentChanges, require_complete


class EditScope(str, Enum):
    SINGLE = 'single'
    FUTURE = 'future'


class DeleteScope(str, Enum):
    SINGLE = 'single'
    SERIES = 'series'


def _check_scope_type(scope, expected: type[Enum]) -> None:
    if scope is not None and not isinstance(scope, expected):
        raise TypeError(f'Expected {expected.__name__}, got {type(scope).__name__}.')


def _sort_key(record: Appointment) -> tuple[str, str]:
    return record.date_str, record.time


def series_members(records: Iterable[Appointment], series_id: str) -> List[Appointment]:
    members = [record for record in records if record.series_id == series_id]
    members.sort(key=_sort_key)
    return members


def resolve_edit(
    records: Iterable[Appointment],
    target: Appointment,
    changes: AppointmentChanges,
    scope: Optional[EditScope] = None,
) -> List[Appointment]:
    """
    Returns the updated copies of every record the edit touches.

    ``id`` and ``series_id`` never change. With ``FUTURE`` the other members
    keep their own dates: a date change only moves the target. Members are
    selected by comparing canonical date strings against the target's date
    before the edit.
    """
    _check_scope_type(scope, EditScope)

    if not target.is_series_member:
        updated = [target.model_copy(update=changes.as_updates())]
    elif scope is None:
        raise ScopeRequiredError(target.id, target.series_id, [item.value for item in EditScope])
    elif scope is EditScope.SINGLE:
        updated = [target.model_copy(update=changes.as_updates())]
    else:
        updated = [target.model_copy(update=changes.as_updates())]
        shared_updates = changes.as_updates(include_date=False)
        for member in series_members(records, target.series_id):
            if member.id != target.id and member.date_str >= target.date_str:
                updated.append(member.model_copy(update=shared_updates))

    for record in updated:
        require_complete(record)

    return updated


def resolve_delete(
    records: Iterable[Appointment],
    target: Appointment,
    scope: Optional[DeleteScope] = None,
) -> List[str]:
    _check_scope_type(scope, DeleteScope)

    if not target.is_series_member:
        return [target.id]

    if scope is None:
        raise ScopeRequiredError(target.id, target.series_id, [item.value for item in DeleteScope])

    if scope is DeleteScope.SINGLE:
        return [target.id]

    member_ids = [member.id for member in series_members(records, target.series_id)]
    if target.id not in member_ids:
        member_ids.append(target.id)
    return member_ids
