# history/services.py

"""
HISTORY SERVICE

append_history(...) is the only writer of HistoryEntry rows.

diff_snapshots(before, after, fields) builds the "what changed" payload used
by update actions:

    {"notes": {"from": "old", "to": "new"}}

Values are made JSON-safe (dates -> ISO strings, Decimals -> strings).
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping

from history.models import HistoryEntry

logger = logging.getLogger(__name__)


def json_safe(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Mapping):
        return {str(k): json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(v) for v in value]
    return value


def diff_snapshots(
    before: Mapping[str, Any],
    after: Mapping[str, Any],
    fields: Iterable[str],
) -> dict:
    changes = {}
    for field in fields:
        old = before.get(field)
        new = after.get(field)
        if old != new:
            changes[field] = {"from": json_safe(old), "to": json_safe(new)}
    return changes


def append_history(
    *,
    module: str,
    module_id,
    user,
    action: str,
    details: Mapping[str, Any] | None = None,
) -> HistoryEntry:
    entry = HistoryEntry.objects.create(
        module=module,
        module_id=str(module_id),
        user=user if getattr(user, "pk", None) else None,
        action=action,
        details=json_safe(dict(details or {})),
    )
    logger.debug(
        "History appended",
        extra={"module": module, "module_id": str(module_id), "action": action},
    )
    return entry


def history_for(module: str, module_id):
    return HistoryEntry.objects.filter(module=module, module_id=str(module_id)).select_related("user")
