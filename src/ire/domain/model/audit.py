"""InventoryAuditLogEntry: an administrative change and the reason given for it."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from ire.domain.model.stock_ledger import utcnow
from ire.domain.model.value_objects import AuditAction


@dataclass(frozen=True)
class InventoryAuditLogEntry:
    """Immutable record of an administrative change.

    Values are stored as strings so any field can be audited; for stock
    updates the delta is ``int(new_value) - int(old_value)``.
    """

    product_id: str
    user_id: str
    action: AuditAction
    old_value: str | None = None
    new_value: str | None = None
    reason: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
