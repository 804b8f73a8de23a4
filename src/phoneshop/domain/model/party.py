"""Customers and suppliers: the parties that can owe or be owed money."""

from __future__ import annotations

from dataclasses import dataclass, field

from phoneshop.domain.exceptions import ValidationError
from phoneshop.domain.model.value_objects import AuditFields, DebtorKind, DebtorRef


@dataclass
class Party:
    id: int | None
    kind: DebtorKind
    name: str
    phone: str | None = None
    is_active: bool = True
    audit: AuditFields = field(default_factory=AuditFields)

    @staticmethod
    def register(kind: DebtorKind, name: str, phone: str | None = None) -> Party:
        if not name or not name.strip():
            raise ValidationError("Name is required")
        return Party(id=None, kind=kind, name=name.strip(), phone=phone)

    @property
    def ref(self) -> DebtorRef:
        return DebtorRef(self.kind, self.id)  # type: ignore[arg-type]
