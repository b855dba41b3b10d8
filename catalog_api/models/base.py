# catalog_api/models/base.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import CHAR, DateTime, event
from sqlalchemy.orm import Mapped, Session, mapped_column, validates

from catalog_api.core.errors import StoreCastError, StoreValidationError
from catalog_api.core.ids import is_valid_object_id, new_object_id


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentMixin:
    """
    Coloane comune pentru entități: id de tip object-id + timestamps gestionate de store.

    Subclasele implementează `collect_violations()` pentru validatorii de câmp rulați înainte de flush.
    """
    # nume de atribut → nume pe fir (camelCase), folosit în mesajele de eroare
    __wire_names__: Dict[str, str] = {}

    id: Mapped[str] = mapped_column(CHAR(24), primary_key=True, default=new_object_id)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    @classmethod
    def wire_name(cls, attr: str) -> str:
        return cls.__wire_names__.get(attr, attr)

    @validates("id")
    def _validate_id(self, key: str, value: Any) -> Any:
        return self._cast_object_id(key, value)

    def _cast_object_id(self, key: str, value: Any) -> Any:
        if value is not None and not is_valid_object_id(value):
            raise StoreCastError(self.wire_name(key), value)
        return value.lower() if isinstance(value, str) else value

    def collect_violations(self) -> List[Dict[str, Any]]:
        return []

    def check_constraints(self) -> None:
        violations = self.collect_violations()
        if violations:
            raise StoreValidationError(violations)

    # helper pentru subclase
    def _violation(self, attr: str, message: str) -> Dict[str, Any]:
        return {"field": self.wire_name(attr), "message": message, "value": getattr(self, attr, None)}


@event.listens_for(Session, "before_flush")
def _run_field_validators(session: Session, flush_context, instances) -> None:
    # Validatorii de câmp rulează la fiecare insert și update, ca un ultim filtru înainte de store
    for obj in list(session.new) + list(session.dirty):
        if isinstance(obj, DocumentMixin):
            obj.check_constraints()
