import logging
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.schema_catalog import SchemaCatalog


def blank_to_none(value: Any) -> Any:
    """Empty or whitespace-only form fields are stored as NULL."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class BaseService:
    """
    Common plumbing for the data-access services: the request's session, the
    cached schema catalog and a module logger.
    """

    def __init__(self, db: Session, catalog: SchemaCatalog):
        self.db = db
        self.catalog = catalog
        self._logger = logging.getLogger(self.__class__.__module__)

    def log_warning(self, message: str, **extra):
        self._logger.warning(message, extra=extra or None)

    def writable_values(self, table: str, payload: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
        """
        Pick the ``fields`` that were sent in ``payload`` and exist on ``table``.

        Keys absent from the payload are left untouched; keys sent as empty
        strings become NULL.
        """
        columns = self.catalog.columns(table)
        return {
            field: blank_to_none(payload[field])
            for field in fields
            if field in payload and field in columns
        }

    def stamp(self, table: str, values: Dict[str, Any], *candidates: str) -> Optional[str]:
        """Set the first timestamp column that exists among ``candidates`` to NOW()."""
        column = self.catalog.resolve(table, *candidates)
        if column:
            values[column] = func.now()
        return column

    def stamp_updated(self, table: str, values: Dict[str, Any]) -> Optional[str]:
        return self.stamp(table, values, "updatedAt")

    def company_exists(self, company_id: int) -> bool:
        company = self.catalog.table("Company")
        row = self.db.execute(
            select(company.c.id).where(company.c.id == company_id).limit(1)
        ).first()
        return row is not None
