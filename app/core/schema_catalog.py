"""
Schema catalog.

The intranet runs against databases whose tables do not all share the same
optional columns, and whose column names are sometimes camelCase and sometimes
snake_case. The catalog reflects the intranet tables once, caches what it
finds and answers column questions from memory. Call ``refresh()`` after a
migration to pick up the new shape.
"""
import logging
import re
import threading
from typing import Dict, List, Optional, Set

from sqlalchemy import Enum as SAEnum
from sqlalchemy import MetaData, String, Table, cast, inspect, null
from sqlalchemy.engine import Engine

from app.core.exceptions import SchemaError

logger = logging.getLogger(__name__)

INTRANET_TABLES = ("Company", "User", "Post", "Comment", "Message", "UserSettings")


def name_variants(name: str) -> List[str]:
    """Return ``name`` with its camelCase and snake_case spellings, in that order."""
    snake = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name).lower()
    head, *rest = snake.split("_")
    camel = head + "".join(part.title() for part in rest)
    variants = []
    for candidate in (name, camel, snake):
        if candidate not in variants:
            variants.append(candidate)
    return variants


def column_or_null(selectable, name: str, label: Optional[str] = None, type_=String):
    """Select ``name`` from ``selectable`` when it exists, a typed NULL otherwise."""
    label = label or name
    if name in selectable.c:
        return selectable.c[name].label(label)
    return cast(null(), type_).label(label)


class SchemaCatalog:
    def __init__(self, engine: Engine, table_names=INTRANET_TABLES):
        self._engine = engine
        self._table_names = tuple(table_names)
        self._lock = threading.Lock()
        self._tables: Optional[Dict[str, Table]] = None
        self._foreign_keys: Dict[str, Dict[str, str]] = {}

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def dialect_name(self) -> str:
        return self._engine.dialect.name

    def load(self) -> Dict[str, Table]:
        """Reflect the intranet tables unless they are already cached."""
        if self._tables is not None:
            return self._tables
        with self._lock:
            if self._tables is None:
                self._tables = self._reflect()
        return self._tables

    def refresh(self) -> Dict[str, List[str]]:
        with self._lock:
            self._tables = None
            self._foreign_keys = {}
        self.load()
        return self.describe()

    def _reflect(self) -> Dict[str, Table]:
        inspector = inspect(self._engine)
        existing = set(inspector.get_table_names())
        metadata = MetaData()
        tables: Dict[str, Table] = {}
        foreign_keys: Dict[str, Dict[str, str]] = {}

        for name in self._table_names:
            if name not in existing:
                logger.warning(f"Table {name} not found in database; queries on it will fail")
                continue
            tables[name] = Table(name, metadata, autoload_with=self._engine)
            targets = {}
            for fk in inspector.get_foreign_keys(name):
                for column in fk.get("constrained_columns", []):
                    targets[column] = fk["referred_table"]
            foreign_keys[name] = targets

        self._foreign_keys = foreign_keys
        logger.info(
            "Schema catalog loaded",
            extra={"tables": {name: sorted(t.c.keys()) for name, t in tables.items()}},
        )
        return tables

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def has_table(self, name: str) -> bool:
        return name in self.load()

    def table(self, name: str) -> Table:
        tables = self.load()
        if name not in tables:
            raise SchemaError(f"Table {name} does not exist.")
        return tables[name]

    def columns(self, name: str) -> Set[str]:
        tables = self.load()
        if name not in tables:
            return set()
        return set(tables[name].c.keys())

    def has_column(self, table: str, column: str) -> bool:
        return column in self.columns(table)

    def resolve(self, table: str, *candidates: str) -> Optional[str]:
        """
        Return the actual name of the first candidate column present on ``table``.

        Matching ignores case and tries each candidate's camelCase and
        snake_case spellings.
        """
        by_lower = {column.lower(): column for column in self.columns(table)}
        for candidate in candidates:
            for variant in name_variants(candidate):
                match = by_lower.get(variant.lower())
                if match:
                    return match
        return None

    def foreign_key_target(self, table: str, column: str) -> Optional[str]:
        self.load()
        return self._foreign_keys.get(table, {}).get(column)

    def role_labels(self) -> List[str]:
        """Labels of the User.role enum type, or [] when the column is not an enum."""
        if not self.has_column("User", "role"):
            return []
        role_type = self.table("User").c["role"].type
        if isinstance(role_type, SAEnum):
            return list(role_type.enums)
        return []

    def describe(self) -> Dict[str, List[str]]:
        return {name: sorted(table.c.keys()) for name, table in self.load().items()}
