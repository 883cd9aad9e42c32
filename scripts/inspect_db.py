import sys
import os

from sqlalchemy import func, select

# Ensure we can import app modules
sys.path.append(os.getcwd())

from app.core.schema_catalog import INTRANET_TABLES
from app.database import engine, schema_catalog


def inspect_db():
    print(f"--- Inspecting {engine.url.render_as_string(hide_password=True)} ---")

    tables = schema_catalog.load()
    with engine.connect() as conn:
        for name in INTRANET_TABLES:
            print(f"\nTable: {name}")
            if name not in tables:
                print("  Table not found.")
                continue

            table = tables[name]
            count = conn.execute(select(func.count()).select_from(table)).scalar()
            print(f"  rows: {count}")
            for column in table.c:
                target = schema_catalog.foreign_key_target(name, column.name)
                suffix = f" -> {target}" if target else ""
                print(f"  - {column.name} ({column.type}){suffix}")

    labels = schema_catalog.role_labels()
    print(f"\nRole labels: {', '.join(labels) if labels else '(free text)'}")


if __name__ == "__main__":
    inspect_db()
