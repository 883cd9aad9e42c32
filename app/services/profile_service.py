from typing import Any, Dict, Optional

from sqlalchemy import insert, select, update
from sqlalchemy.dialects import postgresql, sqlite

from app.core.exceptions import NotFoundError, SchemaError, ValidationError
from app.core.schema_catalog import column_or_null
from app.services.base import BaseService
from app.services.company_service import COMPANY_FIELDS, OPTIONAL_COMPANY_FIELDS

USER_PROFILE_FIELDS = ("name", "email", "phone", "avatar")

# Dialects with INSERT .. ON CONFLICT DO UPDATE
UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ProfileService(BaseService):

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------
    def _company_card(self, company_id: int) -> Optional[Dict[str, Any]]:
        c = self.catalog.table("Company")
        stmt = (
            select(c.c.id, c.c.name, *[column_or_null(c, field) for field in OPTIONAL_COMPANY_FIELDS])
            .where(c.c.id == company_id)
            .limit(1)
        )
        row = self.db.execute(stmt).mappings().first()
        return dict(row) if row else None

    def _require_user(self, user_id: int) -> None:
        users = self.catalog.table("User")
        row = self.db.execute(select(users.c.id).where(users.c.id == user_id).limit(1)).first()
        if row is None:
            raise NotFoundError("User not found.")

    def get_profile(self, user_id: Optional[int], company_id: Optional[int] = None) -> Dict[str, Any]:
        """The user's own fields plus the requested company, or the user's company."""
        if not user_id:
            raise ValidationError("userId is required.")

        u = self.catalog.table("User")
        user_company = self.catalog.resolve("User", "companyId")
        stmt = (
            select(
                u.c.id,
                u.c.email,
                column_or_null(u, user_company or "companyId", "companyId"),
                *[column_or_null(u, field) for field in ("name", "phone", "avatar")],
            )
            .where(u.c.id == user_id)
            .limit(1)
        )
        user = self.db.execute(stmt).mappings().first()
        if user is None:
            raise NotFoundError("User not found.")

        resolved_company_id = company_id or user["companyId"]
        company = self._company_card(resolved_company_id) if resolved_company_id else None
        return {"user": dict(user), "company": company}

    def update_profile(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial profile update.

        Only keys present in ``user`` / ``company`` that exist as columns are
        written. The company defaults to the one the user belongs to.
        """
        user_id = payload.get("user_id")
        if not user_id:
            raise ValidationError("userId is required.")
        self._require_user(user_id)

        result: Dict[str, Any] = {"ok": True}
        user_company = self.catalog.resolve("User", "companyId")
        users = self.catalog.table("User")

        try:
            user_values = self.writable_values("User", payload.get("user") or {}, USER_PROFILE_FIELDS)
            if user_values:
                self.stamp_updated("User", user_values)
                returning = [users.c.id, users.c.email]
                if user_company:
                    returning.append(users.c[user_company].label("companyId"))
                row = self.db.execute(
                    update(users).where(users.c.id == user_id).values(user_values).returning(*returning)
                ).mappings().first()
                result["user"] = dict(row) if row else None

            company_payload = payload.get("company")
            company_id = payload.get("company_id") or (result.get("user") or {}).get("companyId")
            if company_id is None and company_payload and user_company:
                company_id = self.db.execute(
                    select(users.c[user_company]).where(users.c.id == user_id)
                ).scalar()

            if company_id and company_payload:
                company_values = self.writable_values("Company", company_payload, COMPANY_FIELDS)
                if "name" in company_values:
                    if not company_values["name"]:
                        raise ValidationError("name is required.")
                    company_values["name"] = company_values["name"].strip()
                if company_values:
                    self.stamp_updated("Company", company_values)
                    company = self.catalog.table("Company")
                    row = self.db.execute(
                        update(company)
                        .where(company.c.id == company_id)
                        .values(company_values)
                        .returning(company.c.id, company.c.name)
                    ).mappings().first()
                    result["company"] = dict(row) if row else None

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self._logger.info("Profile updated", extra={"user_id": user_id, "fields": sorted(result)})
        return result

    # ------------------------------------------------------------------
    # Notification settings
    # ------------------------------------------------------------------
    def _settings_columns(self):
        user_column = self.catalog.resolve("UserSettings", "userId")
        if not user_column or not self.catalog.has_column("UserSettings", "notifications"):
            raise SchemaError("UserSettings schema is missing userId or notifications.")
        return self.catalog.table("UserSettings"), user_column

    def get_notifications(self, user_id: Optional[int]) -> Dict[str, Any]:
        if not user_id:
            raise ValidationError("userId is required.")
        table, user_column = self._settings_columns()
        stored = self.db.execute(
            select(table.c.notifications).where(table.c[user_column] == user_id).limit(1)
        ).scalar()
        return {"notifications": stored or {}}

    def save_notifications(self, user_id: Optional[int], notifications: Any) -> Dict[str, Any]:
        """Insert or replace the user's notification preferences."""
        if not user_id:
            raise ValidationError("userId is required.")
        document = notifications if isinstance(notifications, dict) else {}
        table, user_column = self._settings_columns()
        self._require_user(user_id)

        values = {user_column: user_id, "notifications": document}
        updated = self.stamp_updated("UserSettings", values)

        try:
            upsert = UPSERT_DIALECTS.get(self.catalog.dialect_name)
            if upsert is not None:
                stmt = upsert(table).values(values)
                changes = {"notifications": stmt.excluded.notifications}
                if updated:
                    changes[updated] = stmt.excluded[updated]
                stmt = stmt.on_conflict_do_update(index_elements=[table.c[user_column]], set_=changes)
                self.db.execute(stmt)
            else:
                exists = self.db.execute(
                    select(table.c[user_column]).where(table.c[user_column] == user_id).limit(1)
                ).first()
                if exists:
                    changes = {k: v for k, v in values.items() if k != user_column}
                    self.db.execute(update(table).where(table.c[user_column] == user_id).values(changes))
                else:
                    self.db.execute(insert(table).values(values))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return self.get_notifications(user_id)
