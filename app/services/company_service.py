"""
Company records: directory listing, admin CRUD and the cascading delete.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import Integer, delete, func, insert, literal, null, or_, select, update

from app.core.exceptions import NotFoundError, ValidationError
from app.core.schema_catalog import column_or_null
from app.services.auth import get_password_hash, resolve_role_value
from app.services.base import BaseService
from app.services.forum_service import resolve_comment_author

COMPANY_FIELDS = ("name", "industry", "location", "website", "email", "phone", "status", "description")
OPTIONAL_COMPANY_FIELDS = COMPANY_FIELDS[1:]


class CompanyService(BaseService):

    def _listing_query(self, include_admin: bool):
        c = self.catalog.table("Company").alias("c")
        columns = [c.c.id, c.c.name] + [column_or_null(c, field) for field in OPTIONAL_COMPANY_FIELDS]

        user_company = self.catalog.resolve("User", "companyId") if self.catalog.has_table("User") else None
        if user_company:
            u = self.catalog.table("User").alias("u")
            employees = (
                select(func.count(u.c.id)).where(u.c[user_company] == c.c.id).scalar_subquery()
            )
            admin = select(func.min(u.c.email)).where(u.c[user_company] == c.c.id).scalar_subquery()
        else:
            employees = literal(0, Integer)
            admin = null()

        columns.append(employees.label("employees"))
        if include_admin:
            columns.append(admin.label("admin"))
        return select(*columns).select_from(c), c

    def list_companies(self, include_admin: bool = False) -> List[Dict[str, Any]]:
        """All companies by name; optional attributes missing from the schema come back as None."""
        stmt, c = self._listing_query(include_admin)
        rows = self.db.execute(stmt.order_by(c.c.name.asc(), c.c.id.asc())).mappings().all()
        return [dict(row) for row in rows]

    def get_company(self, company_id: int) -> Dict[str, Any]:
        stmt, c = self._listing_query(include_admin=True)
        row = self.db.execute(stmt.where(c.c.id == company_id)).mappings().first()
        if row is None:
            raise NotFoundError("Company not found.")
        return dict(row)

    def create_company(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a company and, when credentials are supplied, its member user.

        Both rows are written in one transaction; any failure rolls back the
        company as well.
        """
        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("name is required.")

        company = self.catalog.table("Company")
        values = {"name": name.strip()}
        values.update(self.writable_values("Company", payload, OPTIONAL_COMPANY_FIELDS))
        self.stamp_updated("Company", values)

        try:
            row = self.db.execute(insert(company).values(values).returning(*company.c)).mappings().one()
            created = dict(row)

            email = (payload.get("email") or "").strip()
            password = payload.get("password")
            if email and password:
                self._create_company_user(created["id"], email, password)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self._logger.info("Company created", extra={"company_id": created["id"]})
        return created

    def _create_company_user(self, company_id: int, email: str, password: str) -> Optional[int]:
        user_columns = self.catalog.columns("User")
        company_column = self.catalog.resolve("User", "companyId")
        password_column = self.catalog.resolve("User", "password")
        if not {"email", "role"} <= user_columns or not company_column or not password_column:
            self.log_warning(
                "User table cannot hold company accounts; skipping user creation",
                company_id=company_id,
            )
            return None

        role_value = resolve_role_value(self.catalog.role_labels())
        users = self.catalog.table("User")

        existing = self.db.execute(
            select(users.c.id).where(func.lower(users.c.email) == email.strip().lower()).limit(1)
        ).first()
        if existing is not None:
            raise ValidationError("Email already exists.")

        values = {
            "email": email.strip(),
            password_column: get_password_hash(str(password)),
            "role": role_value,
            company_column: company_id,
        }
        self.stamp_updated("User", values)
        user_id = self.db.execute(insert(users).values(values).returning(users.c.id)).scalar_one()
        self._logger.info("Company user created", extra={"company_id": company_id, "user_id": user_id})
        return user_id

    def update_company(self, company_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not company_id:
            raise ValidationError("Invalid company id.")

        values = self.writable_values("Company", payload, COMPANY_FIELDS)
        if not values:
            raise ValidationError("No fields to update.")
        if "name" in values:
            if not values["name"]:
                raise ValidationError("name is required.")
            values["name"] = values["name"].strip()
        self.stamp_updated("Company", values)

        company = self.catalog.table("Company")
        try:
            row = self.db.execute(
                update(company).where(company.c.id == company_id).values(values).returning(*company.c)
            ).mappings().first()
            if row is None:
                raise NotFoundError("Company not found.")
            updated = dict(row)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return updated

    def delete_company(self, company_id: int) -> Dict[str, int]:
        """
        Delete a company and everything that references it.

        Order: messages, comments, posts, user settings, users, company. Each
        foreign-key column is resolved through the catalog, so tables that lack
        a given reference are skipped rather than failing.
        """
        if not company_id:
            raise ValidationError("Invalid company id.")

        catalog = self.catalog
        user_company = catalog.resolve("User", "companyId")
        post_author = catalog.resolve("Post", "authorId")
        comment_post = catalog.resolve("Comment", "postId")
        comment_author = resolve_comment_author(catalog)

        company_user_ids = None
        if user_company:
            users = catalog.table("User")
            company_user_ids = select(users.c.id).where(users.c[user_company] == company_id)

        try:
            if catalog.has_table("Message"):
                messages = catalog.table("Message")
                sender = catalog.resolve("Message", "senderCompanyId")
                receiver = catalog.resolve("Message", "receiverCompanyId")
                self.db.execute(
                    delete(messages).where(
                        or_(messages.c[sender] == company_id, messages.c[receiver] == company_id)
                    )
                )

            if catalog.has_table("Comment"):
                comments = catalog.table("Comment")
                for column in comment_author.company_columns:
                    self.db.execute(delete(comments).where(comments.c[column] == company_id))
                if company_user_ids is not None:
                    for column in comment_author.user_columns:
                        self.db.execute(delete(comments).where(comments.c[column].in_(company_user_ids)))
                if comment_post and post_author:
                    posts = catalog.table("Post")
                    company_post_ids = select(posts.c.id).where(posts.c[post_author] == company_id)
                    self.db.execute(delete(comments).where(comments.c[comment_post].in_(company_post_ids)))

            if post_author:
                posts = catalog.table("Post")
                self.db.execute(delete(posts).where(posts.c[post_author] == company_id))

            if company_user_ids is not None:
                settings_user = catalog.resolve("UserSettings", "userId")
                if settings_user:
                    user_settings = catalog.table("UserSettings")
                    self.db.execute(
                        delete(user_settings).where(user_settings.c[settings_user].in_(company_user_ids))
                    )
                users = catalog.table("User")
                self.db.execute(delete(users).where(users.c[user_company] == company_id))

            company = catalog.table("Company")
            result = self.db.execute(delete(company).where(company.c.id == company_id))
            if result.rowcount == 0:
                raise NotFoundError("Company not found.")

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self._logger.info("Company deleted", extra={"company_id": company_id})
        return {"id": company_id}
