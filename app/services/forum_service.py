"""
Forum posts and comments.

Comment tables in the wild point at their author in one of three ways: a
``companyId`` column, a ``userId`` column, or a generic ``authorId`` whose
foreign key decides whether it names a company or a user.
``resolve_comment_author`` settles which one applies.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from sqlalchemy import DateTime, Integer, delete, func, insert, literal, null, select

from app.core.config import settings
from app.core.exceptions import NotFoundError, SchemaError, ValidationError
from app.core.schema_catalog import SchemaCatalog, column_or_null
from app.services.base import BaseService

COMPANY_AUTHOR = "company"
USER_AUTHOR = "user"


class CommentAuthor(NamedTuple):
    # The single column new comments are attributed through
    column: Optional[str]
    kind: Optional[str]
    # Every column that references a company / a user, for cleanup
    company_columns: Tuple[str, ...]
    user_columns: Tuple[str, ...]


def resolve_comment_author(catalog: SchemaCatalog) -> CommentAuthor:
    company_column = catalog.resolve("Comment", "companyId")
    user_column = catalog.resolve("Comment", "userId")
    author_column = catalog.resolve("Comment", "authorId")

    author_kind = None
    if author_column:
        target = catalog.foreign_key_target("Comment", author_column)
        author_kind = USER_AUTHOR if target and target.lower() == "user" else COMPANY_AUTHOR

    company_columns = tuple(
        c for c in (company_column, author_column if author_kind == COMPANY_AUTHOR else None) if c
    )
    user_columns = tuple(
        c for c in (user_column, author_column if author_kind == USER_AUTHOR else None) if c
    )

    if company_column:
        chosen = (company_column, COMPANY_AUTHOR)
    elif user_column:
        chosen = (user_column, USER_AUTHOR)
    elif author_column:
        chosen = (author_column, author_kind)
    else:
        chosen = (None, None)
    return CommentAuthor(chosen[0], chosen[1], company_columns, user_columns)


def comment_company_join(catalog: SchemaCatalog, cm):
    """
    Join ``cm`` (an aliased Comment table) to the company that wrote it.

    Returns ``(from_clause, company_alias)``; the alias is None when the
    schema offers no way to reach the company.
    """
    author = resolve_comment_author(catalog)
    if author.column is None:
        return cm, None

    c = catalog.table("Company").alias("c")
    if author.kind == COMPANY_AUTHOR:
        return cm.outerjoin(c, c.c.id == cm.c[author.column]), c

    user_company = catalog.resolve("User", "companyId")
    if not user_company:
        return cm, None
    u = catalog.table("User").alias("u")
    joined = cm.outerjoin(u, u.c.id == cm.c[author.column]).outerjoin(c, c.c.id == u.c[user_company])
    return joined, c


class ForumService(BaseService):

    def _post_author_column(self) -> str:
        column = self.catalog.resolve("Post", "authorId")
        if not column:
            raise SchemaError("Post schema is missing author reference.")
        return column

    def _comment_post_column(self) -> str:
        column = self.catalog.resolve("Comment", "postId")
        if not column:
            raise SchemaError("Comment schema is missing post reference.")
        return column

    def resolve_company_id(self, company_id: Optional[int], user_id: Optional[int]) -> Optional[int]:
        """The explicit company wins; otherwise fall back to the user's company."""
        if company_id:
            return int(company_id)
        if not user_id:
            return None
        user_company = self.catalog.resolve("User", "companyId")
        if not user_company:
            return None
        users = self.catalog.table("User")
        return self.db.execute(
            select(users.c[user_company]).where(users.c.id == user_id).limit(1)
        ).scalar()

    def _comment_count(self, p):
        comment_post = self.catalog.resolve("Comment", "postId") if self.catalog.has_table("Comment") else None
        if not comment_post:
            return literal(0, Integer)
        cm = self.catalog.table("Comment").alias("cm")
        return select(func.count(cm.c.id)).where(cm.c[comment_post] == p.c.id).scalar_subquery()

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------
    def list_posts(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        p = self.catalog.table("Post").alias("p")
        c = self.catalog.table("Company").alias("c")
        author = self._post_author_column()
        created = self.catalog.resolve("Post", "createdAt")

        content = p.c.content if "content" in p.c else p.c.title
        created_at = column_or_null(p, created or "createdAt", "createdAt", DateTime)
        order_by = [p.c[created].desc(), p.c.id.desc()] if created else [p.c.id.desc()]

        stmt = (
            select(
                p.c.id,
                p.c.title,
                content.label("content"),
                column_or_null(p, "category"),
                created_at,
                c.c.name.label("company"),
                c.c.id.label("companyId"),
                self._comment_count(p).label("comments"),
            )
            .select_from(p.join(c, c.c.id == p.c[author]))
            .order_by(*order_by)
            .limit(limit or settings.forum_page_size)
        )
        return [dict(row) for row in self.db.execute(stmt).mappings().all()]

    def create_post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        title = payload.get("title")
        if not title:
            raise ValidationError("Title is required.")

        company_id = self.resolve_company_id(payload.get("company_id"), payload.get("user_id"))
        if not company_id:
            raise ValidationError("Company is required to create a post.")
        if not self.company_exists(company_id):
            raise ValidationError("Company not found.")

        posts = self.catalog.table("Post")
        author = self._post_author_column()
        has_content = self.catalog.has_column("Post", "content")
        has_category = self.catalog.has_column("Post", "category")
        content = payload.get("content") or ""
        category = payload.get("category") or None

        values = {"title": title, author: company_id}
        if has_content:
            values["content"] = content
        if has_category:
            values["category"] = category
        created = self.stamp("Post", values, "createdAt")
        self.stamp_updated("Post", values)

        returning = [posts.c.id, posts.c.title]
        if created:
            returning.append(posts.c[created].label("createdAt"))

        try:
            row = self.db.execute(insert(posts).values(values).returning(*returning)).mappings().one()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self._logger.info("Post created", extra={"post_id": row["id"], "company_id": company_id})
        return {
            "id": row["id"],
            "title": row["title"],
            "content": content if has_content else row["title"],
            "category": category if has_category else None,
            "createdAt": row.get("createdAt"),
            "companyId": company_id,
            "comments": 0,
        }

    def delete_post(self, post_id: int) -> Dict[str, int]:
        """Delete a post after its comments."""
        if not post_id:
            raise ValidationError("Invalid post id.")

        posts = self.catalog.table("Post")
        comment_post = self.catalog.resolve("Comment", "postId")
        try:
            if comment_post:
                comments = self.catalog.table("Comment")
                self.db.execute(delete(comments).where(comments.c[comment_post] == post_id))
            result = self.db.execute(delete(posts).where(posts.c.id == post_id))
            if result.rowcount == 0:
                raise NotFoundError("Post not found.")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return {"id": post_id}

    def _user_in_company(self, user_id: int, company_id: int) -> bool:
        """The user exists and, where users carry a company, belongs to ``company_id``."""
        users = self.catalog.table("User")
        stmt = select(users.c.id).where(users.c.id == user_id)
        user_company = self.catalog.resolve("User", "companyId")
        if user_company:
            stmt = stmt.where(users.c[user_company] == company_id)
        return self.db.execute(stmt.limit(1)).first() is not None

    def _post_exists(self, post_id: int) -> bool:
        posts = self.catalog.table("Post")
        row = self.db.execute(select(posts.c.id).where(posts.c.id == post_id).limit(1)).first()
        return row is not None

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------
    def list_comments(self, post_id: int) -> List[Dict[str, Any]]:
        if not post_id:
            raise ValidationError("Invalid post id.")

        comment_post = self._comment_post_column()
        created = self.catalog.resolve("Comment", "createdAt")
        cm = self.catalog.table("Comment").alias("cm")
        from_clause, c = comment_company_join(self.catalog, cm)

        columns = [
            cm.c.id,
            cm.c.content,
            column_or_null(cm, created or "createdAt", "createdAt", DateTime),
        ]
        if c is not None:
            columns += [c.c.name.label("company"), c.c.id.label("companyId")]
        else:
            columns += [null().label("company"), null().label("companyId")]

        order_by = [cm.c[created].asc(), cm.c.id.asc()] if created else [cm.c.id.asc()]
        stmt = (
            select(*columns)
            .select_from(from_clause)
            .where(cm.c[comment_post] == post_id)
            .order_by(*order_by)
        )
        return [dict(row) for row in self.db.execute(stmt).mappings().all()]

    def create_comment(self, post_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Add a comment attributed through exactly one author column.

        The value written is the company id for company-linked schemas and
        the user id for user-linked ones; a missing value is rejected rather
        than inserted as NULL.
        """
        content = payload.get("content")
        if not post_id or not content:
            raise ValidationError("Post and content are required.")

        user_id = payload.get("user_id") or None
        company_id = self.resolve_company_id(payload.get("company_id"), user_id)
        if not company_id:
            raise ValidationError("Company is required to comment.")

        company = self.catalog.table("Company")
        company_row = self.db.execute(
            select(company.c.id, company.c.name).where(company.c.id == company_id).limit(1)
        ).mappings().first()
        if company_row is None:
            raise ValidationError("Company not found.")

        comment_post = self._comment_post_column()
        if not self._post_exists(post_id):
            raise NotFoundError("Post not found.")

        author = resolve_comment_author(self.catalog)
        author_value = company_id if author.kind == COMPANY_AUTHOR else user_id
        if not author.column or not author_value:
            raise ValidationError("Author is required to comment.")
        if author.kind == USER_AUTHOR and not self._user_in_company(author_value, company_id):
            raise ValidationError("Author is required to comment.")

        comments = self.catalog.table("Comment")
        values = {"content": content, author.column: author_value, comment_post: post_id}
        created = self.stamp("Comment", values, "createdAt")
        self.stamp_updated("Comment", values)

        returning = [comments.c.id, comments.c.content]
        if created:
            returning.append(comments.c[created].label("createdAt"))

        try:
            row = self.db.execute(insert(comments).values(values).returning(*returning)).mappings().one()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return {
            "id": row["id"],
            "content": row["content"],
            "createdAt": row.get("createdAt") or datetime.now(timezone.utc),
            "postId": post_id,
            "companyId": company_id,
            "company": company_row["name"],
        }
