"""
Read-only dashboards for the admin panel.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, Integer, String, func, literal, select

from app.core.config import settings
from app.core.schema_catalog import column_or_null
from app.services.base import BaseService
from app.services.forum_service import comment_company_join

RECENT_POSTS_ON_SUMMARY = 4
RECENT_ACTIVITY_ON_SUMMARY = 5


def format_activity_time(value: Optional[datetime]) -> Optional[str]:
    """Short ``day month hour:minute`` label used by the activity feed."""
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    return value.strftime("%d %b %H:%M")


class AdminService(BaseService):

    def _count(self, table: str) -> int:
        if not self.catalog.has_table(table):
            return 0
        t = self.catalog.table(table)
        return self.db.execute(select(func.count()).select_from(t)).scalar_one()

    def _order_newest(self, selectable, table: str):
        created = self.catalog.resolve(table, "createdAt")
        if created:
            return [selectable.c[created].desc(), selectable.c.id.desc()]
        return [selectable.c.id.desc()]

    def _recent_comments(self, limit: int) -> List[Dict[str, Any]]:
        """Newest comments with their author company and post title."""
        comment_post = self.catalog.resolve("Comment", "postId")
        if not comment_post:
            return []
        created = self.catalog.resolve("Comment", "createdAt")
        cm = self.catalog.table("Comment").alias("cm")
        p = self.catalog.table("Post").alias("p")
        from_clause, c = comment_company_join(self.catalog, cm)

        stmt = (
            select(
                cm.c.id,
                cm.c.content,
                column_or_null(cm, created or "createdAt", "createdAt", DateTime),
                c.c.name.label("company") if c is not None else literal(None, String).label("company"),
                p.c.title.label("postTitle"),
            )
            .select_from(from_clause.join(p, p.c.id == cm.c[comment_post]))
            .order_by(*self._order_newest(cm, "Comment"))
            .limit(limit)
        )
        return [dict(row) for row in self.db.execute(stmt).mappings().all()]

    def summary(self) -> Dict[str, Any]:
        stats = {
            "users": self._count("User"),
            "companies": self._count("Company"),
            "posts": self._count("Post"),
            "comments": self._count("Comment"),
        }

        recent_posts = []
        post_author = self.catalog.resolve("Post", "authorId")
        if post_author:
            p = self.catalog.table("Post").alias("p")
            c = self.catalog.table("Company").alias("c")
            created = self.catalog.resolve("Post", "createdAt")
            stmt = (
                select(
                    p.c.id,
                    p.c.title,
                    c.c.name.label("company"),
                    column_or_null(p, created or "createdAt", "createdAt", DateTime),
                )
                .select_from(p.join(c, c.c.id == p.c[post_author]))
                .order_by(*self._order_newest(p, "Post"))
                .limit(RECENT_POSTS_ON_SUMMARY)
            )
            recent_posts = [dict(row) for row in self.db.execute(stmt).mappings().all()]

        activity = [
            {
                "title": row["company"],
                "note": row["content"],
                "time": format_activity_time(row["createdAt"]),
                "tag": row["postTitle"],
            }
            for row in self._recent_comments(RECENT_ACTIVITY_ON_SUMMARY)
        ]

        return {"stats": stats, "activity": activity, "recentPosts": recent_posts}

    def list_posts(self) -> List[Dict[str, Any]]:
        post_author = self.catalog.resolve("Post", "authorId")
        if not post_author:
            return []

        p = self.catalog.table("Post").alias("p")
        c = self.catalog.table("Company").alias("c")
        created = self.catalog.resolve("Post", "createdAt")

        comment_post = self.catalog.resolve("Comment", "postId")
        if comment_post:
            cm = self.catalog.table("Comment").alias("cm")
            comments = select(func.count(cm.c.id)).where(cm.c[comment_post] == p.c.id).scalar_subquery()
        else:
            comments = literal(0, Integer)

        views = (
            func.coalesce(p.c.views, 0).label("views")
            if "views" in p.c
            else literal(0, Integer).label("views")
        )
        stmt = (
            select(
                p.c.id,
                p.c.title,
                column_or_null(p, created or "createdAt", "createdAt", DateTime),
                column_or_null(p, "category"),
                column_or_null(p, "status"),
                views,
                c.c.name.label("company"),
                comments.label("comments"),
            )
            .select_from(p.join(c, c.c.id == p.c[post_author]))
            .order_by(*self._order_newest(p, "Post"))
            .limit(settings.admin_recent_posts)
        )
        return [dict(row) for row in self.db.execute(stmt).mappings().all()]

    def list_users(self) -> List[Dict[str, Any]]:
        u = self.catalog.table("User").alias("u")
        user_company = self.catalog.resolve("User", "companyId")
        last_active = self.catalog.resolve("User", "lastActive")

        columns = [
            u.c.id,
            u.c.email,
            u.c.role,
            column_or_null(u, "name"),
            column_or_null(u, "status"),
            column_or_null(u, last_active or "lastActive", "lastActive"),
        ]
        from_clause = u
        if user_company:
            c = self.catalog.table("Company").alias("c")
            from_clause = u.outerjoin(c, c.c.id == u.c[user_company])
            columns.append(c.c.name.label("company"))
        else:
            columns.append(literal(None, String).label("company"))

        stmt = select(*columns).select_from(from_clause).order_by(u.c.id.desc())
        users = []
        for row in self.db.execute(stmt).mappings().all():
            user = dict(row)
            role = user["role"]
            user["role"] = role.value if hasattr(role, "value") else role
            users.append(user)
        return users

    def list_messages(self) -> List[Dict[str, Any]]:
        """The latest forum comments shaped as inbox entries."""
        return [
            {
                "id": row["id"],
                "from": row["company"],
                "subject": row["postTitle"],
                "createdAt": row["createdAt"],
                "preview": row["content"],
            }
            for row in self._recent_comments(settings.admin_recent_messages)
        ]
