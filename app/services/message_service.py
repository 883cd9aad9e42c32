from typing import Any, Dict, List

from sqlalchemy import DateTime, insert, or_, select

from app.core.exceptions import NotFoundError, ValidationError
from app.core.schema_catalog import column_or_null
from app.services.base import BaseService


class MessageService(BaseService):
    """
    Direct messages between companies.

    Only the messages themselves are stored; read and delivery status are
    decoration added by the client.
    """

    def _columns(self):
        sender = self.catalog.resolve("Message", "senderCompanyId")
        receiver = self.catalog.resolve("Message", "receiverCompanyId")
        created = self.catalog.resolve("Message", "createdAt")
        return sender, receiver, created

    def list_messages(self, company_id: int) -> List[Dict[str, Any]]:
        """Every message the company sent or received, oldest first."""
        if not company_id:
            raise ValidationError("companyId is required.")

        sender, receiver, created = self._columns()
        m = self.catalog.table("Message").alias("m")
        cs = self.catalog.table("Company").alias("cs")
        cr = self.catalog.table("Company").alias("cr")

        order_by = [m.c[created].asc(), m.c.id.asc()] if created else [m.c.id.asc()]
        stmt = (
            select(
                m.c.id,
                m.c.content,
                column_or_null(m, created or "createdAt", "createdAt", DateTime),
                m.c[sender].label("senderCompanyId"),
                m.c[receiver].label("receiverCompanyId"),
                cs.c.name.label("senderName"),
                cr.c.name.label("receiverName"),
            )
            .select_from(
                m.join(cs, cs.c.id == m.c[sender]).join(cr, cr.c.id == m.c[receiver])
            )
            .where(or_(m.c[sender] == company_id, m.c[receiver] == company_id))
            .order_by(*order_by)
        )
        return [dict(row) for row in self.db.execute(stmt).mappings().all()]

    def send_message(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        sender_id = payload.get("sender_company_id")
        receiver_id = payload.get("receiver_company_id")
        content = payload.get("content")
        if not sender_id or not receiver_id or not content:
            raise ValidationError("senderCompanyId, receiverCompanyId and content are required.")

        for company_id in (sender_id, receiver_id):
            if not self.company_exists(company_id):
                raise NotFoundError("Company not found.")

        sender, receiver, created = self._columns()
        messages = self.catalog.table("Message")
        values = {sender: sender_id, receiver: receiver_id, "content": content}
        self.stamp("Message", values, "createdAt")

        returning = [
            messages.c.id,
            messages.c.content,
            messages.c[sender].label("senderCompanyId"),
            messages.c[receiver].label("receiverCompanyId"),
        ]
        if created:
            returning.append(messages.c[created].label("createdAt"))

        try:
            row = self.db.execute(insert(messages).values(values).returning(*returning)).mappings().one()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self._logger.info(
            "Message sent",
            extra={"message_id": row["id"], "sender": sender_id, "receiver": receiver_id},
        )
        return dict(row)

    def list_conversations(self, company_id: int) -> List[Dict[str, Any]]:
        """
        Group the company's messages per counterpart, most recently active first.
        """
        conversations: Dict[int, Dict[str, Any]] = {}
        for position, message in enumerate(self.list_messages(company_id)):
            outgoing = message["senderCompanyId"] == company_id
            counterpart_id = message["receiverCompanyId"] if outgoing else message["senderCompanyId"]
            counterpart_name = message["receiverName"] if outgoing else message["senderName"]

            conversation = conversations.setdefault(
                counterpart_id,
                {"companyId": counterpart_id, "company": counterpart_name, "messageCount": 0},
            )
            conversation["messageCount"] += 1
            conversation["lastMessage"] = message["content"]
            conversation["lastMessageAt"] = message["createdAt"]
            conversation["lastSenderCompanyId"] = message["senderCompanyId"]
            conversation["_position"] = position

        ordered = sorted(conversations.values(), key=lambda c: c["_position"], reverse=True)
        for conversation in ordered:
            del conversation["_position"]
        return ordered
