from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from app.database import Base

class Message(Base):
    """A single directed text from one company to another."""
    __tablename__ = "Message"

    id = Column(Integer, primary_key=True, index=True)
    sender_company_id = Column("senderCompanyId", Integer, ForeignKey("Company.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_company_id = Column("receiverCompanyId", Integer, ForeignKey("Company.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column("createdAt", DateTime, server_default=func.now())
