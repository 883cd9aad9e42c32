from sqlalchemy import Column, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

class UserSettings(Base):
    __tablename__ = "UserSettings"

    user_id = Column("userId", Integer, ForeignKey("User.id", ondelete="CASCADE"), primary_key=True)
    # Opaque to the server: whatever the settings page sends is stored as-is
    notifications = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict)
    updated_at = Column("updatedAt", DateTime, server_default=func.now())

    user = relationship("User", back_populates="settings")
