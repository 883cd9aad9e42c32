from sqlalchemy import Column, Integer, String, Enum, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from app.database import Base


class UserRole(str, enum.Enum):
    """
    ADMIN: manages companies from the admin panel.
    COMPANY: member account of one company.
    """
    ADMIN = "admin"
    COMPANY = "company"


class User(Base):
    __tablename__ = "User"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    # bcrypt hash; the column keeps its historical name
    password = Column(String, nullable=False)
    role = Column(
        Enum(UserRole, name="Role", values_callable=lambda roles: [r.value for r in roles]),
        default=UserRole.COMPANY,
        nullable=False,
    )
    company_id = Column("companyId", Integer, ForeignKey("Company.id"), nullable=True)
    name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    avatar = Column(String, nullable=True)
    created_at = Column("createdAt", DateTime, server_default=func.now())
    updated_at = Column("updatedAt", DateTime, server_default=func.now(), onupdate=func.now())

    company = relationship("Company", back_populates="users")
    settings = relationship("UserSettings", back_populates="user", uselist=False, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
