from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

class Post(Base):
    __tablename__ = "Post"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=True)
    category = Column(String, nullable=True)
    # Posts are authored by companies, not users
    author_id = Column("authorId", Integer, ForeignKey("Company.id"), nullable=False, index=True)
    created_at = Column("createdAt", DateTime, server_default=func.now(), index=True)
    updated_at = Column("updatedAt", DateTime, server_default=func.now(), onupdate=func.now())

    author = relationship("Company", back_populates="posts")
    comments = relationship("Comment", back_populates="post")
