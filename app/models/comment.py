from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

class Comment(Base):
    __tablename__ = "Comment"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    post_id = Column("postId", Integer, ForeignKey("Post.id"), nullable=False, index=True)
    author_id = Column("authorId", Integer, ForeignKey("Company.id"), nullable=False)
    created_at = Column("createdAt", DateTime, server_default=func.now())

    post = relationship("Post", back_populates="comments")
