# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import company, user, post, comment, message, user_settings

# Explicit class exports for cleaner imports
from .company import Company
from .user import User, UserRole
from .post import Post
from .comment import Comment
from .message import Message
from .user_settings import UserSettings

__all__ = [
    "Company",
    "User",
    "UserRole",
    "Post",
    "Comment",
    "Message",
    "UserSettings",
]
