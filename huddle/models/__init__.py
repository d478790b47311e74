"""Convenience exports for ORM models."""
from .account import Account, RevokedToken
from .conversation import Conversation, Message
from .follow import Follow, FollowStatus
from .notification import Notification, NotificationType
from .post import Comment, Like, Post
from .profile import Profile

__all__ = [
    "Account",
    "RevokedToken",
    "Comment",
    "Conversation",
    "Follow",
    "FollowStatus",
    "Like",
    "Message",
    "Notification",
    "NotificationType",
    "Post",
    "Profile",
]
