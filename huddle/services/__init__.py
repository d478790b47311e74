"""Convenience exports for service layer."""
from .auth_service import (
    create_access_token,
    decode_access_token,
    get_current_user,
    get_optional_user,
    purge_expired_revocations,
    sign_in,
    sign_out,
    sign_up,
)
from .comment_service import (
    create_comment,
    delete_comment,
    list_comments,
    set_comment_like_state,
    update_comment,
)
from .conversation_service import (
    list_conversations,
    list_messages,
    open_conversation,
    search_people,
    send_message,
    start_conversation,
)
from .errors import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
)
from .follow_service import (
    FollowStats,
    accept_follow_request,
    get_follow_stats,
    list_follow_requests,
    list_followers,
    list_following,
    reject_follow_request,
    remove_follower,
    request_follow,
    unfollow_user,
)
from .notification_service import (
    NotificationType,
    add_notification,
    count_unread_notifications,
    list_notifications,
    mark_all_read,
    mark_read,
)
from .post_service import (
    create_post,
    delete_post,
    list_feed_records,
    set_post_like_state,
    update_post,
)
from .profile_service import get_profile, get_profile_by_id, search_profiles, update_profile
from .realtime import RealtimeHub, Subscription, realtime_hub

__all__ = [
    "sign_up",
    "sign_in",
    "sign_out",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "get_optional_user",
    "purge_expired_revocations",
    "list_comments",
    "create_comment",
    "update_comment",
    "delete_comment",
    "set_comment_like_state",
    "open_conversation",
    "start_conversation",
    "list_conversations",
    "list_messages",
    "send_message",
    "search_people",
    "ServiceError",
    "AuthenticationError",
    "BadRequestError",
    "ConflictError",
    "InvalidInputError",
    "NotFoundError",
    "PermissionDeniedError",
    "FollowStats",
    "request_follow",
    "accept_follow_request",
    "reject_follow_request",
    "unfollow_user",
    "remove_follower",
    "list_follow_requests",
    "list_followers",
    "list_following",
    "get_follow_stats",
    "NotificationType",
    "add_notification",
    "count_unread_notifications",
    "list_notifications",
    "mark_read",
    "mark_all_read",
    "create_post",
    "update_post",
    "delete_post",
    "list_feed_records",
    "set_post_like_state",
    "get_profile",
    "get_profile_by_id",
    "search_profiles",
    "update_profile",
    "RealtimeHub",
    "Subscription",
    "realtime_hub",
]
