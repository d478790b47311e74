"""Convenience exports for schema layer."""
from .auth import AuthResponse, InterestCatalogueResponse, SignInRequest, SignUpRequest
from .follow import (
    FollowActionResponse,
    FollowListResponse,
    FollowRequestListResponse,
    FollowRequestResponse,
    FollowStatsResponse,
)
from .messages import (
    ConversationListResponse,
    ConversationStartRequest,
    ConversationSummaryResponse,
    ConversationThreadResponse,
    MessageListResponse,
    MessageResponse,
    MessageSendRequest,
)
from .notifications import (
    NotificationListResponse,
    NotificationPostPreview,
    NotificationResponse,
    NotificationSummaryResponse,
)
from .posts import (
    CommentCreate,
    CommentEngagementResponse,
    CommentListResponse,
    CommentResponse,
    CommentUpdate,
    LikeRequest,
    PostCreate,
    PostEngagementResponse,
    PostFeedResponse,
    PostResponse,
    PostUpdate,
)
from .profiles import (
    ProfileCardResponse,
    ProfileResponse,
    ProfileSearchResponse,
    ProfileSearchResult,
    ProfileSummary,
    ProfileUpdateRequest,
    RelationshipStatus,
)

__all__ = [
    "AuthResponse",
    "InterestCatalogueResponse",
    "SignInRequest",
    "SignUpRequest",
    "FollowActionResponse",
    "FollowListResponse",
    "FollowRequestListResponse",
    "FollowRequestResponse",
    "FollowStatsResponse",
    "ConversationListResponse",
    "ConversationStartRequest",
    "ConversationSummaryResponse",
    "ConversationThreadResponse",
    "MessageListResponse",
    "MessageResponse",
    "MessageSendRequest",
    "NotificationListResponse",
    "NotificationPostPreview",
    "NotificationResponse",
    "NotificationSummaryResponse",
    "CommentCreate",
    "CommentEngagementResponse",
    "CommentListResponse",
    "CommentResponse",
    "CommentUpdate",
    "LikeRequest",
    "PostCreate",
    "PostEngagementResponse",
    "PostFeedResponse",
    "PostResponse",
    "PostUpdate",
    "ProfileCardResponse",
    "ProfileResponse",
    "ProfileSearchResponse",
    "ProfileSearchResult",
    "ProfileSummary",
    "ProfileUpdateRequest",
    "RelationshipStatus",
]
