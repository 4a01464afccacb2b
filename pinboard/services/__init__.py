"""Convenience exports for service layer."""
from .auth_service import (
    authenticate_user,
    create_access_token,
    decode_access_token,
    get_current_user,
    get_optional_user,
    register_user,
)
from .follow_service import FollowStats, get_follow_stats, toggle_follow
from .pagination import Pagination, build_pagination, normalize_page_params
from .post_service import (
    FeedPage,
    LikeState,
    add_post_comment,
    create_post_with_image,
    get_post_detail,
    list_feed_page,
    list_user_posts,
    list_user_posts_page,
    toggle_post_like,
)
from .profile_service import build_profile, get_user_by_username, update_profile_image
from .rate_limit import auth_rate_limiter, enforce_auth_rate_limit
from .storage_service import StorageConfigurationError, StorageUploadError, delete_asset, discard_asset, store_image

__all__ = [
    "authenticate_user",
    "register_user",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "get_optional_user",
    "FollowStats",
    "toggle_follow",
    "get_follow_stats",
    "Pagination",
    "build_pagination",
    "normalize_page_params",
    "FeedPage",
    "LikeState",
    "add_post_comment",
    "create_post_with_image",
    "get_post_detail",
    "list_feed_page",
    "list_user_posts",
    "list_user_posts_page",
    "toggle_post_like",
    "build_profile",
    "get_user_by_username",
    "update_profile_image",
    "auth_rate_limiter",
    "enforce_auth_rate_limit",
    "StorageConfigurationError",
    "StorageUploadError",
    "delete_asset",
    "discard_asset",
    "store_image",
]
