"""Client-side behaviours driving the Pinboard JSON endpoints."""
from .api import PinboardClient
from .comments import CommentComposer, CommentEntry, CommentThread
from .gallery import GalleryController, GalleryDetail, GalleryItem
from .masonry import MasonryGrid, MasonryScheduler, compute_row_span
from .optimistic import (
    DuplicateRequestError,
    MutationOutcome,
    MutationPhase,
    OptimisticToggle,
    PendingRequests,
    ToggleControl,
    follow_toggle,
    like_toggle,
)
from .toast import Toast

__all__ = [
    "PinboardClient",
    "CommentComposer",
    "CommentEntry",
    "CommentThread",
    "GalleryController",
    "GalleryDetail",
    "GalleryItem",
    "MasonryGrid",
    "MasonryScheduler",
    "compute_row_span",
    "DuplicateRequestError",
    "MutationOutcome",
    "MutationPhase",
    "OptimisticToggle",
    "PendingRequests",
    "ToggleControl",
    "follow_toggle",
    "like_toggle",
    "Toast",
]
