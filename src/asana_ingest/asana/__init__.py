"""Asana API client and resource models."""

from .client import AsanaClient, ResourceFetcher
from .models import COMMENT_SUBTYPE, AsanaStory, AsanaTask, AsanaUser, EnrichedTask, SubtaskRef

__all__ = [
    "AsanaClient",
    "AsanaStory",
    "AsanaTask",
    "AsanaUser",
    "COMMENT_SUBTYPE",
    "EnrichedTask",
    "ResourceFetcher",
    "SubtaskRef",
]
