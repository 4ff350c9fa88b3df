"""
TTL configuration and query-type-to-category mapping.
"""
from typing import Dict, Optional

from .core import DataCategory


# TTL configuration by category (in seconds, None = until restart)
TTL_CONFIG: Dict[DataCategory, Optional[int]] = {
    DataCategory.TEAM_PROFILE: 24 * 3600,
    DataCategory.PLAYER_PROFILE: 24 * 3600,
    DataCategory.TOURNAMENT: 6 * 3600,
    DataCategory.MEDIA: 30 * 24 * 3600,
    DataCategory.GENERAL_TEXT: None,
}

QUERY_TYPE_CATEGORIES: Dict[str, DataCategory] = {
    "team": DataCategory.TEAM_PROFILE,
    "player": DataCategory.PLAYER_PROFILE,
    "tournament": DataCategory.TOURNAMENT,
    "general": DataCategory.GENERAL_TEXT,
}


def get_ttl_for_category(category: DataCategory) -> Optional[int]:
    """
    Get TTL for a data category.

    Returns:
        Fresh TTL in seconds, or None if entries never expire
    """
    return TTL_CONFIG.get(category, TTL_CONFIG[DataCategory.GENERAL_TEXT])


def get_category_for_query_type(query_type: str) -> DataCategory:
    """Determine the data category for a query type value."""
    return QUERY_TYPE_CATEGORIES.get(query_type, DataCategory.GENERAL_TEXT)
