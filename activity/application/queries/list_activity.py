"""
Activity journal query.
"""
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ListActivityQuery:
    """Query for a page of the caller's team journal."""

    user_id: Optional[int]
    limit: Any = None  # Raw query parameters
    offset: Any = None
    activity_type: Optional[str] = None
