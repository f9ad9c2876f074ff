"""
Models of the activity app; defined in the infrastructure layer.
"""
from activity.infrastructure.models import ActivityLog  # noqa: F401
