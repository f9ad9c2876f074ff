"""
Models of the accounts app; defined in the infrastructure layer.
"""
from accounts.infrastructure.models import Admin  # noqa: F401
