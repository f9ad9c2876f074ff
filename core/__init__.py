"""
Core module shared by every LicensePortal app.

This module contains:
- Value objects, scopes and the domain exception families
- The in-process event bus and its audit and metrics subscribers
- Service-key, observability and metrics middleware
- Health, readiness and Prometheus endpoints
"""
