"""
Accounts module - portal administrators and the identity gate.

This module handles:
- Admin entity and its solo seat counter
- Resolving the session user into an administrator
"""
