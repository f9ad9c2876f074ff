"""
Activity journal module.

Append-only, team-scoped record of what admins did.
"""
