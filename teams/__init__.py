"""
Teams module - teams, memberships and invitations.

This module handles:
- Team, TeamMember and TeamInvitation entities
- The permission policy shared by license and team operations
- Invitation lifecycle (invite, preview, accept, revoke)
"""
