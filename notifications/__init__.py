"""
Notifications module.

Activation and invitation emails, batch dispatch and delivery status lookups.
"""
