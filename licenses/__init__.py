"""
Licenses module - seat assignment and purchase management.

This module handles:
- License entity and domain logic
- Adding, importing, removing and re-addressing licenses
- Activation and verification for the consumer application
- Seat purchases and provider delivery statuses
"""
