"""
API v1 package.

Contains versioned API routes for the profile e-mail validation API.
"""

from profile_email.api.v1.routes import router

__all__ = ["router"]
