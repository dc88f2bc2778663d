"""
API v1 package.

Contains versioned API routes for user registration and activation.
"""

from chat_auth.api.v1.routes import router

__all__ = ["router"]
