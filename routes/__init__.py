"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.guest_blog_sites import router as guest_blog_sites_router

__all__ = [
    "guest_blog_sites_router",
]
