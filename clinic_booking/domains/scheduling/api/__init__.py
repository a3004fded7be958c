"""
Scheduling API Layer
"""

from .routes import router

__all__ = ["router"]
