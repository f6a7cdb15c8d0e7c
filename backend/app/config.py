"""
Application configuration using Pydantic settings.

Re-exports from qa_routing.config so routers and jobs import settings
from one place:
    from qa_routing.config import get_settings, Settings
"""

from qa_routing.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
