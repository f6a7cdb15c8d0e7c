"""
Backend services for Question Router.
"""

from . import question_service

__all__ = ["question_service"]
