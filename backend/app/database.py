"""
Database session access for the API.

Re-exports from qa_routing.db. Initialization happens in the application
startup (main.py), NOT at import time, so configuration is loaded first.
"""

from qa_routing.db import db, get_db

__all__ = ["db", "get_db"]
