"""
Question Router Core Library.

This package provides the routing core for the question marketplace:
database management, models, repositories, the assignment engine and
logging.

Usage:
    # Database
    from qa_routing.db import db, get_db
    from qa_routing.models import User, Question
    from qa_routing.repositories import QuestionRepository, UserRepository

    # Routing
    from qa_routing.routing import AssignmentEngine, process_pending, find_stale

    # Config
    from qa_routing.config import get_settings, Settings

    # Logging
    from qa_routing.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"

# Lazy imports to avoid circular dependencies
# Users should import directly from submodules:
#   from qa_routing.db import db
#   from qa_routing.config import get_settings
#   from qa_routing.logging import get_logger
