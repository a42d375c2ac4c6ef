"""Worker routes package.

This package organizes worker-facing routes into logical submodules:
- tasks: Assigned task list with live distance/ETA, navigation, location updates
- workflow: Task lifecycle (start, complete)
- helpers: Shared utilities (origin resolution, task lookup, tracker access)
"""

from flask import Blueprint

worker_bp = Blueprint('worker', __name__)

# Import and register all route modules
from civic_api.routes.worker import tasks  # noqa: E402,F401
from civic_api.routes.worker import workflow  # noqa: E402,F401
