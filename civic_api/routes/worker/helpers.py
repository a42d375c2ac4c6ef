"""Shared helper functions for worker routes."""

from flask import request
from civic_api import db
from civic_api.models import Issue
from civic_api.utils.geo import parse_coordinate


def request_origin(worker):
    """Worker position for this request.

    Explicit latitude/longitude in the query string win over the worker's
    last stored location. Returns None when neither is available; raises
    InvalidCoordinateError for malformed values.
    """
    latitude, longitude = request.args.get('latitude'), request.args.get('longitude')
    if latitude is not None or longitude is not None:
        return parse_coordinate(latitude, longitude)
    return worker.current_coordinate()


def get_worker_task(worker, task_id):
    """Return (task, error_message, status_code) for a task assigned to ``worker``."""
    task = db.session.get(Issue, task_id)
    if not task:
        return None, 'Task not found', 404
    if task.assigned_to_id != worker.id:
        return None, 'This task is not assigned to you', 403
    return task, None, None
