"""Issue helpers shared by report, admin, worker and chat routes."""

import random
from datetime import datetime

from civic_api import db
from civic_api.constants import ROLE_ADMIN, STATUS_COMPLETED
from civic_api.models import Issue, TaskMessage

ISSUE_NUMBER_ATTEMPTS = 10


def generate_issue_number(now=None):
    """Generate a unique issue number like 'CIV-2025-0042'."""
    year = (now or datetime.utcnow()).year
    for _ in range(ISSUE_NUMBER_ATTEMPTS):
        candidate = f'CIV-{year}-{random.randint(0, 9999):04d}'
        if not Issue.query.filter_by(issue_number=candidate).first():
            return candidate
    # Four digits exhausted for the year; widen rather than fail
    return f'CIV-{year}-{random.randint(0, 99999999):08d}'


def post_system_message(issue, content):
    """Append a system message to the task chat (caller commits)."""
    message = TaskMessage(issue_id=issue.id, sender_id=None, sender_role='system', content=content)
    db.session.add(message)
    return message


def can_view_issue(user, issue):
    return user.role == ROLE_ADMIN or user.id in (issue.reporter_id, issue.assigned_to_id)


def can_chat_on_issue(user, issue):
    return user.role == ROLE_ADMIN or user.id == issue.assigned_to_id


def assigned_tasks(worker_id, include_completed=True):
    """Issues assigned to a worker, newest first."""
    query = Issue.query.filter(Issue.assigned_to_id == worker_id)
    if not include_completed:
        query = query.filter(Issue.status != STATUS_COMPLETED)
    return query.order_by(Issue.created_at.desc(), Issue.id.desc()).all()
