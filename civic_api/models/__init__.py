"""Database models for the civic issue backend."""

from .user import User
from .issue import Issue
from .task_message import TaskMessage

__all__ = ['User', 'Issue', 'TaskMessage']
