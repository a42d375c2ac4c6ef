"""Chat messages exchanged on an assigned task."""

from datetime import datetime
from civic_api import db


def utc_isoformat(dt):
    """Convert datetime to ISO format with Z suffix to indicate UTC."""
    if dt is None:
        return None
    return dt.isoformat() + 'Z'


class TaskMessage(db.Model):
    """A single message in a task's chat thread."""
    
    __tablename__ = 'task_messages'
    
    id = db.Column(db.Integer, primary_key=True)
    issue_id = db.Column(db.Integer, db.ForeignKey('issues.id'), nullable=False, index=True)
    sender_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)  # None for system messages
    sender_role = db.Column(db.String(20), nullable=False)  # 'worker', 'admin', 'system'
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    
    sender = db.relationship('User', backref='task_messages')
    
    def to_dict(self):
        """Convert message to dictionary."""
        return {
            'id': self.id,
            'issue_id': self.issue_id,
            'sender_id': self.sender_id,
            'sender_role': self.sender_role,
            'sender_name': self.sender.full_name if self.sender else 'System',
            'content': self.content,
            'created_at': utc_isoformat(self.created_at)
        }
    
    def __repr__(self):
        return f'<TaskMessage {self.id} on Issue {self.issue_id}>'
