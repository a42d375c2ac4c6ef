"""Issue model: a citizen report that becomes a worker task once assigned."""

from datetime import datetime
from civic_api import db
from civic_api.constants import DEFAULT_PRIORITY, STATUS_PENDING
from civic_api.utils.geo import Coordinate


class Issue(db.Model):
    """Civic issue reported by a citizen and resolved by a municipal worker."""
    
    __tablename__ = 'issues'
    
    id = db.Column(db.Integer, primary_key=True)
    issue_number = db.Column(db.String(20), unique=True, nullable=False, index=True)  # 'CIV-2025-0042'
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(50), nullable=False, index=True)
    priority = db.Column(db.String(20), default=DEFAULT_PRIORITY, nullable=False)  # 'low', 'medium', 'high', 'urgent'
    status = db.Column(db.String(20), default=STATUS_PENDING, nullable=False, index=True)  # 'pending', 'in_progress', 'completed'
    
    # Location
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    address = db.Column(db.String(255), nullable=True)
    gps_accuracy = db.Column(db.Float, nullable=True)  # metres
    photos = db.Column(db.JSON, nullable=True)  # Array of image URLs
    
    reporter_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    assigned_to_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    assigned_at = db.Column(db.DateTime, nullable=True)
    
    # Completion evidence
    completion_photo = db.Column(db.String(500), nullable=True)
    completion_notes = db.Column(db.Text, nullable=True)
    completed_at = db.Column(db.DateTime, nullable=True)
    
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    messages = db.relationship('TaskMessage', backref='issue', lazy='dynamic',
                               order_by='TaskMessage.id', cascade='all, delete-orphan')
    
    def coordinate(self):
        return Coordinate(self.latitude, self.longitude)
    
    def to_dict(self):
        """Convert issue to dictionary."""
        return {
            'id': self.id,
            'issue_number': self.issue_number,
            'title': self.title,
            'description': self.description,
            'category': self.category,
            'priority': self.priority,
            'status': self.status,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'address': self.address,
            'gps_accuracy': self.gps_accuracy,
            'photos': self.photos or [],
            'reporter_id': self.reporter_id,
            'reported_by': self.reporter.full_name if self.reporter else None,
            'assigned_to_id': self.assigned_to_id,
            'assigned_to': self.assigned_to.full_name if self.assigned_to else None,
            'assigned_at': self.assigned_at.isoformat() if self.assigned_at else None,
            'completion_photo': self.completion_photo,
            'completion_notes': self.completion_notes,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat()
        }
    
    def __repr__(self):
        return f'<Issue {self.issue_number}: {self.title}>'
