"""User model for citizens, municipal workers and administrators."""

from datetime import datetime
from civic_api import db
from civic_api.constants import ROLE_CITIZEN, ROLE_WORKER, WORKER_AVAILABLE
from civic_api.utils.geo import Coordinate


class User(db.Model):
    """User profile. Credentials live with the external identity provider."""
    
    __tablename__ = 'users'
    
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    full_name = db.Column(db.String(120), nullable=True)
    phone = db.Column(db.String(20), nullable=True)
    role = db.Column(db.String(20), default=ROLE_CITIZEN, nullable=False, index=True)  # 'citizen', 'worker', 'admin'
    
    # Worker profile
    department = db.Column(db.String(120), nullable=True)
    speciality = db.Column(db.String(120), nullable=True)
    status = db.Column(db.String(20), default=WORKER_AVAILABLE, nullable=False)  # 'available', 'busy'
    
    # Last reported device location (workers)
    current_latitude = db.Column(db.Float, nullable=True)
    current_longitude = db.Column(db.Float, nullable=True)
    location_updated_at = db.Column(db.DateTime, nullable=True)
    
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    # Relationships
    reported_issues = db.relationship('Issue', backref='reporter', lazy=True, foreign_keys='Issue.reporter_id')
    assigned_issues = db.relationship('Issue', backref='assigned_to', lazy=True, foreign_keys='Issue.assigned_to_id')
    
    @property
    def is_worker(self):
        return self.role == ROLE_WORKER
    
    def current_coordinate(self):
        """Last known location, or None if the worker never reported one."""
        if self.current_latitude is None or self.current_longitude is None:
            return None
        return Coordinate(self.current_latitude, self.current_longitude)
    
    def update_location(self, coordinate):
        self.current_latitude = coordinate.latitude
        self.current_longitude = coordinate.longitude
        self.location_updated_at = datetime.utcnow()
    
    def to_dict(self):
        """Convert user to dictionary."""
        return {
            'id': self.id,
            'email': self.email,
            'full_name': self.full_name,
            'phone': self.phone,
            'role': self.role,
            'department': self.department,
            'speciality': self.speciality,
            'status': self.status,
            'current_latitude': self.current_latitude,
            'current_longitude': self.current_longitude,
            'location_updated_at': self.location_updated_at.isoformat() if self.location_updated_at else None,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat()
        }
    
    def __repr__(self):
        return f'<User {self.email} ({self.role})>'
