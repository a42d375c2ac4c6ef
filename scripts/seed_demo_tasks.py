#!/usr/bin/env python3
"""Seed demo users and Kolkata Sector V tasks for local navigation testing."""

import sys
import os

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from datetime import datetime

from civic_api import create_app, db
from civic_api.constants import ROLE_ADMIN, ROLE_CITIZEN, ROLE_WORKER
from civic_api.models import Issue, User
from civic_api.services.issues import generate_issue_number

# Default worker position: Salt Lake Sector V, Kolkata
DEMO_WORKER_LOCATION = (22.5743, 88.4348)

DEMO_USERS = [
    {'email': 'citizen@demo.local', 'full_name': 'Demo Citizen', 'role': ROLE_CITIZEN},
    {'email': 'admin@demo.local', 'full_name': 'Kolkata Municipal Admin', 'role': ROLE_ADMIN},
    {'email': 'worker@demo.local', 'full_name': 'Demo Worker', 'role': ROLE_WORKER,
     'department': 'Public Works', 'speciality': 'Electrical'},
]

DEMO_TASKS = [
    {
        'title': 'Fix Street Light near DLF IT Park',
        'address': 'Action Area II, Salt Lake Sector V, Kolkata',
        'latitude': 22.5760,
        'longitude': 88.4348,
        'description': 'Street light pole #45 on Action Area II is not working.',
        'category': 'street-lighting',
        'priority': 'high',
    },
    {
        'title': 'Water Pipeline Leakage near ISKCON',
        'address': 'Near ISKCON Temple, Sector V, Kolkata',
        'latitude': 22.5720,
        'longitude': 88.4370,
        'description': 'Major water leakage near ISKCON Temple causing waterlogging.',
        'category': 'water-supply',
        'priority': 'urgent',
    },
    {
        'title': 'Garbage Collection Issue at TCS Campus',
        'address': 'TCS Campus, Action Area III, Sector V',
        'latitude': 22.5695,
        'longitude': 88.4280,
        'description': 'Garbage has not been collected for 3 days near TCS office complex.',
        'category': 'waste-management',
        'priority': 'medium',
    },
]


def _get_or_create_user(data):
    user = User.query.filter_by(email=data['email']).first()
    if user:
        print(f"  Exists: {data['email']}")
        return user
    user = User(**data)
    db.session.add(user)
    db.session.flush()
    print(f"  Added: {data['email']} ({data['role']})")
    return user


def seed_demo_tasks():
    """Create demo users and assign the demo tasks to the demo worker."""
    app = create_app(os.getenv('FLASK_ENV', 'development'))
    
    with app.app_context():
        print("Seeding users...")
        users = {data['role']: _get_or_create_user(data) for data in DEMO_USERS}
        citizen, worker = users[ROLE_CITIZEN], users[ROLE_WORKER]
        
        worker.current_latitude, worker.current_longitude = DEMO_WORKER_LOCATION
        worker.location_updated_at = datetime.utcnow()
        
        print("\nSeeding tasks...")
        added_count = 0
        for task_data in DEMO_TASKS:
            if Issue.query.filter_by(title=task_data['title']).first():
                print(f"  Exists: {task_data['title']}")
                continue
            issue = Issue(
                issue_number=generate_issue_number(),
                reporter_id=citizen.id,
                assigned_to_id=worker.id,
                assigned_at=datetime.utcnow(),
                **task_data
            )
            db.session.add(issue)
            db.session.flush()
            added_count += 1
            print(f"  Added: {issue.issue_number} {task_data['title']}")
        
        db.session.commit()
        
        print("\n" + "="*50)
        print(f"Added {added_count} demo tasks")
        print(f"Total issues in database: {Issue.query.count()}")
        print("="*50)


if __name__ == '__main__':
    seed_demo_tasks()
