#!/usr/bin/env python
"""Database initialization script for the civic issue backend.

Creates all database tables based on the SQLAlchemy models.
Run this once before starting the application for the first time.

Usage:
    python init_db.py
"""

import os
import sys
from civic_api import create_app, db


def init_database():
    """Initialize the database by creating all tables."""
    config_name = os.getenv('FLASK_ENV', 'development')
    app = create_app(config_name)
    
    print(f"\n{'='*60}")
    print(f"Database Initialization for {config_name.upper()} Environment")
    print(f"{'='*60}\n")
    
    with app.app_context():
        try:
            print(f"Database URI: {app.config['SQLALCHEMY_DATABASE_URI']}\n")
            db.create_all()
            
            tables_info = [
                ("users", "Citizens, workers and administrators"),
                ("issues", "Reported issues and worker tasks"),
                ("task_messages", "Task chat messages"),
            ]
            
            print("Created tables:")
            for table_name, description in tables_info:
                print(f"  - {table_name:<25} {description}")
            
            print("\nNext steps:")
            print("  1. Seed demo data: python scripts/seed_demo_tasks.py")
            print("  2. Start the server: python wsgi.py\n")
            return True
        except Exception as e:
            print(f"Error creating database: {type(e).__name__}: {e}\n")
            return False


if __name__ == '__main__':
    success = init_database()
    sys.exit(0 if success else 1)
