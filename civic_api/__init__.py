from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_socketio import SocketIO
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()
socketio = SocketIO()

logger = logging.getLogger(__name__)


CONFIG_NAMES = ('development', 'testing', 'production')


def _database_uri(config_name):
    if config_name == 'testing':
        return 'sqlite:///:memory:'
    return os.getenv(
        'DATABASE_URL',
        'sqlite:///civic.db'  # Using SQLite for local development
    )


def create_app(config_name='development'):
    if config_name not in CONFIG_NAMES:
        raise ValueError(f"Unknown config '{config_name}'. Must be one of: {', '.join(CONFIG_NAMES)}")
    if config_name == 'production' and not os.getenv('JWT_SECRET_KEY'):
        raise RuntimeError('JWT_SECRET_KEY must be set in production')
    
    app = Flask(__name__)
    
    # Config
    app.config['SQLALCHEMY_DATABASE_URI'] = _database_uri(config_name)
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['TESTING'] = config_name == 'testing'
    
    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    
    # Initialize extensions
    db.init_app(app)
    CORS(app, origins=os.getenv('CORS_ORIGINS', '*').split(','))
    socketio.init_app(app, cors_allowed_origins='*')
    
    # One location channel per worker, owned by this app instance
    from civic_api.services.tracking import TrackerRegistry
    app.extensions['location_trackers'] = TrackerRegistry()
    
    # Import models so create_all sees every table
    from civic_api import models  # noqa: F401
    
    # Create tables with error handling
    with app.app_context():
        try:
            db.create_all()
        except Exception as e:
            logger.warning(f"Could not create database tables: {e}")
    
    # Register routes
    from civic_api.routes import register_routes
    register_routes(app)
    
    from civic_api.socket_events import register_socket_events
    register_socket_events(socketio)
    
    from civic_api.utils.geo import InvalidCoordinateError, InvalidDistanceError
    
    @app.errorhandler(InvalidCoordinateError)
    @app.errorhandler(InvalidDistanceError)
    def handle_invalid_location(e):
        return jsonify({'error': str(e)}), 400
    
    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200
    
    @app.route('/api/health', methods=['GET'])
    def api_health():
        return {'status': 'ok'}, 200
    
    return app
