"""Routes package for the civic issue backend."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .reports import reports_bp
    from .admin import admin_bp
    from .worker import worker_bp
    from .messages import messages_bp
    
    app.register_blueprint(reports_bp, url_prefix='/api/reports')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(worker_bp, url_prefix='/api/worker')
    app.register_blueprint(messages_bp, url_prefix='/api/tasks')
