import logging
import os
from civic_api import CONFIG_NAMES, create_app, socketio

logger = logging.getLogger(__name__)

config_name = os.getenv('FLASK_ENV', 'development')
if config_name not in CONFIG_NAMES:
    raise SystemExit(f"FLASK_ENV must be one of: {', '.join(CONFIG_NAMES)} (got '{config_name}')")

app = create_app(config_name)

if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    
    # Never run debug mode in production
    debug_mode = config_name != 'production' and os.getenv('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes')
    
    logger.info(f'Starting civic issue API ({config_name}) on port {port}')
    
    # Socket.IO carries the live task distances, so run through socketio
    socketio.run(app, host='0.0.0.0', port=port, debug=debug_mode)
