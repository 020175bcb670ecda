import logging
from flask import Blueprint, current_app

log = logging.getLogger(__name__)

# The GameService is stored on app.extensions by create_app()
main_bp = Blueprint('main', __name__)

@main_bp.route('/health')
def health_check():
    """Basic health check endpoint."""
    log.debug("Health check requested.")
    return {"status": "ok"}, 200

@main_bp.route('/state')
def game_state():
    """Current economy, day and session snapshot."""
    host = current_app.extensions['fishing_game']
    with host.lock:
        return host.service.get_state(), 200
