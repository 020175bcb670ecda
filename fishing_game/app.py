import logging
import threading
import time
from typing import Optional

from flask import Flask
from flask_socketio import SocketIO

from .config import settings
from .utils.logging_config import setup_logging
from .database.db_manager import close_db_connection, create_stats_repository
from .database.repositories.base_repository import StatsRepository
from .game.managers.fish_catalog import FishCatalog
from .game.services.game_service import GameService
from .web.presentation import SocketIOPresentation
from .web.routes import main_bp
from .web.sockets import GameNamespace

log = logging.getLogger(__name__)

GAME_NAMESPACE = '/game'


class GameHost:
    """Drives the game's frame loop and holds the lock that serializes it with input."""

    def __init__(self, service: GameService, socketio_instance: SocketIO, lock: threading.Lock):
        self.service = service
        self.socketio = socketio_instance
        self.lock = lock
        self.running = False

    def tick_loop(self, interval: float):
        """Background task: ticks the game with the real elapsed time between wake-ups."""
        log.info(f"Starting tick loop (interval {interval}s)")
        self.running = True
        last = time.monotonic()
        while self.running:
            self.socketio.sleep(interval)
            now = time.monotonic()
            try:
                with self.lock:
                    self.service.tick(now - last)
            except Exception as e:
                log.exception(f"Error in tick loop: {e}")
            last = now
        log.info("Tick loop stopped.")

    def stop(self):
        self.running = False


def create_app(repository: Optional[StatsRepository] = None, catalog: Optional[FishCatalog] = None):
    """Builds the Flask app, its SocketIO server and the game they host."""
    app = Flask(__name__)
    app.config['SECRET_KEY'] = settings.FLASK_SECRET_KEY
    app.config['DEBUG'] = settings.FLASK_DEBUG

    socketio = SocketIO(app, cors_allowed_origins="*", async_mode=None) # Start with default sync mode

    # --- Dependency Injection Setup ---
    lock = threading.Lock()
    presentation = SocketIOPresentation(socketio, GAME_NAMESPACE)
    service = GameService(
        catalog=catalog or FishCatalog(),
        presentation=presentation,
        repository=repository if repository is not None else create_stats_repository(),
    )
    app.extensions['fishing_game'] = GameHost(service, socketio, lock)

    # --- Register Blueprints and SocketIO Namespaces ---
    app.register_blueprint(main_bp)
    socketio.on_namespace(GameNamespace(GAME_NAMESPACE, service, lock))
    log.info("Registered main blueprint and GameNamespace.")
    return app, socketio


def run_app():
    """Runs the Flask-SocketIO development server with the game loop."""
    setup_logging()
    app, socketio = create_app()
    host = app.extensions['fishing_game']
    socketio.start_background_task(host.tick_loop, settings.TICK_INTERVAL)
    log.info(f"Starting Flask-SocketIO server (Debug: {settings.FLASK_DEBUG})...")
    try:
        socketio.run(app, host='0.0.0.0', port=5000, debug=settings.FLASK_DEBUG,
                     use_reloader=False, allow_unsafe_werkzeug=True)
    finally:
        host.stop()
        close_db_connection()


if __name__ == '__main__':
    run_app()
