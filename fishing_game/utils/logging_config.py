import logging
import sys
from ..config import settings

def setup_logging():
    """Configures application logging."""
    log_level = logging.DEBUG if (settings.LOG_DEBUG or settings.FLASK_DEBUG) else logging.INFO
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stdout) # Log to console
        ]
    )

    # Quieten noisy libraries
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("engineio").setLevel(logging.WARNING)
    logging.getLogger("socketio").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)

    log = logging.getLogger(__name__)
    log.info(f"Logging configured with level: {logging.getLevelName(log_level)}")
