import logging
from typing import Optional

from flask_socketio import SocketIO

from ..core.models import CatchResult

log = logging.getLogger(__name__)


class SocketIOPresentation:
    """Presentation bridge that forwards game notifications as Socket.IO events."""

    def __init__(self, socketio_instance: SocketIO, namespace: str = '/game', room: Optional[str] = None):
        self.socketio = socketio_instance
        self.namespace = namespace
        self.room = room

    def _emit(self, event: str, data: dict):
        self.socketio.emit(event, data, to=self.room, namespace=self.namespace)

    def show_bite_alert(self, visible: bool) -> None:
        self._emit('bite_alert', {'visible': visible})

    def show_catch_result(self, result: CatchResult) -> None:
        self._emit('catch_result', result.model_dump())

    def update_hud(self, day: int, time_string: str, current_debt: int, points: int, prestige_level: int) -> None:
        self._emit('hud_update', {
            'day': day,
            'time': time_string,
            'debt': current_debt,
            'points': points,
            'prestige': prestige_level,
        })

    def trigger_scene_transition(self, name: str) -> None:
        log.info(f"Requesting scene transition to {name}")
        self._emit('scene_transition', {'scene': name})
