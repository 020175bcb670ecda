import logging
import threading
from flask import request
from flask_socketio import Namespace, emit

from ..game.services.game_service import GameService
from ..game.exceptions import CatchAbandonedException, GameException, InvalidActionException

log = logging.getLogger(__name__)

# Define the namespace for game-related events
class GameNamespace(Namespace):
    """Relays player input to the GameService over Socket.IO."""

    def __init__(self, namespace: str, game_service: GameService, lock: threading.Lock):
        """
        Initialize the namespace with dependency injection.

        Args:
            namespace: The Socket.IO namespace (e.g., '/game').
            game_service: The injected GameService instance.
            lock: Shared with the tick loop so input and ticks never interleave.
        """
        super().__init__(namespace)
        self.game_service = game_service
        self.lock = lock
        log.info(f"GameNamespace initialized for namespace '{namespace}'")

    def _dispatch(self, action: str, handler, *args):
        """Runs one input under the game lock and reports failures to the sender."""
        sid = request.sid
        log.debug(f"Received {action} from SID {sid}")
        try:
            with self.lock:
                return handler(*args)
        except InvalidActionException as e:
            log.warning(f"Invalid {action} attempt by SID {sid}: {e}")
            emit('action_rejected', {'action': action, 'reason': str(e)}, to=sid, namespace=self.namespace)
        except CatchAbandonedException as e:
            log.error(f"Catch abandoned during {action} for SID {sid}: {e}")
            emit('catch_abandoned', {'reason': str(e)}, to=sid, namespace=self.namespace)
        except GameException as e:
            log.error(f"Game error during {action} for SID {sid}: {e}")
            emit('error', {'message': str(e)}, to=sid, namespace=self.namespace)
        except Exception as e:
            log.exception(f"Unexpected error during {action} for SID {sid}: {e}")
            emit('error', {'message': 'An internal server error occurred.'}, to=sid, namespace=self.namespace)
        return None

    # --- Connection / Disconnection Events ---

    def on_connect(self, auth=None):
        """Sends the current game state to the new client."""
        sid = request.sid
        log.info(f"Client connected to namespace '{self.namespace}': {sid}")
        with self.lock:
            state = self.game_service.get_state()
        emit('game_state', state, to=sid, namespace=self.namespace)

    def on_disconnect(self, reason=None):
        log.info(f"Client disconnected from namespace '{self.namespace}': {request.sid}")

    # --- Fishing ---

    def on_cast(self, data=None):
        data = data or {}
        try:
            strength = float(data.get('strength', 0.0))
        except (TypeError, ValueError):
            emit('action_rejected', {'action': 'cast', 'reason': 'Invalid cast data format.'},
                 to=request.sid, namespace=self.namespace)
            return
        self._dispatch('cast', self.game_service.handle_cast, strength)

    def on_reel(self, data=None):
        # A successful catch reaches clients through the presentation bridge,
        # an abandoned one as 'catch_abandoned'
        self._dispatch('reel', self.game_service.handle_reel)

    def on_retract(self, data=None):
        self._dispatch('retract', self.game_service.handle_retract)

    def on_cancel_cast(self, data=None):
        self._dispatch('cancel_cast', self.game_service.handle_cancel)

    def on_dismiss_catch(self, data=None):
        self._dispatch('dismiss_catch', self.game_service.dismiss_catch)

    # --- Panels, shop and progression ---

    def on_open_shop(self, data=None):
        self._dispatch('open_shop', self.game_service.open_shop)

    def on_close_panel(self, data=None):
        self._dispatch('close_panel', self.game_service.close_panel)

    def on_purchase_upgrade(self, data=None):
        kind = (data or {}).get('kind', '')
        self._dispatch('purchase_upgrade', self.game_service.purchase_upgrade, kind)

    def on_next_day(self, data=None):
        self._dispatch('next_day', self.game_service.start_next_day)

    def on_continue_game(self, data=None):
        self._dispatch('continue_game', self.game_service.continue_game)

    def on_get_state(self, data=None):
        with self.lock:
            state = self.game_service.get_state()
        emit('game_state', state, to=request.sid, namespace=self.namespace)
