# Custom exceptions for the game logic layer

class GameException(Exception):
    """Base class for game-related exceptions."""
    pass

class SpeciesNotFoundException(GameException):
    """Raised when a hooked species cannot be found in the catalog."""
    def __init__(self, species_id: int):
        self.species_id = species_id
        super().__init__(f"Fish species with ID '{species_id}' not found.")

class StatIndexOutOfRangeException(GameException):
    """Raised when a per-species stats slot is addressed outside the table."""
    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Stats index {index} out of range for table of size {size}.")

class InvalidActionException(GameException):
    """Raised when a player attempts an action the current state does not allow."""
    pass

class CatchAbandonedException(GameException):
    """Raised when a reeled-in fish cannot be credited; casting is already allowed again."""
    pass

class StatsPersistenceException(GameException):
    """Raised when the stats record cannot be read from or written to storage."""
    pass
