"""Error taxonomy for session actions.

Every failure here is a recoverable validation error. Routes turn them
into the ``{'success': False, 'error': ..., 'code': ...}`` envelope.
"""


class GameError(Exception):
    code = 'game_error'
    status_code = 400

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {'success': False, 'error': self.message, 'code': self.code}


class InvalidInput(GameError):
    code = 'invalid_input'
    status_code = 400


class StateConflict(GameError):
    code = 'state_conflict'
    status_code = 409


class CapacityError(GameError):
    code = 'capacity'
    status_code = 400


class NotFound(GameError):
    code = 'not_found'
    status_code = 404


class Unauthorized(GameError):
    code = 'unauthorized'
    status_code = 403


class AlreadyDone(GameError):
    code = 'already_done'
    status_code = 409


class AlreadyVoted(AlreadyDone):
    """A repeated vote. Callers treat this as a no-op, not a failure."""
    code = 'already_voted'
    status_code = 200


class PolicyBlocked(GameError):
    code = 'policy_blocked'
    status_code = 403
