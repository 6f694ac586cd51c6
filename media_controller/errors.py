"""
Errors reported by the playback controller.

Every error is handled where it happens: the controller prints it and turns it
into a failed `DispatchResult`. None of them stop the controller.
"""


class ControllerError(Exception):
    code = "ControllerError"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class DecodeSkip(ControllerError):
    """Unknown or empty action name, the message is dropped."""
    code = "DecodeSkip"


class NoTarget(ControllerError):
    """Navigation requested while no episode is loaded."""
    code = "NoTarget"


class OutOfRange(ControllerError):
    """Navigation past the first or last episode of the season."""
    code = "OutOfRange"


class NotFound(ControllerError):
    """Season directory missing or no file for the episode id."""
    code = "NotFound"


class SpawnError(ControllerError):
    """The player process could not be started."""
    code = "SpawnError"


class WriteError(ControllerError):
    """The command channel to the player is unavailable or broken."""
    code = "WriteError"
