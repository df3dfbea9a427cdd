class BlendFramesError(Exception):
    """Base class for every failure that aborts a run.

    ``stage`` names the step that failed and ``path`` the file involved,
    when there is one.
    """

    stage = "run"

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path

    def __str__(self):
        message = super().__str__()
        if self.path is not None:
            return f"{message}: {self.path}"
        return message


class DecodeError(BlendFramesError):
    stage = "load"


class IncompatibleImageError(BlendFramesError):
    stage = "normalize"


class InsufficientInputError(BlendFramesError):
    stage = "input"


class WriteError(BlendFramesError):
    stage = "write"
