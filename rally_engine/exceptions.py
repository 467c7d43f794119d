class RallyError(Exception):
    """A rally was refused; ``reason`` says why and where."""

    def __init__(self, reason):
        super().__init__(reason.error_msg)
        self.reason = reason


class MatchFinishedError(Exception):
    pass
