class RulesetLoadError(Exception):
    """Raised when the waste collection ruleset cannot be read or has the wrong shape."""
    def __init__(self, message, path=None):
        super().__init__(message)
        self.message = message
        self.path = path
