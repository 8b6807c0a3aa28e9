"""
Engine Exceptions
=================
Invalid inputs are rejected before any computation starts. Everything
else (unreachable targets, divergence, safeguard exhaustion) is reported
through return values, never raised.
"""


class ConfigurationError(ValueError):
    """A parameter set that does not describe a well-posed run."""

    def __init__(self, field: str, value, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid '{field}' = {value!r}: {reason}")
