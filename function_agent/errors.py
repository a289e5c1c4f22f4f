"""
function_agent/errors.py

Error taxonomy for the function agent node.
Failures raised by the agent runnable itself are not wrapped here; they
propagate to the caller unchanged.
"""

from typing import Sequence


class FunctionAgentError(Exception):
    """Base class for errors raised by the function agent node."""


class MissingVariablesError(FunctionAgentError):
    """
    Raised when two or more prompt variables are left unbound.

    Only one variable may be filled from the live user input, so the
    request is refused instead of guessing which slot the input belongs to.
    """

    def __init__(self, missing: Sequence[str]):
        self.missing = list(missing)
        super().__init__(
            "Please provide Prompt Values for: " + ", ".join(self.missing)
        )


class ConfigurationError(FunctionAgentError):
    """The node configuration is incomplete or invalid."""
