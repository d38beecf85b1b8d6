"""
Custom exceptions for the checkout workflow.
Raised inside the engine and its collaborators, caught at the engine's
public methods and turned into shopper-facing results.
"""


class WorkflowError(Exception):
    """Base exception for all workflow errors."""
    pass


class ValidationFailure(WorkflowError):
    """Raised when submitted data does not satisfy a step's requirements."""

    def __init__(self, step, reason):
        super().__init__(reason)
        self.step = step
        self.reason = reason


class SequenceViolation(WorkflowError):
    """Raised when the requested step is not the one the session allows."""

    def __init__(self, attempted, allowed):
        super().__init__(f'Step {attempted} requested while step {allowed} is allowed.')
        self.attempted = attempted
        self.allowed = allowed


class PersistenceUnavailable(WorkflowError):
    """Raised when the session store (or the order store) cannot be read or written."""
    pass


class ConfigurationMissing(WorkflowError):
    """Raised when a step has no configured, published page."""

    def __init__(self, step, detail=''):
        message = f'Step {step} page is not configured or not published.'
        if detail:
            message = f'{message} {detail}'
        super().__init__(message)
        self.step = step
