"""
Errors raised by the grid editor.
Pure computations (coverage, compliance, hour arithmetic) never raise;
only user-input mutation paths and the save pathway do.
"""

from typing import Optional


class GridEditorError(Exception):
    pass


class ValidationError(GridEditorError, ValueError):
    """A proposed cell value is malformed or internally inconsistent."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class SaveBlockedError(GridEditorError):
    """Save refused because consecutive-working-day violations are outstanding."""

    def __init__(self, violations: list):
        self.violations = list(violations)
        employees = sorted({v.employee_id for v in self.violations})
        super().__init__(
            f"Save blocked by {len(self.violations)} consecutive working day violation(s) "
            f"for employee(s): {', '.join(employees)}"
        )


class PersistenceError(GridEditorError):
    """The persistence collaborator reported a failure. Pending changes are kept."""

    def __init__(self, cause: BaseException):
        super().__init__(str(cause) or cause.__class__.__name__)
        self.cause = cause
