"""
Repository exceptions.
"""


class RepositoryError(Exception):
    """Base exception for all repository errors."""
    pass


class PlanRepositoryError(RepositoryError):
    """Exception raised by PlanRepository operations."""
    pass


class PlanDataMissingError(PlanRepositoryError):
    """Raised when a plan document exists but has no readable body."""

    def __init__(self, plan_id: str):
        self.plan_id = plan_id
        super().__init__(f"Plan {plan_id} has no data")

