"""School operations engine: procurement approvals and teacher payroll."""

__version__ = "0.1.0"
