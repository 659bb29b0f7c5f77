"""Error taxonomy for the VMTB core.

Validation problems are never raised; they are returned as
``ValidationResult`` values by the validation gates.
"""


class VmtbError(Exception):
    """Base class for VMTB core errors."""


class InvariantViolation(VmtbError, ValueError):
    """Programmer error: a call that would leave a document or session inconsistent."""


class CollaboratorError(VmtbError, RuntimeError):
    """An external collaborator (registry, store) failed. Retriable by the caller."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
