class EvoSelectError(Exception):
    """Base for all evoselect exceptions."""

    pass


# High-level families
class ContractViolation(EvoSelectError, ValueError):
    """A caller broke a documented precondition."""

    pass


class SelectionError(EvoSelectError):
    """Selection failures that depend on runtime state."""

    pass


# Contract subtypes
class ProbabilityError(ContractViolation):
    """Raised when a probability falls outside [0, 1]."""

    pass


# Selection subtypes
class EmptyWeightError(SelectionError):
    """Raised when sampling a weighted index whose total weight is zero."""

    pass
