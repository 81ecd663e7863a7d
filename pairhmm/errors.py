"""Exceptions raised by the pair HMM.

Two families exist. ``InvalidInputError`` covers every violation of the
caller contract and is raised before any computation starts.
``NumericalFaultError`` signals a likelihood that cannot be a probability;
it should never be seen on valid input.
"""
from typing import Optional


class PairHMMError(Exception):
    """Base exception for all pairhmm errors.

    Args:
        message: What went wrong
        context: Additional context about the error
    """

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.formatted())

    def formatted(self) -> str:
        msg = self.message
        if self.context:
            msg += f" ({self.context})"
        return msg

    def __str__(self) -> str:
        return self.formatted()


class InvalidInputError(PairHMMError, ValueError):
    """Caller contract violation."""


class NotInitializedError(InvalidInputError):
    """The engine was used before ``initialize`` was called."""


class MissingInputError(InvalidInputError):
    """A required sequence or quality array was ``None``."""

    def __init__(self, name: str):
        super().__init__(f"{name} cannot be None")
        self.name = name


class EmptySequenceError(InvalidInputError):
    """A read or haplotype with no bases."""

    def __init__(self, name: str):
        super().__init__(f"{name} must contain at least one base")
        self.name = name


class CapacityError(InvalidInputError):
    """A sequence longer than the configured maximum, or a bad maximum."""


class LengthMismatchError(InvalidInputError):
    """A quality array whose length differs from the read length."""

    def __init__(self, name: str, read_length: int, length: int):
        super().__init__(
            f"Read bases and {name} aren't the same size",
            context=f"{read_length} vs {length}")
        self.name = name


class StartIndexError(InvalidInputError):
    """Haplotype start offset outside ``[0, len(haplotype)]``."""

    def __init__(self, hap_start_index: int, hap_length: int):
        super().__init__(
            "hap_start_index must be between 0 and the haplotype length",
            context=f"got {hap_start_index} for length {hap_length}")
        self.hap_start_index = hap_start_index


class QualityRangeError(InvalidInputError):
    """Quality byte outside the cached phred range."""


class NumericalFaultError(PairHMMError, ArithmeticError):
    """The recurrence produced something that is not a log10 probability."""

    def __init__(self, message: str, result: float):
        super().__init__(message, context=f"got {result}")
        self.result = result
