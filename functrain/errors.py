import contextlib
from typing import Iterator, Sequence


class FunctionTrainError(Exception):
    """Base class for all errors raised by the library."""


class DomainMismatch(FunctionTrainError):
    """Raised when two univariate functions (or cores) do not share a 
    basis family, a grid, or the bounds of their domain.
    """


class RankMismatch(FunctionTrainError):
    """Raised when a set of ranks is invalid, or when the dimensions 
    of adjoining cores do not agree.
    """


class ShapeMismatch(FunctionTrainError):
    """Raised when the shape of an input does not match the dimension 
    of a function train (or the shape of a coefficient tensor).
    """


class InvalidArguments(FunctionTrainError):
    """Raised when an option or argument takes an invalid value."""


class NumericDegeneracy(FunctionTrainError):
    """Raised when a transfer matrix contains non-finite values."""


class LinearAlgebraFailure(FunctionTrainError):
    """Raised when a dense linear algebra routine fails.

    Parameters
    ----------
    operation:
        The name of the routine that failed.
    shapes:
        The shapes of the operands passed to the routine.

    """

    def __init__(self, operation: str, shapes: Sequence):
        self.operation = operation
        self.shapes = [tuple(s) for s in shapes]
        msg = f"{operation} failed (operand shapes: {self.shapes})."
        super().__init__(msg)


class AllocationFailure(FunctionTrainError):
    """Raised when there is not enough memory to build a core.

    Parameters
    ----------
    operation:
        The name of the operation that requested the memory.
    shape:
        The shape of the tensor being built.

    """

    def __init__(self, operation: str, shape: Sequence):
        self.operation = operation
        self.shape = tuple(shape)
        msg = f"{operation}: unable to allocate tensor of shape {self.shape}."
        super().__init__(msg)


@contextlib.contextmanager
def allocation_guard(operation: str, shape: Sequence) -> Iterator[None]:
    """Converts out-of-memory errors raised while building a tensor 
    into an AllocationFailure.
    """
    try:
        yield
    except MemoryError as e:
        raise AllocationFailure(operation, shape) from e
    except RuntimeError as e:
        msg = str(e).lower()
        if "out of memory" in msg or "can't allocate" in msg:
            raise AllocationFailure(operation, shape) from e
        raise
