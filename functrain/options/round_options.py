from dataclasses import dataclass

from .verification import verify_max_rank, verify_non_negative


@dataclass
class RoundOptions():
    """Options for configuring the rounding of a function train.
    
    Parameters
    ----------
    tol:
        The relative accuracy of the rounded train (measured in the 
        L2 norm). The tolerance is split evenly (in the squared sense) 
        between the d-1 seams of the train.
    max_rank:
        The maximum rank of each seam after rounding. If this is 
        `None`, the ranks are determined by `tol` alone.
    verbose:
        Whether to print the ranks of the train after rounding.

    """

    tol: float = 1e-10
    max_rank: int|None = None
    verbose: bool = False

    def __post_init__(self):
        verify_non_negative("tol", self.tol)
        verify_max_rank(self.max_rank)
        return
