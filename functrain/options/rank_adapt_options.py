from dataclasses import dataclass
from typing import List

from ..errors import InvalidArguments
from .verification import verify_non_negative, verify_positive


@dataclass
class RankAdaptOptions():
    """Options for configuring the adaptation of the ranks of a 
    function train (e.g., between the steps of an optimiser used to 
    fit the train to data).
    
    Parameters
    ----------
    ranks:
        The maximum rank of each seam, including the boundary ranks 
        (which must be equal to 1). If this is `None`, every seam is 
        bounded by `max_rank`.
    max_rank:
        The maximum rank used when `ranks` is not specified.
    kick_rank:
        The amount by which the rank of a saturated seam is increased.
    round_tol:
        The tolerance used when rounding the train before increasing 
        the ranks.
    adapt:
        Whether to adapt the ranks at all.
    noise:
        The standard deviation of the random entries used to pad the 
        cores when the ranks are increased.
    verbose:
        Whether to print the ranks of the train after adaptation.

    """

    ranks: List[int]|None = None
    max_rank: int = 30
    kick_rank: int = 2
    round_tol: float = 1e-10
    adapt: bool = True
    noise: float = 1e-8
    verbose: bool = False

    def __post_init__(self):
        verify_positive("max_rank", self.max_rank)
        verify_positive("kick_rank", self.kick_rank)
        verify_non_negative("round_tol", self.round_tol)
        verify_non_negative("noise", self.noise)
        if self.ranks is not None:
            self.ranks = [int(r) for r in self.ranks]
            if self.ranks[0] != 1 or self.ranks[-1] != 1:
                msg = "Boundary ranks must be equal to 1."
                raise InvalidArguments(msg)
            if min(self.ranks) < 1:
                msg = "All ranks must be positive."
                raise InvalidArguments(msg)
        return

    def rank_schedule(self, dim: int) -> List[int]:
        """Returns the maximum rank of each seam of a train of a given 
        dimension.
        """
        if self.ranks is None:
            return [1] + [self.max_rank] * (dim-1) + [1]
        if len(self.ranks) != dim + 1:
            msg = (f"Rank schedule has {len(self.ranks)} entries " 
                   + f"(expected {dim+1}).")
            raise InvalidArguments(msg)
        return self.ranks
