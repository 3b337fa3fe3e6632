from dataclasses import dataclass

from .verification import verify_max_rank, verify_non_negative, verify_positive


@dataclass
class DMRGOptions():
    """Options for configuring the DMRG approximation of one function 
    train by another.
    
    Parameters
    ----------
    max_sweeps:
        The number of sweeps to carry out. Each sweep consists of a 
        left-to-right pass followed by a right-to-left pass.
    epsilon:
        The (relative) tolerance used when truncating the SVD of each 
        two-core block.
    delta:
        The residual below which the approximation is reported as 
        converged. This does not stop the sweeps early.
    max_rank:
        The maximum rank of each seam of the approximation.
    verbose:
        Whether to print the residual after each sweep. Computing the 
        residual requires inner products of the full trains.

    """
        
    max_sweeps: int = 5
    epsilon: float = 1e-10
    delta: float = 1e-8
    max_rank: int|None = None
    verbose: bool = False
    
    def __post_init__(self):
        verify_positive("max_sweeps", self.max_sweeps)
        verify_non_negative("epsilon", self.epsilon)
        verify_non_negative("delta", self.delta)
        verify_max_rank(self.max_rank)
        return
