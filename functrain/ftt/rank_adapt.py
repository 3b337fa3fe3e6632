from typing import TYPE_CHECKING, List, Tuple

import torch
from torch import Tensor

from .core import Core
from .rounding import round
from ..errors import RankMismatch, allocation_guard
from ..options import RankAdaptOptions, RoundOptions
from ..tools import adapt_info

if TYPE_CHECKING:
    from .function_train import FunctionTrain


def pad_ranks(
    train: "FunctionTrain", 
    ranks: List[int]|Tensor, 
    noise: float = 0.0,
    generator: torch.Generator|None = None
) -> "FunctionTrain":
    """Increases the ranks of a function train by padding its cores.

    The existing coefficients of each core occupy the top-left block 
    of the padded core, and the block coupling the existing rows to the 
    new columns is set to zero. The remaining entries are normally 
    distributed with standard deviation `noise`. The new states can 
    never be reached from the boundary, so the function represented by 
    the train is unchanged, but its gradient with respect to the zero 
    blocks is generally nonzero.

    Parameters
    ----------
    train:
        The function train.
    ranks:
        The new ranks (including the boundary ranks, which must be 
        equal to 1). Each rank must be at least as large as the 
        current rank.
    noise:
        The standard deviation of the padding.
    generator:
        The random number generator used to generate the padding.

    Returns
    -------
    padded:
        The padded function train.

    """

    ranks = [int(r) for r in ranks]
    ranks_old = [int(r) for r in train.ranks]

    if len(ranks) != train.dim + 1 or ranks[0] != 1 or ranks[-1] != 1:
        msg = f"Invalid ranks for a train of dimension {train.dim}: {ranks}."
        raise RankMismatch(msg)
    if any(r < r_old for r, r_old in zip(ranks, ranks_old)):
        msg = f"Cannot reduce ranks from {ranks_old} to {ranks}."
        raise RankMismatch(msg)

    cores = []
    for k, core in enumerate(train.cores):
        r_p, n_k, r_k = core.coeffs.shape
        shape = (ranks[k], n_k, ranks[k+1])
        with allocation_guard("pad_ranks", shape):
            coeffs = noise * torch.randn(shape, generator=generator)
        coeffs[:r_p, :, :r_k] = core.coeffs
        coeffs[:r_p, :, r_k:] = 0.0
        cores.append(Core(core.basis, core.domain, coeffs))

    return type(train)(cores)


def adapt_ranks(
    train: "FunctionTrain", 
    options: RankAdaptOptions|None = None,
    generator: torch.Generator|None = None
) -> Tuple["FunctionTrain", bool]:
    """Rounds a function train, then increases the rank of each seam 
    which could not be reduced by rounding by `kick_rank` (up to the 
    rank schedule).

    Parameters
    ----------
    train:
        The function train.
    options:
        Options used to configure the adaptation.
    generator:
        The random number generator used to pad the cores.

    Returns
    -------
    adapted:
        The adapted function train.
    grew:
        Whether the rank of any seam was increased.

    """

    if options is None:
        options = RankAdaptOptions()

    if not options.adapt:
        return train, False

    schedule = options.rank_schedule(train.dim)
    rounded = round(train, RoundOptions(tol=options.round_tol), max_ranks=schedule)

    ranks_old = [int(r) for r in train.ranks]
    ranks_rounded = [int(r) for r in rounded.ranks]
    ranks_new = list(ranks_rounded)
    for k in range(1, train.dim):
        if ranks_rounded[k] >= ranks_old[k]:
            ranks_new[k] = max(min(ranks_rounded[k] + options.kick_rank, schedule[k]), 
                               ranks_rounded[k])

    grew = ranks_new != ranks_rounded
    adapted = pad_ranks(rounded, ranks_new, options.noise, generator)

    if options.verbose:
        adapt_info(f"Ranks: {ranks_old} -> {ranks_new}.")
    return adapted, grew
