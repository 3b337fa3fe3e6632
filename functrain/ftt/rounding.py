from typing import TYPE_CHECKING, List, Tuple

import torch
from torch import Tensor

from ..constants import ZERO_TOL
from ..directions import Direction
from ..errors import NumericDegeneracy
from ..options import RoundOptions
from ..tools import linalg, round_info

if TYPE_CHECKING:
    from .function_train import FunctionTrain


def truncate_svd(
    H: Tensor, 
    tol: float, 
    max_rank: int|None = None
) -> Tuple[Tensor, Tensor, Tensor]:
    """Computes a truncated SVD of a matrix.

    The number of singular values retained is the smallest number, r, 
    such that the sum of the squares of the discarded singular values 
    is no greater than tol^2 multiplied by the sum of the squares of 
    all singular values. r is always at least 1, and no greater than 
    max_rank.

    Parameters
    ----------
    H:
        The matrix to decompose.
    tol:
        The relative tolerance (in the Frobenius norm).
    max_rank:
        The maximum number of singular values to retain.

    Returns
    -------
    U:
        Matrix containing the retained left singular vectors.
    s:
        Vector containing the retained singular values.
    Vh:
        Matrix containing the (transposes of the) retained right 
        singular vectors.

    """

    if not torch.isfinite(H).all():
        msg = f"Transfer matrix of shape {tuple(H.shape)} contains non-finite values."
        raise NumericDegeneracy(msg)

    U, s, Vh = linalg.svd(H)

    energies = torch.flip(s**2, dims=(0,)).cumsum(dim=0)
    threshold = energies[-1] * tol ** 2
    
    rank = int(torch.sum(energies > threshold))
    rank = max(rank, 1)
    if max_rank is not None:
        rank = min(rank, max_rank)

    return U[:, :rank], s[:rank], Vh[:rank]


def orthogonalise_left(train: "FunctionTrain") -> "FunctionTrain":
    """Left-orthogonalises the first d-1 cores of a function train 
    using a left-to-right sweep of function-QR decompositions.
    """
    cores = list(train.cores)
    for k in range(train.dim - 1):
        Q, R = cores[k].qr()
        cores[k] = Q
        cores[k+1] = cores[k+1].lmul(R)
    return type(train)(cores)


def orthogonalise_right(train: "FunctionTrain") -> "FunctionTrain":
    """Right-orthogonalises the last d-1 cores of a function train 
    using a right-to-left sweep of function-LQ decompositions.
    """
    cores = list(train.cores)
    for k in range(train.dim - 1, 0, -1):
        L, Q = cores[k].lq()
        cores[k] = Q
        cores[k-1] = cores[k-1].rmul(L)
    return type(train)(cores)


def orthogonalise(train: "FunctionTrain", direction: Direction) -> "FunctionTrain":
    if direction == Direction.FORWARD:
        return orthogonalise_left(train)
    return orthogonalise_right(train)


def round(
    train: "FunctionTrain", 
    options: RoundOptions|None = None,
    max_ranks: List[int]|None = None
) -> "FunctionTrain":
    """Reduces the ranks of a function train, such that the relative 
    L2 error introduced is no greater than a given tolerance.

    The train is first right-orthogonalised. A left-to-right sweep 
    then computes the function-QR decomposition of each core, 
    truncates the SVD of the upper-triangular factor, and folds the 
    singular values and right singular vectors into the next core.

    Parameters
    ----------
    train:
        The function train to round.
    options:
        Options used to configure the rounding.
    max_ranks:
        The maximum rank of each seam (including the boundary ranks). 
        If specified, this takes precedence over `options.max_rank`.

    Returns
    -------
    rounded:
        The rounded function train. Trains with a (numerically) zero 
        norm are replaced by the zero train of rank 1.

    References
    ----------
    Oseledets, IV (2011). Tensor-train decomposition. SIAM Journal on 
    Scientific Computing **33**, 2295--2317.

    Gorodetsky, AA, Karaman, S and Marzouk, YM (2019). A continuous 
    analogue of the tensor-train decomposition. Computer Methods in 
    Applied Mechanics and Engineering **347**, 59--84.

    """

    if options is None:
        options = RoundOptions()

    if train.dim == 1:
        return train.copy()

    scale = torch.prod(torch.stack([core.norm() for core in train.cores]))
    ortho = orthogonalise_right(train)
    if ortho.cores[0].norm() <= ZERO_TOL * scale:
        if options.verbose:
            round_info("Train has zero norm.")
        return type(train).zeros(train.bases)
    
    tol = options.tol / (train.dim - 1) ** 0.5
    cores = list(ortho.cores)

    for k in range(train.dim - 1):
        Q, R = cores[k].qr()
        max_rank = options.max_rank if max_ranks is None else max_ranks[k+1]
        U, s, Vh = truncate_svd(R, tol, max_rank)
        cores[k] = Q.rmul(U)
        cores[k+1] = cores[k+1].lmul(s[:, None] * Vh)

    rounded = type(train)(cores)
    if options.verbose:
        ranks_old = [int(r) for r in train.ranks]
        ranks_new = [int(r) for r in rounded.ranks]
        round_info(f"Ranks: {ranks_old} -> {ranks_new}.")
    return rounded
