from typing import TYPE_CHECKING, List, Tuple

import torch
from torch import Tensor

from .algebra import norm, norm_diff
from .core import Core
from .rounding import orthogonalise_right, truncate_svd
from ..errors import ShapeMismatch
from ..options import DMRGOptions
from ..tools import dmrg_info

if TYPE_CHECKING:
    from .function_train import FunctionTrain


def update_left(Phi: Tensor, core_a: Core, core_b: Core) -> Tensor:
    """Computes the next left environment matrix, 

    Phi_{k+1} = int A_{k}(x)^T Phi_{k} B_{k}(x) dx.
    
    """
    return core_a.contract_left(Phi, core_b)


def update_right(Psi: Tensor, core_b: Core, core_a: Core) -> Tensor:
    """Computes the previous right environment matrix,

    Psi_{k-1} = int B_{k}(x) Psi_{k} A_{k}(x)^T dx.
    
    """
    return core_b.contract_right(Psi, core_a)


def update_all_right(
    b: "FunctionTrain", 
    a: "FunctionTrain"
) -> List[Tensor]:
    """Computes the right environment matrix for each seam of the 
    trains. Element k of the output (k = 0, 1, ..., d-2) has dimension 
    r^{b}_{k+2} * r^{a}_{k+2}.
    """
    Psis = [None] * (b.dim - 1)
    Psis[-1] = torch.ones((1, 1))
    for k in range(b.dim - 3, -1, -1):
        Psis[k] = update_right(Psis[k+1], b.cores[k+2], a.cores[k+2])
    return Psis


def _factor_block(
    Phi: Tensor, 
    Psi: Tensor, 
    core_l: Core, 
    core_r: Core, 
    tol: float, 
    max_rank: int|None
) -> Tuple[Core, Tensor, Tensor, Tensor, Core]:
    """Computes a truncated decomposition of the two-core block 
    Phi * B_{k} * B_{k+1} * Psi, in the form Q_l * U * diag(s) * Vh * Q_r, 
    where Q_l has orthonormal columns and Q_r has orthonormal rows.
    """
    L, Q_r = core_r.rmul(Psi).lq()
    Q_l, R = core_l.lmul(Phi).qr()
    U, s, Vh = truncate_svd(R @ L, tol, max_rank)
    return Q_l, U, s, Vh, Q_r


def sweep_lr(
    b: "FunctionTrain",
    cores: List[Core],
    Phis: List[Tensor],
    Psis: List[Tensor],
    tol: float,
    max_rank: int|None = None
) -> Tuple[List[Core], List[Tensor]]:
    """Carries out a left-to-right sweep over the seams of the 
    approximation.

    Parameters
    ----------
    b:
        The target function train.
    cores:
        The current cores of the approximation.
    Phis:
        The left environment matrices. Element 0 must be [[1]].
    Psis:
        The right environment matrices (see update_all_right).
    tol:
        The tolerance used when truncating the SVD of each block.
    max_rank:
        The maximum rank of each seam.

    Returns
    -------
    cores:
        The updated cores. Cores 0, ..., d-2 are left-orthogonal.
    Phis:
        The updated left environment matrices.

    """

    cores, Phis = list(cores), list(Phis)
    d = b.dim
    
    for k in range(d - 1):
        Q_l, U, s, Vh, Q_r = _factor_block(
            Phis[k], Psis[k], b.cores[k], b.cores[k+1], tol, max_rank
        )
        cores[k] = Q_l.rmul(U)
        if k == d - 2:
            cores[k+1] = Q_r.lmul(s[:, None] * Vh)
        else:
            Phis[k+1] = update_left(Phis[k], cores[k], b.cores[k])
    
    return cores, Phis


def sweep_rl(
    b: "FunctionTrain",
    cores: List[Core],
    Phis: List[Tensor],
    Psis: List[Tensor],
    tol: float,
    max_rank: int|None = None
) -> Tuple[List[Core], List[Tensor]]:
    """Carries out a right-to-left sweep over the seams of the 
    approximation. Returns the updated cores (cores 1, ..., d-1 are 
    right-orthogonal) and the updated right environment matrices.
    """

    cores, Psis = list(cores), list(Psis)
    
    for k in range(b.dim - 2, -1, -1):
        Q_l, U, s, Vh, Q_r = _factor_block(
            Phis[k], Psis[k], b.cores[k], b.cores[k+1], tol, max_rank
        )
        cores[k+1] = Q_r.lmul(Vh)
        if k == 0:
            cores[k] = Q_l.rmul(U * s)
        else:
            Psis[k-1] = update_right(Psis[k], b.cores[k+1], cores[k+1])
    
    return cores, Psis


def sweep_lrl(
    b: "FunctionTrain",
    cores: List[Core],
    Phis: List[Tensor],
    Psis: List[Tensor],
    tol: float,
    max_rank: int|None = None
) -> Tuple[List[Core], List[Tensor], List[Tensor]]:
    """Carries out a left-to-right sweep followed by a right-to-left 
    sweep.
    """
    cores, Phis = sweep_lr(b, cores, Phis, Psis, tol, max_rank)
    cores, Psis = sweep_rl(b, cores, Phis, Psis, tol, max_rank)
    return cores, Phis, Psis


def dmrg_approx(
    a: "FunctionTrain", 
    b: "FunctionTrain", 
    options: DMRGOptions|None = None
) -> "FunctionTrain":
    """Approximates a function train, b, by another function train, 
    using a sequence of two-core (DMRG) sweeps starting from an initial 
    guess, a.

    The bases of the result are those of b; the initial guess is only 
    used to determine the initial right environments.

    Parameters
    ----------
    a:
        The initial guess.
    b:
        The function train to approximate.
    options:
        Options used to configure the sweeps.

    Returns
    -------
    approx:
        The approximation to b.

    References
    ----------
    Oseledets, IV (2011). DMRG approach to fast linear algebra in the 
    TT-format. Computational Methods in Applied Mathematics **11**, 
    382--393.

    """

    if options is None:
        options = DMRGOptions()

    if a.dim != b.dim:
        msg = f"Dimensions of trains do not match ({a.dim} vs {b.dim})."
        raise ShapeMismatch(msg)

    if b.dim == 1:
        return b.copy()

    a = orthogonalise_right(a)
    cores = list(a.cores)
    Phis = [torch.ones((1, 1))] + [None] * (b.dim - 2)
    Psis = update_all_right(b, a)

    if options.verbose:
        norm_b = norm(b)
        dmrg_info("Sweep | Residual | Max Rank")

    for i in range(options.max_sweeps):
        
        cores, Phis, Psis = sweep_lrl(
            b, cores, Phis, Psis, options.epsilon, options.max_rank
        )

        if options.verbose:
            approx = type(b)(cores)
            residual = norm_diff(approx, b) / norm_b.clamp(min=torch.finfo().tiny)
            max_rank = int(approx.ranks.max())
            dmrg_info(f"{i+1:=5} | {float(residual):=8.2e} | {max_rank:=8}")
            if residual < options.delta:
                dmrg_info(f"Residual is below {options.delta:.2e}.")

    return type(b)(cores)
