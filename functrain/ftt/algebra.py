"""Operations on function trains which act directly on the cores, 
without forming the full d-dimensional function.
"""

from typing import TYPE_CHECKING

import torch
from torch import Tensor

from .core import Core
from ..errors import ShapeMismatch, allocation_guard

if TYPE_CHECKING:
    from .function_train import FunctionTrain


def _check_dims(a: "FunctionTrain", b: "FunctionTrain") -> None:
    if a.dim != b.dim:
        msg = f"Dimensions of trains do not match ({a.dim} vs {b.dim})."
        raise ShapeMismatch(msg)
    a.bases.check_compatible(b.bases)
    return


def evaluate(train: "FunctionTrain", xs: Tensor) -> Tensor:
    """Evaluates a function train at a single point or a set of points.

    Parameters
    ----------
    train:
        The function train.
    xs:
        Either a d-dimensional vector, or an n * d matrix where each 
        row contains a point in the approximation domain.

    Returns
    -------
    fxs:
        The value of the train at the point (a scalar tensor), or an 
        n-dimensional vector containing the value of the train at each 
        point.

    """
    
    single = xs.ndim == 1
    if single:
        xs = xs[None, :]
    
    if xs.ndim != 2 or xs.shape[1] != train.dim:
        msg = (f"Points should have dimension {train.dim} " 
               + f"(got tensor of shape {tuple(xs.shape)}).")
        raise ShapeMismatch(msg)

    Gs_prod = torch.ones((xs.shape[0], 1))
    for k, core in enumerate(train.cores):
        Gs = core.eval(xs[:, k])
        Gs_prod = torch.einsum("il, ilk -> ik", Gs_prod, Gs)
    
    fxs = Gs_prod[:, 0]
    return fxs[0] if single else fxs


def gradient(train: "FunctionTrain", xs: Tensor) -> Tensor:
    """Evaluates the gradient of a function train at a set of points.

    Parameters
    ----------
    train:
        The function train.
    xs:
        An n * d matrix containing a set of points in the approximation 
        domain.

    Returns
    -------
    dfdxs:
        An n * d matrix containing the gradient of the train at each 
        point.

    """

    if xs.ndim != 2 or xs.shape[1] != train.dim:
        msg = (f"Points should be an n * {train.dim} matrix " 
               + f"(got tensor of shape {tuple(xs.shape)}).")
        raise ShapeMismatch(msg)

    n_xs = xs.shape[0]
    Gs = [core.eval(xs[:, k]) for k, core in enumerate(train.cores)]
    
    # Products of the cores to the left and right of each dimension
    Ps = [torch.ones((n_xs, 1))]
    for k in range(train.dim - 1):
        Ps.append(torch.einsum("il, ilk -> ik", Ps[-1], Gs[k]))
    Ss = [torch.ones((n_xs, 1))]
    for k in range(train.dim - 1, 0, -1):
        Ss.insert(0, torch.einsum("ilk, ik -> il", Gs[k], Ss[0]))

    dfdxs = torch.empty((n_xs, train.dim))
    for k, core in enumerate(train.cores):
        dGs = core.eval_deriv(xs[:, k])
        dfdxs[:, k] = torch.einsum("il, ilk, ik -> i", Ps[k], dGs, Ss[k])
    return dfdxs


def add(a: "FunctionTrain", b: "FunctionTrain") -> "FunctionTrain":
    """Returns the sum of two function trains. The ranks of the result 
    are equal to the sum of the ranks of the two trains.
    """
    
    _check_dims(a, b)
    cores = []

    for k, (core_a, core_b) in enumerate(zip(a.cores, b.cores)):

        core_a.check_compatible(core_b)
        basis = core_a.basis.promote(core_b.basis)
        A = core_a.convert(basis).coeffs
        B = core_b.convert(basis).coeffs
        
        if a.dim == 1:
            coeffs = A + B
        elif k == 0:
            coeffs = torch.cat((A, B), dim=2)
        elif k == a.dim - 1:
            coeffs = torch.cat((A, B), dim=0)
        else:
            r_p, n_k, r_k = A.shape
            s_p, _, s_k = B.shape
            shape = (r_p + s_p, n_k, r_k + s_k)
            with allocation_guard("add", shape):
                coeffs = torch.zeros(shape)
            coeffs[:r_p, :, :r_k] = A
            coeffs[r_p:, :, r_k:] = B
        
        cores.append(Core(basis, core_a.domain, coeffs))

    return type(a)(cores)


def multiply(a: "FunctionTrain", b: "FunctionTrain", table=None) -> "FunctionTrain":
    """Returns the (pointwise) product of two function trains. The 
    ranks of the result are equal to the product of the ranks of the 
    two trains.

    Parameters
    ----------
    a, b:
        The function trains to multiply.
    table:
        A ProductTable used to compute products of spectral bases 
        (optional). Products which are not covered by the table are 
        computed using quadrature.

    """
    _check_dims(a, b)
    cores = [core_a.kron(core_b, table=table) 
             for core_a, core_b in zip(a.cores, b.cores)]
    return type(a)(cores)


def scale(train: "FunctionTrain", c: float) -> "FunctionTrain":
    """Multiplies a function train by a scalar."""
    cores = [train.cores[0].scale(c)] + train.cores[1:]
    return type(train)(cores)


def integrate(train: "FunctionTrain") -> Tensor:
    """Integrates a function train over its approximation domain."""
    M = torch.ones((1, 1))
    for core in train.cores:
        M = M @ core.integrate()
    return M[0, 0]


def inner(a: "FunctionTrain", b: "FunctionTrain") -> Tensor:
    """Computes the L2 inner product of two function trains."""
    _check_dims(a, b)
    Phi = torch.ones((1, 1))
    for core_a, core_b in zip(a.cores, b.cores):
        Phi = core_a.contract_left(Phi, core_b)
    return Phi[0, 0]


def norm(a: "FunctionTrain") -> Tensor:
    """Computes the L2 norm of a function train."""
    return inner(a, a).clamp(min=0.0).sqrt()


def norm_diff(a: "FunctionTrain", b: "FunctionTrain") -> Tensor:
    """Computes the L2 norm of the difference between two function 
    trains.
    """
    sq_norm = inner(a, a) - 2.0 * inner(a, b) + inner(b, b)
    return sq_norm.clamp(min=0.0).sqrt()
