from typing import Tuple

import torch
from torch import Tensor

from ..errors import LinearAlgebraFailure


def qr(A: Tensor) -> Tuple[Tensor, Tensor]:
    """Computes the reduced QR decomposition of a matrix."""
    try:
        return torch.linalg.qr(A, mode="reduced")
    except RuntimeError as e:
        raise LinearAlgebraFailure("qr", [A.shape]) from e


def svd(A: Tensor) -> Tuple[Tensor, Tensor, Tensor]:
    """Computes the thin singular value decomposition of a matrix."""
    try:
        return torch.linalg.svd(A, full_matrices=False)
    except RuntimeError as e:
        raise LinearAlgebraFailure("svd", [A.shape]) from e


def cholesky(A: Tensor) -> Tensor:
    """Computes the (lower-triangular) Cholesky factor of a symmetric 
    positive definite matrix.
    """
    try:
        return torch.linalg.cholesky(A)
    except RuntimeError as e:
        raise LinearAlgebraFailure("cholesky", [A.shape]) from e


def eigh(A: Tensor) -> Tuple[Tensor, Tensor]:
    """Computes the eigendecomposition of a symmetric matrix."""
    try:
        return torch.linalg.eigh(A)
    except RuntimeError as e:
        raise LinearAlgebraFailure("eigh", [A.shape]) from e


def solve_triangular(R: Tensor, B: Tensor) -> Tensor:
    """Solves RX = B, where R is an upper-triangular matrix."""
    try:
        return torch.linalg.solve_triangular(R, B, upper=True)
    except RuntimeError as e:
        raise LinearAlgebraFailure("solve_triangular", [R.shape, B.shape]) from e
