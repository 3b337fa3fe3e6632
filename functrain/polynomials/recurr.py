import abc
from typing import Tuple

import torch
from torch import Tensor

from .spectral import Spectral
from ..tools import linalg


class Recurr(Spectral, abc.ABC):

    def __init__(
        self, 
        order: int,
        a: Tensor,
        b: Tensor,
        c: Tensor,
        norm: Tensor
    ):
        """Orthogonal polynomials generated by a three-term recurrence,

        p_{j+1}(l) = (a_{j}l + b_{j})p_{j}(l) - c_{j}p_{j-1}(l),

        starting from p_{0}(l) = 1. The polynomials are scaled by
        `norm` so that they are orthonormal under the weight 1/2.

        Parameters
        ----------
        order:
            The highest degree in the basis.
        a, b, c:
            Recurrence coefficients for j = 0, ..., order.
        norm:
            The scaling applied to each unnormalised polynomial.

        """
        
        self.order = order
        self.a = a
        self.b = b
        self.c = c
        self.norm = norm
        return

    @staticmethod
    @abc.abstractmethod
    def recurrence(n: int) -> Tuple[Tensor, Tensor, Tensor, Tensor]:
        """Returns the first n coefficients of the recurrence relation, 
        and the corresponding normalising constants.
        """
        return

    @staticmethod
    def compute_nodes_weights(
        a: Tensor,
        b: Tensor,
        c: Tensor
    ) -> Tuple[Tensor, Tensor]:
        """Computes the Gauss quadrature nodes and weights using the 
        Golub-Welsch method.

        Parameters
        ----------
        a, b, c:
            n-dimensional vectors containing the coefficients of the 
            recurrence relation for the polynomial.

        Returns
        -------
        nodes:
            An n-dimensional vector containing the quadrature nodes.
        weights:
            An n-dimensional vector containing the corresponding 
            quadrature weights.
        
        References
        ----------
        Golub, GH and Welsch, JH (1969). Calculation of Gauss 
        quadrature rules.

        """
        
        # Build tridiagonal matrix
        alpha = -b / a
        beta = torch.sqrt(c[1:] / (a[:-1] * a[1:]))
        J = torch.diag(alpha) + torch.diag(beta, -1) + torch.diag(beta, 1)

        eigvals, eigvecs = linalg.eigh(J)
        weights = eigvecs[0] ** 2
        return eigvals, weights

    @property
    def degree(self) -> int:
        return self.order

    @property
    def labels(self):
        return list(range(self.order+1))

    @property
    def kwargs(self):
        return {"order": self.order}

    def quadrature(self, degree: int) -> Tuple[Tensor, Tensor]:
        n = degree // 2 + 1
        a, b, c, _ = self.recurrence(n)
        return self.compute_nodes_weights(a, b, c)

    def product_basis(self, other: "Recurr") -> "Recurr":
        return type(self)(self.order + other.order)

    def basis_for_labels(self, labels) -> "Recurr":
        return type(self)(max(labels, default=0))

    def eval_basis(self, ls: Tensor) -> Tensor:
        
        self._warn_outside(ls)

        ps = [torch.ones_like(ls)]
        if self.order > 0:
            ps.append(self.a[0] * ls + self.b[0])
        for j in range(1, self.order):
            ps.append((self.a[j] * ls + self.b[j]) * ps[j] - self.c[j] * ps[j-1])
        
        return torch.stack(ps, dim=1) * self.norm
    
    def eval_basis_deriv(self, ls: Tensor) -> Tensor:
        
        ps = self.eval_basis(ls) / self.norm
        
        dpdls = [torch.zeros_like(ls)]
        if self.order > 0:
            dpdls.append(self.a[0] * ps[:, 0])
        for j in range(1, self.order):
            dpdls.append(self.a[j] * ps[:, j] 
                         + (self.a[j] * ls + self.b[j]) * dpdls[j]
                         - self.c[j] * dpdls[j-1])

        return torch.stack(dpdls, dim=1) * self.norm
