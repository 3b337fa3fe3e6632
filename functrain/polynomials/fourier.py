from typing import Tuple

import torch
from torch import Tensor

from .spectral import Spectral
from ..errors import InvalidArguments


class Fourier(Spectral):
    r"""Real trigonometric basis on the local domain.
    
    Parameters
    ----------
    order:
        The highest frequency of the sine terms. A basis of order $o$
        contains $2o+2$ functions.

    Notes
    -----
    With $m = o+1$, the basis functions are
    $$
        1, \quad \sqrt{2}\sin(j\pi l), \quad \sqrt{2}\cos(j\pi l)
        \quad (j = 1, \dots, o), \quad \sqrt{2}\cos(m\pi l),
    $$
    each labelled by its kind and frequency. They are orthonormal
    with respect to the weight $\lambda(l) = 1/2$. Products and
    projections use an equispaced rule with $N$ nodes, which is exact
    for trigonometric polynomials of frequency below $N$.

    References
    ----------
    Boyd, JP (2001, Section 4.5). *[Chebyshev and Fourier spectral 
    methods](https://link.springer.com/book/9783540514879).* Lecture 
    Notes in Engineering, Volume 49.

    """

    def __init__(self, order: int):
        if order < 0:
            msg = "Order of Fourier basis must be non-negative."
            raise InvalidArguments(msg)
        self.order = order
        self.m = order + 1
        self.c = torch.pi * (torch.arange(order) + 1)
        return

    @property
    def degree(self) -> int:
        return self.m

    @property
    def labels(self):
        return ([("cos", 0)] 
                + [("sin", j) for j in range(1, self.m)]
                + [("cos", j) for j in range(1, self.m)]
                + [("cos", self.m)])

    @property
    def kwargs(self):
        return {"order": self.order}

    def quadrature(self, degree: int) -> Tuple[Tensor, Tensor]:
        n_nodes = degree + 1
        n = torch.arange(n_nodes)
        nodes = 2.0 * (n+1) / n_nodes - 1
        weights = torch.ones_like(nodes) / n_nodes
        return nodes, weights

    def product_basis(self, other: "Fourier") -> "Fourier":
        return Fourier(self.order + other.order + 1)

    def basis_for_labels(self, labels) -> "Fourier":
        order = 0
        for kind, freq in labels:
            if kind == "sin":
                order = max(order, freq)
            else:
                order = max(order, freq - 1)
        return Fourier(order)

    def eval_basis(self, ls: Tensor) -> Tensor:
        self._warn_outside(ls)
        ls = ls[:, None]
        ps = torch.hstack((
            torch.ones_like(ls),
            2 ** 0.5 * torch.sin(ls * self.c),
            2 ** 0.5 * torch.cos(ls * self.c),
            2 ** 0.5 * torch.cos(ls * self.m * torch.pi)
        ))
        return ps
    
    def eval_basis_deriv(self, ls: Tensor) -> Tensor:
        ls = ls[:, None]
        dpdls = torch.hstack((
            torch.zeros_like(ls),
            2 ** 0.5 * torch.cos(ls * self.c) * self.c,
            -2 ** 0.5 * torch.sin(ls * self.c) * self.c,
            -2 ** 0.5 * torch.sin(ls * self.m * torch.pi) * self.m * torch.pi
        ))
        return dpdls
