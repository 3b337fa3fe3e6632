from typing import Callable, Tuple

import torch
from torch import Tensor

from .basis_1d import Basis1D
from ..errors import InvalidArguments


class Lagrange1(Basis1D):
    """Piecewise linear (hat) functions defined on a uniform grid over 
    the local domain.

    Parameters
    ----------
    num_elems:
        The number of elements the local domain is split into. The 
        cardinality of the basis is `num_elems+1`.

    Notes
    -----
    The coefficients of a function expressed in this basis are its 
    values at the nodes of the grid. Products of functions are 
    computed by multiplying their nodal values (i.e., by 
    interpolation), so they are not exact.

    """

    def __init__(self, num_elems: int):

        if num_elems < 1:
            msg = "Number of elements must be positive."
            raise InvalidArguments(msg)
        
        self.num_elems = num_elems
        self.grid = torch.linspace(-1.0, 1.0, num_elems+1)
        self.elem_size = self.grid[1] - self.grid[0]

        local_mass = torch.tensor([[2.0, 1.0], [1.0, 2.0]]) / 6.0
        local_weights = torch.tensor([1.0, 1.0]) / 2.0

        mass = torch.zeros((self.cardinality, self.cardinality))
        int_W = torch.zeros(self.cardinality)

        for i in range(self.num_elems):
            ind = torch.tensor([i, i+1])
            mass[ind[:, None], ind[None, :]] += local_mass * self.elem_size
            int_W[ind] += local_weights * self.elem_size

        self._mass = mass
        self._int_W = int_W
        return

    @property 
    def nodes(self) -> Tensor:
        return self.grid

    @property
    def cardinality(self) -> int:
        return self.num_elems + 1

    @property
    def mass(self) -> Tensor:
        return self._mass

    @property 
    def int_W(self) -> Tensor: 
        return self._int_W

    @property
    def kwargs(self):
        return {"num_elems": self.num_elems}

    def get_left_hand_inds(self, ls: Tensor) -> Tensor:
        """Returns the indices of the nodes that are directly to the 
        left of each of a given set of points.
        """
        left_inds = ((ls-self.domain[0]) / self.elem_size).floor().long()
        left_inds = left_inds.clamp(0, self.num_elems-1)
        return left_inds

    def eval_basis(self, ls: Tensor) -> Tensor:
            
        self._warn_outside(ls)
        inside = self.in_domain(ls)
        rows = inside.nonzero().flatten()

        ps = torch.zeros((ls.numel(), self.cardinality))
        if rows.numel() == 0:
            return ps

        left_inds = self.get_left_hand_inds(ls[rows])
        ts = (ls[rows] - self.grid[left_inds]) / self.elem_size
        ps[rows, left_inds] = 1.0 - ts
        ps[rows, left_inds+1] = ts
        return ps
        
    def eval_basis_deriv(self, ls: Tensor) -> Tensor:

        inside = self.in_domain(ls)
        rows = inside.nonzero().flatten()

        dpdls = torch.zeros((ls.numel(), self.cardinality))
        if rows.numel() == 0:
            return dpdls

        left_inds = self.get_left_hand_inds(ls[rows])
        dpdls[rows, left_inds] = -1.0 / self.elem_size
        dpdls[rows, left_inds+1] = 1.0 / self.elem_size
        return dpdls

    def is_compatible(self, other: Basis1D) -> bool:
        return isinstance(other, Lagrange1) and other.num_elems == self.num_elems

    def promote(self, other: Basis1D) -> "Lagrange1":
        self.check_compatible(other)
        return self

    def convert(self, coeffs: Tensor, basis: Basis1D) -> Tensor:
        self.check_compatible(basis)
        return coeffs

    def cross_mass(self, other: Basis1D) -> Tensor:
        self.check_compatible(other)
        return self.mass

    def product(
        self, 
        coeffs: Tensor, 
        other: Basis1D, 
        coeffs_other: Tensor,
        table=None
    ) -> Tuple["Lagrange1", Tensor]:
        self.check_compatible(other)
        return self, coeffs * coeffs_other

    def fit(self, func: Callable[[Tensor], Tensor]) -> Tensor:
        return func(self.nodes)

    def compress(self, coeffs: Tensor, tol: float) -> Tuple["Lagrange1", Tensor]:
        return self, coeffs
