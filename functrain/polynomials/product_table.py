from typing import Tuple, Type

import torch
from torch import Tensor

from .basis_1d import Basis1D
from .legendre import Legendre
from .spectral import Spectral
from ..errors import InvalidArguments


class ProductTable():
    """A table containing the products of each triple of functions 
    from a spectral basis,

    T[i, j, k] = 1/2 * int_{-1}^{1} p_{i}(l) p_{j}(l) p_{k}(l) dl,

    where p_{i} and p_{j} belong to a basis of a given maximum order 
    and p_{k} belongs to the basis containing their products. The table 
    is built the first time it is used.

    Parameters
    ----------
    poly_type:
        The basis family the table is built for.
    max_order:
        The maximum order of the multiplied functions.

    """

    def __init__(
        self, 
        poly_type: Type[Spectral] = Legendre, 
        max_order: int = 10
    ):
        
        if not issubclass(poly_type, Spectral):
            msg = "Product tables can only be built for spectral bases."
            raise InvalidArguments(msg)
        if max_order < 0:
            msg = "Maximum order must be non-negative."
            raise InvalidArguments(msg)
        
        self.poly_type = poly_type
        self.max_order = max_order
        self.basis = poly_type(max_order)
        self.basis_prod = self.basis.product_basis(self.basis)
        self._table = None
        return

    @property
    def is_built(self) -> bool:
        return self._table is not None

    @property
    def table(self) -> Tensor:
        if self._table is None:
            self._table = self._build()
        return self._table

    def _build(self) -> Tensor:
        degree = 2 * self.basis.degree + self.basis_prod.degree
        ls, ws = self.basis.quadrature(degree)
        ps = self.basis.eval_basis(ls)
        ps_prod = self.basis_prod.eval_basis(ls)
        return torch.einsum("q, qi, qj, qk -> ijk", ws, ps, ps, ps_prod)

    def covers(self, basis: Basis1D, other: Basis1D) -> bool:
        """Returns whether the table can be used to multiply functions 
        from two bases.
        """
        return (type(basis) is self.poly_type 
                and type(other) is self.poly_type
                and max(basis.order, other.order) <= self.max_order)

    def multiply(
        self, 
        basis: Spectral, 
        coeffs: Tensor, 
        other: Spectral, 
        coeffs_other: Tensor
    ) -> Tuple[Spectral, Tensor]:
        """Multiplies two sets of functions together, column by column, 
        using the table.
        """
        coeffs = basis.convert(coeffs, self.basis)
        coeffs_other = other.convert(coeffs_other, self.basis)
        coeffs_prod = torch.einsum("ip, jp, ijk -> kp", coeffs, coeffs_other, self.table)
        basis_prod = basis.product_basis(other)
        return basis_prod, self.basis_prod.convert(coeffs_prod, basis_prod)
