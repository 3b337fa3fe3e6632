import abc
from typing import Callable, Hashable, List, Tuple

import torch
from torch import Tensor

from .basis_1d import Basis1D


class Spectral(Basis1D, abc.ABC):
    """Parent class for spectral bases. The basis functions are 
    orthonormal with respect to the (normalised) weight function 
    
    lambda(l) = 1/2

    on the local domain, so the (unweighted) mass matrix is equal to 
    twice the identity.

    Each basis function carries a label (e.g., its degree); two 
    functions from different members of the same family are identical 
    if and only if their labels agree.
    """

    @property
    @abc.abstractmethod
    def labels(self) -> List[Hashable]:
        """The labels of each basis function."""
        return

    @property
    @abc.abstractmethod
    def degree(self) -> int:
        """The degree (or maximum frequency) of the basis."""
        return

    @abc.abstractmethod
    def quadrature(self, degree: int) -> Tuple[Tensor, Tensor]:
        """Returns a quadrature rule (with weights that sum to 1) which 
        integrates products of members of the family with total degree 
        up to `degree` exactly.

        Parameters
        ----------
        degree:
            The total degree of the integrand.

        Returns
        -------
        nodes:
            The quadrature nodes.
        weights:
            The corresponding quadrature weights.

        """
        return

    @abc.abstractmethod
    def product_basis(self, other: "Spectral") -> "Spectral":
        """The smallest basis of the family which contains all products 
        of a function from the current basis with a function from the 
        other basis.
        """
        return

    @abc.abstractmethod
    def basis_for_labels(self, labels: List[Hashable]) -> "Spectral":
        """The smallest basis of the family containing a set of labels.
        """
        return

    @property
    def cardinality(self) -> int:
        return len(self.labels)

    @property
    def mass(self) -> Tensor:
        return 2.0 * torch.eye(self.cardinality)

    @property
    def mass_R(self) -> Tensor:
        return 2.0 ** 0.5 * torch.eye(self.cardinality)

    @property
    def int_W(self) -> Tensor:
        if getattr(self, "_int_W", None) is None:
            ls, ws = self.quadrature(self.degree)
            self._int_W = 2.0 * ws @ self.eval_basis(ls)
        return self._int_W

    def is_compatible(self, other: Basis1D) -> bool:
        return type(self) is type(other)

    def promote(self, other: Basis1D) -> "Spectral":
        self.check_compatible(other)
        if other.cardinality > self.cardinality:
            return other
        return self

    def _index_map(self, basis: "Spectral") -> Tuple[Tensor, Tensor]:
        """Returns the indices of the functions of the current basis 
        which also belong to another basis, and their indices in the 
        other basis.
        """
        positions = {label: i for i, label in enumerate(basis.labels)}
        inds_from, inds_to = [], []
        for i, label in enumerate(self.labels):
            if label in positions:
                inds_from.append(i)
                inds_to.append(positions[label])
        return torch.tensor(inds_from, dtype=torch.long), torch.tensor(inds_to, dtype=torch.long)

    def convert(self, coeffs: Tensor, basis: Basis1D) -> Tensor:
        self.check_compatible(basis)
        inds_from, inds_to = self._index_map(basis)
        converted = coeffs.new_zeros((basis.cardinality, *coeffs.shape[1:]))
        converted[inds_to] = coeffs[inds_from]
        return converted

    def cross_mass(self, other: Basis1D) -> Tensor:
        self.check_compatible(other)
        inds_from, inds_to = self._index_map(other)
        C = torch.zeros((self.cardinality, other.cardinality))
        C[inds_from, inds_to] = 2.0
        return C

    def product(
        self, 
        coeffs: Tensor, 
        other: Basis1D, 
        coeffs_other: Tensor,
        table=None
    ) -> Tuple["Spectral", Tensor]:
        
        self.check_compatible(other)
        if table is not None and table.covers(self, other):
            return table.multiply(self, coeffs, other, coeffs_other)
        
        basis = self.product_basis(other)
        ls, ws = self.quadrature(self.degree + other.degree + basis.degree)
        fls = self.eval_radon(coeffs, ls) * other.eval_radon(coeffs_other, ls)
        coeffs_prod = basis.eval_basis(ls).T @ (ws[:, None] * fls)
        return basis, coeffs_prod

    def fit(self, func: Callable[[Tensor], Tensor]) -> Tensor:
        ls, ws = self.quadrature(2 * self.degree)
        fls = func(ls)
        if fls.ndim == 1:
            return self.eval_basis(ls).T @ (ws * fls)
        return self.eval_basis(ls).T @ (ws[:, None] * fls)

    def compress(self, coeffs: Tensor, tol: float) -> Tuple["Spectral", Tensor]:
        significant = coeffs.reshape(self.cardinality, -1).abs().amax(dim=1) > tol
        labels = [l for l, keep in zip(self.labels, significant) if keep]
        basis = self.basis_for_labels(labels)
        return basis, self.convert(coeffs, basis)
