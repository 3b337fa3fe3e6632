import abc
from typing import Callable, Dict, Tuple
import warnings

import torch
from torch import Tensor

from ..errors import DomainMismatch
from ..tools import linalg


class Basis1D(abc.ABC, object):
    """The parent class for all one-dimensional bases. Each basis is 
    defined on the local domain, [-1, 1].

    Sets of univariate functions expressed in a basis are stored as 
    coefficient matrices of dimension n * p, where n is the 
    cardinality of the basis and each column corresponds to a 
    different function.
    """

    @property
    def domain(self) -> Tensor:
        """The (local) domain of the basis."""
        return torch.tensor([-1.0, 1.0])

    @property
    @abc.abstractmethod
    def cardinality(self) -> int:
        """The number of basis functions."""
        return

    @property
    @abc.abstractmethod
    def mass(self) -> Tensor:
        """An n * n matrix containing the (unweighted) inner products of 
        each pair of basis functions over the local domain.
        """
        return

    @property
    @abc.abstractmethod
    def int_W(self) -> Tensor:
        """An n-dimensional vector which, when multiplied by a set of 
        coefficients, returns the integral of the corresponding 
        function over the local domain.
        """
        return

    @property
    @abc.abstractmethod
    def kwargs(self) -> Dict:
        """The keyword arguments required to reconstruct the basis."""
        return

    @abc.abstractmethod
    def eval_basis(self, ls: Tensor) -> Tensor:
        """Evaluates the one-dimensional basis at a given set of points.
        
        Parameters 
        ----------
        ls:
            An n-dimensional vector of points in the local domain at 
            which to evaluate the basis functions.
        
        Returns
        -------
        ps:
            An n * d matrix containing the values of each basis 
            function evaluated at each point. Element (i, j) contains 
            the value of the jth basis function evaluated at the ith 
            element of ls.
        
        """
        return

    @abc.abstractmethod
    def eval_basis_deriv(self, ls: Tensor) -> Tensor:
        """Evaluates the derivative of each basis function at a given 
        set of points.
        
        Parameters
        ----------
        ls: 
            An n-dimensional vector of points in the local domain at 
            which to evaluate the derivative of each basis function.
        
        Returns
        -------
        dpdls:
            An n * d matrix containing the derivative of each basis 
            function evaluated at each point.

        """
        return

    @abc.abstractmethod
    def is_compatible(self, other: "Basis1D") -> bool:
        """Returns whether functions expressed in this basis and the 
        other basis can be combined.
        """
        return

    @abc.abstractmethod
    def promote(self, other: "Basis1D") -> "Basis1D":
        """Returns the smallest basis of the family that contains both 
        this basis and the other basis.
        """
        return

    @abc.abstractmethod
    def convert(self, coeffs: Tensor, basis: "Basis1D") -> Tensor:
        """Re-expresses a set of coefficients in another basis of the 
        same family.

        Parameters
        ----------
        coeffs:
            An n * p matrix of coefficients in the current basis.
        basis:
            The basis to express the coefficients in.

        Returns
        -------
        coeffs:
            An m * p matrix of coefficients in the new basis, where m 
            is the cardinality of the new basis.

        """
        return

    @abc.abstractmethod
    def cross_mass(self, other: "Basis1D") -> Tensor:
        """Returns the matrix containing the inner products (over the 
        local domain) of each function of the current basis with each 
        function of the other basis.
        """
        return

    @abc.abstractmethod
    def product(
        self, 
        coeffs: Tensor, 
        other: "Basis1D", 
        coeffs_other: Tensor,
        table=None
    ) -> Tuple["Basis1D", Tensor]:
        """Multiplies two sets of functions together, column by column.

        Parameters
        ----------
        coeffs:
            An n * p matrix of coefficients in the current basis.
        other:
            The basis of the second set of functions.
        coeffs_other:
            An m * p matrix of coefficients in the other basis.
        table:
            A precomputed table of triple products (optional).

        Returns
        -------
        basis:
            The basis in which the products are expressed.
        coeffs:
            A matrix containing the coefficients of the products.

        """
        return

    @abc.abstractmethod
    def fit(self, func: Callable[[Tensor], Tensor]) -> Tensor:
        """Approximates a function (or set of functions) defined on the 
        local domain in the current basis.

        Parameters
        ----------
        func:
            A function which maps an n-dimensional vector of points in 
            the local domain to an n-dimensional vector (or an n * p 
            matrix) of function values.

        Returns
        -------
        coeffs:
            The coefficients of the approximation.

        """
        return

    @abc.abstractmethod
    def compress(self, coeffs: Tensor, tol: float) -> Tuple["Basis1D", Tensor]:
        """Finds the smallest basis of the family in which a set of 
        coefficients can be expressed, discarding coefficients smaller 
        than a given tolerance.
        """
        return

    @property
    def mass_R(self) -> Tensor:
        """Upper-triangular Cholesky factor of the mass matrix."""
        if getattr(self, "_mass_R", None) is None:
            self._mass_R = linalg.cholesky(self.mass).T
        return self._mass_R

    def check_compatible(self, other: "Basis1D") -> None:
        if not self.is_compatible(other):
            msg = (f"Bases {self!r} and {other!r} are not from the same " 
                   + "family.")
            raise DomainMismatch(msg)
        return

    def in_domain(self, ls: Tensor) -> Tensor:
        """Returns a boolean mask that indicates whether each of a set
        of points is contained within the local domain of the basis.
        """
        return (ls >= self.domain[0]) & (ls <= self.domain[1])

    def _warn_outside(self, ls: Tensor) -> None:
        if not torch.all(self.in_domain(ls)):
            warnings.warn("Some points are outside the domain.")
        return

    def eval_radon(self, coeffs: Tensor, ls: Tensor) -> Tensor:
        """Evaluates a set of functions, expressed in the current basis, 
        at a set of points in the local domain.

        Parameters
        ----------
        coeffs:
            An n * p matrix of coefficients.
        ls:
            An m-dimensional vector of points in the local domain.

        Returns
        -------
        fls:
            An m * p matrix containing the value of each function at 
            each point.

        """
        return self.eval_basis(ls) @ coeffs

    def eval_radon_deriv(self, coeffs: Tensor, ls: Tensor) -> Tensor:
        """Evaluates the derivative (with respect to the local 
        variable) of a set of functions expressed in the current basis.
        """
        return self.eval_basis_deriv(ls) @ coeffs

    def __repr__(self) -> str:
        kwargs = ", ".join(f"{k}={v}" for k, v in self.kwargs.items())
        return f"{type(self).__name__}({kwargs})"
