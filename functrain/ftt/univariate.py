from typing import Callable

import torch
from torch import Tensor

from ..domains import Domain
from ..errors import DomainMismatch, ShapeMismatch
from ..polynomials import Basis1D
from ..tools import check_finite


class UnivariateFunction():
    """A function of a single variable, expressed in a basis defined 
    on the local domain and mapped to a bounded approximation domain.

    Parameters
    ----------
    basis:
        The basis the function is expressed in.
    domain:
        The approximation domain of the function.
    coeffs:
        An n-dimensional vector containing the coefficients of the 
        function, where n is the cardinality of the basis.

    """

    def __init__(self, basis: Basis1D, domain: Domain, coeffs: Tensor):
        
        if coeffs.ndim != 1 or coeffs.numel() != basis.cardinality:
            msg = (f"Expected {basis.cardinality} coefficients " 
                   + f"(got tensor of shape {tuple(coeffs.shape)}).")
            raise ShapeMismatch(msg)
        
        self.basis = basis
        self.domain = domain
        self.coeffs = coeffs
        return

    @classmethod
    def approximate(
        cls, 
        func: Callable[[Tensor], Tensor], 
        basis: Basis1D, 
        domain: Domain
    ) -> "UnivariateFunction":
        """Approximates a function defined on the approximation domain.
        """
        coeffs = basis.fit(lambda ls: func(domain.local2approx(ls)[0]))
        check_finite(coeffs)
        return cls(basis, domain, coeffs)

    @classmethod
    def constant(
        cls, 
        value: float, 
        basis: Basis1D, 
        domain: Domain
    ) -> "UnivariateFunction":
        return cls.approximate(lambda xs: torch.full_like(xs, value), basis, domain)

    @classmethod
    def linear(
        cls, 
        slope: float, 
        offset: float, 
        basis: Basis1D, 
        domain: Domain
    ) -> "UnivariateFunction":
        """Returns the function f(x) = slope * x + offset."""
        return cls.approximate(lambda xs: slope * xs + offset, basis, domain)

    def check_compatible(self, other: "UnivariateFunction") -> None:
        self.basis.check_compatible(other.basis)
        if not self.domain.matches(other.domain):
            msg = f"Domains {self.domain!r} and {other.domain!r} differ."
            raise DomainMismatch(msg)
        return

    def eval(self, xs: Tensor) -> Tensor:
        ls = self.domain.approx2local(xs)[0]
        return self.basis.eval_radon(self.coeffs[:, None], ls).flatten()

    def __call__(self, xs: Tensor) -> Tensor:
        return self.eval(xs)

    def eval_deriv(self, xs: Tensor) -> Tensor:
        ls, dldxs = self.domain.approx2local(xs)
        dfdls = self.basis.eval_radon_deriv(self.coeffs[:, None], ls).flatten()
        return dfdls * dldxs

    def integrate(self) -> Tensor:
        return self.domain.dxdl * self.basis.int_W @ self.coeffs

    def inner(self, other: "UnivariateFunction") -> Tensor:
        """Returns the L2 inner product of two functions."""
        self.check_compatible(other)
        C = self.basis.cross_mass(other.basis)
        return self.domain.dxdl * self.coeffs @ C @ other.coeffs

    def norm(self) -> Tensor:
        return self.inner(self).clamp(min=0.0).sqrt()

    def combine(
        self, 
        a: float, 
        other: "UnivariateFunction", 
        b: float
    ) -> "UnivariateFunction":
        """Returns the function a*f + b*g, where f is the current 
        function and g is the other function.
        """
        self.check_compatible(other)
        basis = self.basis.promote(other.basis)
        coeffs = (a * self.basis.convert(self.coeffs, basis) 
                  + b * other.basis.convert(other.coeffs, basis))
        return UnivariateFunction(basis, self.domain, coeffs)

    def multiply(self, other: "UnivariateFunction", table=None) -> "UnivariateFunction":
        self.check_compatible(other)
        basis, coeffs = self.basis.product(
            self.coeffs[:, None], 
            other.basis, 
            other.coeffs[:, None], 
            table=table
        )
        return UnivariateFunction(basis, self.domain, coeffs.flatten())

    def scale(self, c: float) -> "UnivariateFunction":
        return UnivariateFunction(self.basis, self.domain, c * self.coeffs)

    def compress(self, tol: float = 0.0) -> "UnivariateFunction":
        basis, coeffs = self.basis.compress(self.coeffs[:, None], tol)
        return UnivariateFunction(basis, self.domain, coeffs.flatten())

    def __add__(self, other: "UnivariateFunction") -> "UnivariateFunction":
        return self.combine(1.0, other, 1.0)

    def __sub__(self, other: "UnivariateFunction") -> "UnivariateFunction":
        return self.combine(1.0, other, -1.0)

    def __mul__(self, other):
        if isinstance(other, UnivariateFunction):
            return self.multiply(other)
        return self.scale(other)

    def __rmul__(self, c: float) -> "UnivariateFunction":
        return self.scale(c)
