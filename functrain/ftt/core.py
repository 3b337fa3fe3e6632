from typing import Tuple

import torch
from torch import Tensor

from .univariate import UnivariateFunction
from ..domains import Domain
from ..errors import DomainMismatch, ShapeMismatch, allocation_guard
from ..polynomials import Basis1D
from ..tools import linalg


class Core():
    """A matrix of univariate functions which share a basis and an 
    approximation domain.

    Parameters
    ----------
    basis:
        The basis each function of the core is expressed in.
    domain:
        The approximation domain of each function.
    coeffs:
        An r_{k-1} * n_{k} * r_{k} tensor containing the coefficients 
        of the functions. The coefficients of entry (i, j) of the core 
        are given by `coeffs[i, :, j]`.

    """

    def __init__(self, basis: Basis1D, domain: Domain, coeffs: Tensor):
        
        if coeffs.ndim != 3 or coeffs.shape[1] != basis.cardinality:
            msg = ("Coefficient tensor should have shape " 
                   + f"(r_p, {basis.cardinality}, r_k) " 
                   + f"(got {tuple(coeffs.shape)}).")
            raise ShapeMismatch(msg)
        
        self.basis = basis
        self.domain = domain
        self.coeffs = coeffs
        return

    @classmethod
    def from_functions(cls, funcs: list[list[UnivariateFunction]]) -> "Core":
        """Builds a core from a (nested) list of univariate functions. 
        The functions are promoted to a common basis.
        """
        
        nrows, ncols = len(funcs), len(funcs[0])
        if any(len(row) != ncols for row in funcs):
            msg = "Each row of the core must contain the same number of functions."
            raise ShapeMismatch(msg)

        f0 = funcs[0][0]
        basis = f0.basis
        for row in funcs:
            for f in row:
                f0.check_compatible(f)
                basis = basis.promote(f.basis)

        coeffs = torch.stack([
            torch.stack([f.basis.convert(f.coeffs, basis) for f in row], dim=1)
            for row in funcs
        ])
        return cls(basis, f0.domain, coeffs)

    @property
    def nrows(self) -> int:
        return self.coeffs.shape[0]

    @property
    def ncols(self) -> int:
        return self.coeffs.shape[2]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.nrows, self.ncols

    def __getitem__(self, inds: Tuple[int, int]) -> UnivariateFunction:
        i, j = inds
        return UnivariateFunction(self.basis, self.domain, self.coeffs[i, :, j])

    def __repr__(self) -> str:
        return f"Core({self.nrows}x{self.ncols}, {self.basis!r}, {self.domain!r})"

    def copy(self) -> "Core":
        return Core(self.basis, self.domain, self.coeffs.clone())

    def check_compatible(self, other: "Core") -> None:
        """Raises a DomainMismatch error if the functions of two cores 
        cannot be combined.
        """
        self.basis.check_compatible(other.basis)
        if not self.domain.matches(other.domain):
            msg = f"Domains {self.domain!r} and {other.domain!r} differ."
            raise DomainMismatch(msg)
        return

    def eval(self, xs: Tensor) -> Tensor:
        """Evaluates the core at a set of points.

        Parameters
        ----------
        xs:
            An n-dimensional vector of points in the approximation 
            domain.

        Returns
        -------
        Gs:
            An n * r_{k-1} * r_{k} tensor containing the value of the 
            core at each point.
        
        """
        r_p, n_k, r_k = self.coeffs.shape
        ls = self.domain.approx2local(xs)[0]
        coeffs = self.coeffs.permute(1, 0, 2).reshape(n_k, r_p * r_k)
        Gs = self.basis.eval_radon(coeffs, ls).reshape(-1, r_p, r_k)
        return Gs

    def eval_deriv(self, xs: Tensor) -> Tensor:
        """Evaluates the derivative of the core at a set of points in 
        the approximation domain.
        """
        r_p, n_k, r_k = self.coeffs.shape
        ls = self.domain.approx2local(xs)[0]
        coeffs = self.coeffs.permute(1, 0, 2).reshape(n_k, r_p * r_k)
        dGdls = self.basis.eval_radon_deriv(coeffs, ls).reshape(-1, r_p, r_k)
        return dGdls / self.domain.dxdl

    def integrate(self) -> Tensor:
        """Returns the r_{k-1} * r_{k} matrix containing the integral 
        of each entry of the core over the approximation domain.
        """
        return self.domain.dxdl * torch.einsum("j, ijk -> ik", self.basis.int_W, self.coeffs)

    @property
    def mass_R(self) -> Tensor:
        """The Cholesky factor of the mass matrix of the basis over the 
        approximation domain.
        """
        return self.domain.dxdl.sqrt() * self.basis.mass_R

    def norm(self) -> Tensor:
        """Returns the square root of the sum of the squared L2 norms of 
        the entries of the core.
        """
        H = torch.einsum("ab, ibk -> iak", self.mass_R, self.coeffs)
        return H.norm()

    def qr(self) -> Tuple["Core", Tensor]:
        """Computes the function-QR decomposition of the core.

        Returns
        -------
        Q:
            A core with orthonormal columns, in the sense that 
            sum_{i} int Q_{ij}(x) Q_{ik}(x) dx = delta_{jk}.
        R:
            An upper-triangular matrix such that Q * R is equal to the 
            current core.
        
        """
        r_p, n_k, r_k = self.coeffs.shape
        H = torch.einsum("ab, ibk -> iak", self.mass_R, self.coeffs)
        Q, R = linalg.qr(H.reshape(r_p * n_k, r_k))
        Q = Q.reshape(r_p, n_k, -1)
        Q = torch.einsum("ab, ibk -> iak", self._mass_R_inv(), Q)
        return Core(self.basis, self.domain, Q), R

    def lq(self) -> Tuple[Tensor, "Core"]:
        """Computes the function-LQ decomposition of the core.

        Returns
        -------
        L:
            A lower-triangular matrix such that L * Q is equal to the 
            current core.
        Q:
            A core with orthonormal rows, in the sense that 
            sum_{j} int Q_{ij}(x) Q_{kj}(x) dx = delta_{ik}.
        
        """
        r_p, n_k, r_k = self.coeffs.shape
        H = torch.einsum("ab, ibk -> aki", self.mass_R, self.coeffs)
        Q, R = linalg.qr(H.reshape(n_k * r_k, r_p))
        Q = Q.reshape(n_k, r_k, -1).permute(2, 0, 1)
        Q = torch.einsum("ab, ibk -> iak", self._mass_R_inv(), Q)
        return R.T, Core(self.basis, self.domain, Q)

    def _mass_R_inv(self) -> Tensor:
        mass_R = self.mass_R
        return linalg.solve_triangular(mass_R, torch.eye(mass_R.shape[0]))

    def rmul(self, M: Tensor) -> "Core":
        """Returns the product of the core with a matrix (on the right).
        """
        if M.shape[0] != self.ncols:
            msg = f"Cannot multiply {self.shape} core by {tuple(M.shape)} matrix."
            raise ShapeMismatch(msg)
        coeffs = torch.einsum("ibk, kl -> ibl", self.coeffs, M)
        return Core(self.basis, self.domain, coeffs)

    def lmul(self, M: Tensor) -> "Core":
        """Returns the product of a matrix with the core (on the left).
        """
        if M.shape[1] != self.nrows:
            msg = f"Cannot multiply {tuple(M.shape)} matrix by {self.shape} core."
            raise ShapeMismatch(msg)
        coeffs = torch.einsum("li, ibk -> lbk", M, self.coeffs)
        return Core(self.basis, self.domain, coeffs)

    def scale(self, c: float) -> "Core":
        return Core(self.basis, self.domain, c * self.coeffs)

    def _cross_mass(self, other: "Core") -> Tensor:
        self.check_compatible(other)
        return self.domain.dxdl * self.basis.cross_mass(other.basis)

    def contract_left(self, Phi: Tensor, other: "Core") -> Tensor:
        """Computes the matrix 
        
        int C(x)^T Phi D(x) dx, 
        
        where C denotes the current core and D denotes the other core.
        """
        if Phi.shape != (self.nrows, other.nrows):
            msg = (f"Expected environment of shape {(self.nrows, other.nrows)} " 
                   + f"(got {tuple(Phi.shape)}).")
            raise ShapeMismatch(msg)
        C = self._cross_mass(other)
        return torch.einsum("iaj, ik, ab, kbl -> jl", self.coeffs, Phi, C, other.coeffs)

    def contract_right(self, Psi: Tensor, other: "Core") -> Tensor:
        """Computes the matrix 
        
        int C(x) Psi D(x)^T dx, 
        
        where C denotes the current core and D denotes the other core.
        """
        if Psi.shape != (self.ncols, other.ncols):
            msg = (f"Expected environment of shape {(self.ncols, other.ncols)} " 
                   + f"(got {tuple(Psi.shape)}).")
            raise ShapeMismatch(msg)
        C = self._cross_mass(other)
        return torch.einsum("iaj, jl, ab, kbl -> ik", self.coeffs, Psi, C, other.coeffs)

    def convert(self, basis: Basis1D) -> "Core":
        """Re-expresses the core in another basis of the same family."""
        r_p, n_k, r_k = self.coeffs.shape
        coeffs = self.coeffs.permute(1, 0, 2).reshape(n_k, r_p * r_k)
        coeffs = self.basis.convert(coeffs, basis)
        coeffs = coeffs.reshape(-1, r_p, r_k).permute(1, 0, 2)
        return Core(basis, self.domain, coeffs)

    def compress(self, tol: float = 0.0) -> "Core":
        """Re-expresses the core in the smallest basis of its family 
        which retains all coefficients larger than a given tolerance.
        """
        r_p, n_k, r_k = self.coeffs.shape
        coeffs = self.coeffs.permute(1, 0, 2).reshape(n_k, r_p * r_k)
        basis, coeffs = self.basis.compress(coeffs, tol)
        coeffs = coeffs.reshape(-1, r_p, r_k).permute(1, 0, 2)
        return Core(basis, self.domain, coeffs)

    def kron(self, other: "Core", table=None) -> "Core":
        """Returns the core containing the products of each entry of 
        the current core with each entry of the other core. Entry 
        (i*s_p + k, j*s_k + l) of the result is the product of entry 
        (i, j) of the current core and entry (k, l) of the other core.
        """
        self.check_compatible(other)
        r_p, n_a, r_k = self.coeffs.shape
        s_p, n_b, s_k = other.coeffs.shape
        shape = (r_p * s_p, n_a + n_b, r_k * s_k)

        with allocation_guard("kron", shape):
            A = (self.coeffs.permute(1, 0, 2)[:, :, None, :, None]
                 .expand(n_a, r_p, s_p, r_k, s_k).reshape(n_a, -1))
            B = (other.coeffs.permute(1, 0, 2)[:, None, :, None, :]
                 .expand(n_b, r_p, s_p, r_k, s_k).reshape(n_b, -1))
            basis, coeffs = self.basis.product(A, other.basis, B, table=table)
            coeffs = coeffs.reshape(-1, r_p * s_p, r_k * s_k).permute(1, 0, 2)
        
        return Core(basis, self.domain, coeffs)
