from typing import Callable, List, Sequence

import h5py
import torch
from torch import Tensor

from . import algebra, rounding
from .approx_bases import ApproxBases
from .core import Core
from .univariate import UnivariateFunction
from ..directions import Direction
from ..domains import BoundedDomain
from ..errors import InvalidArguments, RankMismatch, ShapeMismatch
from ..options import RoundOptions
from ..polynomials import NAME2POLY, POLY2NAME
from ..tools import dict_to_h5, h5_to_dict


UnivariateType = UnivariateFunction | Callable[[Tensor], Tensor]


class FunctionTrain():

    def __init__(self, cores: Sequence[Core]):
        """A function of d variables, represented as a product of d 
        matrices of univariate functions (cores):

        f(x_1, ..., x_d) = F_1(x_1) F_2(x_2) ... F_d(x_d).

        Parameters
        ----------
        cores:
            The cores of the train. The first core must have a single 
            row, the last core must have a single column, and the 
            number of columns of each core must equal the number of 
            rows of the next core.

        """

        cores = list(cores)
        
        if len(cores) == 0:
            msg = "A function train must contain at least one core."
            raise RankMismatch(msg)
        
        if cores[0].nrows != 1 or cores[-1].ncols != 1:
            msg = ("Boundary ranks must be equal to 1 (got " 
                   + f"{cores[0].nrows} and {cores[-1].ncols}).")
            raise RankMismatch(msg)
        
        for k in range(len(cores) - 1):
            if cores[k].ncols != cores[k+1].nrows:
                msg = (f"Core {k} has {cores[k].ncols} columns but core " 
                       + f"{k+1} has {cores[k+1].nrows} rows.")
                raise RankMismatch(msg)
        
        if any(core.nrows == 0 or core.ncols == 0 for core in cores):
            msg = "All ranks must be positive."
            raise RankMismatch(msg)
        
        self.cores = cores
        return

    @property
    def dim(self) -> int:
        return len(self.cores)

    @property
    def ranks(self) -> Tensor:
        """The (d+1)-dimensional vector of ranks of the train."""
        ranks = [core.nrows for core in self.cores] + [self.cores[-1].ncols]
        return torch.tensor(ranks)

    @property
    def bases(self) -> ApproxBases:
        polys = [core.basis for core in self.cores]
        domains = [core.domain for core in self.cores]
        return ApproxBases(polys, domains, self.dim)

    @property
    def num_params(self) -> int:
        return sum(core.coeffs.numel() for core in self.cores)

    @property
    def params(self) -> Tensor:
        """A vector containing the coefficients of every core of the 
        train, ordered core by core.
        """
        return torch.cat([core.coeffs.flatten() for core in self.cores])

    def with_params(self, params: Tensor) -> "FunctionTrain":
        """Returns a train with the same structure as the current train 
        but with a different set of coefficients. The coefficients of 
        the new train are views of `params`, so gradients can be 
        propagated back to it.
        """
        
        if params.ndim != 1 or params.numel() != self.num_params:
            msg = (f"Expected vector of {self.num_params} parameters " 
                   + f"(got tensor of shape {tuple(params.shape)}).")
            raise ShapeMismatch(msg)
        
        cores = []
        i = 0
        for core in self.cores:
            n = core.coeffs.numel()
            coeffs = params[i:i+n].reshape(core.coeffs.shape)
            cores.append(Core(core.basis, core.domain, coeffs))
            i += n
        return type(self)(cores)

    def copy(self) -> "FunctionTrain":
        return type(self)([core.copy() for core in self.cores])

    def __repr__(self) -> str:
        return f"FunctionTrain(dim={self.dim}, ranks={self.ranks.tolist()})"

    def eval(self, xs: Tensor) -> Tensor:
        """Evaluates the train at a single point (a d-dimensional 
        vector) or at a set of points (an n * d matrix).
        """
        return algebra.evaluate(self, xs)

    def __call__(self, xs: Tensor) -> Tensor:
        return self.eval(xs)

    def grad(self, xs: Tensor) -> Tensor:
        """Evaluates the gradient of the train at an n * d matrix of 
        points.
        """
        return algebra.gradient(self, xs)

    def integrate(self) -> Tensor:
        return algebra.integrate(self)

    def inner(self, other: "FunctionTrain") -> Tensor:
        return algebra.inner(self, other)

    def norm(self) -> Tensor:
        return algebra.norm(self)

    def norm_diff(self, other: "FunctionTrain") -> Tensor:
        return algebra.norm_diff(self, other)

    def round(
        self, 
        tol: float = 1e-10, 
        max_rank: int|None = None,
        verbose: bool = False
    ) -> "FunctionTrain":
        """Returns a train with (generally) lower ranks that 
        approximates the current train to a relative accuracy of `tol`.
        """
        options = RoundOptions(tol=tol, max_rank=max_rank, verbose=verbose)
        return rounding.round(self, options)

    def orthogonalise(self, direction: Direction) -> "FunctionTrain":
        """Left-orthogonalises (FORWARD) or right-orthogonalises 
        (BACKWARD) the cores of the train.
        """
        return rounding.orthogonalise(self, direction)

    def compress(self, tol: float = 0.0) -> "FunctionTrain":
        """Re-expresses each core in the smallest basis of its family 
        that retains all coefficients larger than `tol`.
        """
        return FunctionTrain([core.compress(tol) for core in self.cores])

    def multiply(self, other: "FunctionTrain", table=None) -> "FunctionTrain":
        return algebra.multiply(self, other, table=table)

    def scale(self, c: float) -> "FunctionTrain":
        return algebra.scale(self, c)

    def __add__(self, other):
        if isinstance(other, FunctionTrain):
            return algebra.add(self, other)
        return algebra.add(self, FunctionTrain.constant(other, self.bases))

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        if isinstance(other, FunctionTrain):
            return algebra.add(self, algebra.scale(other, -1.0))
        return self.__add__(-other)

    def __neg__(self) -> "FunctionTrain":
        return algebra.scale(self, -1.0)

    def __mul__(self, other):
        if isinstance(other, FunctionTrain):
            return algebra.multiply(self, other)
        return algebra.scale(self, other)

    def __rmul__(self, other):
        return algebra.scale(self, other)

    def __truediv__(self, c: float) -> "FunctionTrain":
        return algebra.scale(self, 1.0 / c)

    @staticmethod
    def parse_filename(fname: str) -> str:
        return fname if fname.endswith(".h5") else fname + ".h5"

    def save(self, fname: str) -> None:
        """Saves the train to an HDF5 file.
        
        Parameters
        ----------
        fname:
            The name of the file to save the train to.
        
        """
        
        d = {"dim": self.dim, "ranks": self.ranks, "cores": {}}
        for k, core in enumerate(self.cores):
            d["cores"][k] = {
                "type": POLY2NAME[type(core.basis)],
                "kwargs": core.basis.kwargs,
                "bounds": core.domain.bounds,
                "coeffs": core.coeffs
            }
        
        with h5py.File(FunctionTrain.parse_filename(fname), "w") as f:
            dict_to_h5(f, d)
        return

    @classmethod
    def load(cls, fname: str) -> "FunctionTrain":
        """Reads a train from an HDF5 file written using `save`."""

        with h5py.File(FunctionTrain.parse_filename(fname), "r") as f:
            d = h5_to_dict(f)

        cores = []
        for k in range(d["dim"]):
            d_k = d["cores"][str(k)]
            poly = NAME2POLY[d_k["type"]](**d_k.get("kwargs", {}))
            domain = BoundedDomain(bounds=d_k["bounds"])
            cores.append(Core(poly, domain, d_k["coeffs"]))
        
        train = cls(cores)
        if not torch.equal(train.ranks, d["ranks"].long()):
            msg = (f"Stored ranks {d['ranks'].tolist()} do not match " 
                   + f"ranks of stored cores {train.ranks.tolist()}.")
            raise RankMismatch(msg)
        return train

    @staticmethod
    def _univariate(
        func: UnivariateType, 
        bases: ApproxBases, 
        k: int
    ) -> UnivariateFunction:
        if isinstance(func, UnivariateFunction):
            return func
        poly, domain = bases[k]
        return UnivariateFunction.approximate(func, poly, domain)

    @staticmethod
    def _constant(value: float, bases: ApproxBases, k: int) -> UnivariateFunction:
        poly, domain = bases[k]
        return UnivariateFunction.constant(value, poly, domain)

    @classmethod
    def constant(cls, value: float, bases: ApproxBases) -> "FunctionTrain":
        """Returns the rank-1 train equal to a constant everywhere."""
        cores = [Core.from_functions([[cls._constant(value if k == 0 else 1.0, bases, k)]]) 
                 for k in range(bases.dim)]
        return cls(cores)

    @classmethod
    def zeros(cls, bases: ApproxBases) -> "FunctionTrain":
        """Returns the rank-1 train equal to zero everywhere."""
        return cls.constant(0.0, bases)

    @classmethod
    def rank_one(
        cls, 
        funcs: Sequence[UnivariateType], 
        bases: ApproxBases
    ) -> "FunctionTrain":
        """Returns the rank-1 train f(x) = f_1(x_1) f_2(x_2) ... f_d(x_d).
        """
        if len(funcs) != bases.dim:
            msg = f"Expected {bases.dim} functions (got {len(funcs)})."
            raise ShapeMismatch(msg)
        cores = [Core.from_functions([[cls._univariate(f, bases, k)]]) 
                 for k, f in enumerate(funcs)]
        return cls(cores)

    @classmethod
    def sum_of_univariates(
        cls, 
        funcs: Sequence[UnivariateType], 
        bases: ApproxBases
    ) -> "FunctionTrain":
        """Returns the rank-2 train f(x) = f_1(x_1) + ... + f_d(x_d).

        Parameters
        ----------
        funcs:
            The univariate functions. Each function is either a 
            UnivariateFunction or a callable, which is approximated in 
            the corresponding basis.
        bases:
            The basis and domain in each dimension.

        """

        dim = bases.dim
        if len(funcs) != dim:
            msg = f"Expected {dim} functions (got {len(funcs)})."
            raise ShapeMismatch(msg)

        fs = [cls._univariate(f, bases, k) for k, f in enumerate(funcs)]
        
        if dim == 1:
            return cls([Core.from_functions([[fs[0]]])])
        
        cores = []
        for k, f in enumerate(fs):
            one = cls._constant(1.0, bases, k)
            zero = cls._constant(0.0, bases, k)
            if k == 0:
                entries = [[f, one]]
            elif k == dim - 1:
                entries = [[one], [f]]
            else:
                entries = [[one, zero], [f, one]]
            cores.append(Core.from_functions(entries))
        return cls(cores)

    @classmethod
    def linear(
        cls, 
        slopes: Sequence[float]|Tensor, 
        bases: ApproxBases,
        offsets: Sequence[float]|Tensor|None = None
    ) -> "FunctionTrain":
        """Returns the rank-2 train 
        
        f(x) = sum_{k} (slopes[k] * x_k + offsets[k]).
        
        """
        
        slopes = torch.as_tensor(slopes, dtype=torch.get_default_dtype())
        if offsets is None:
            offsets = torch.zeros(bases.dim)
        offsets = torch.as_tensor(offsets, dtype=torch.get_default_dtype())

        if slopes.numel() != bases.dim or offsets.numel() != bases.dim:
            msg = f"Expected {bases.dim} slopes and offsets."
            raise ShapeMismatch(msg)
        
        funcs = [UnivariateFunction.linear(float(slopes[k]), float(offsets[k]), *bases[k]) 
                 for k in range(bases.dim)]
        return cls.sum_of_univariates(funcs, bases)

    @classmethod
    def quadratic(
        cls, 
        Q: Tensor, 
        centres: Tensor, 
        bases: ApproxBases
    ) -> "FunctionTrain":
        """Returns a train representing the quadratic form

        f(x) = (x - c)^T Q (x - c).

        The rank of the seam between dimensions k and k+1 is d-k+2 
        (for k = 1, 2, ..., d-1).

        Parameters
        ----------
        Q:
            A d * d matrix.
        centres:
            A d-dimensional vector containing the centre, c.
        bases:
            The basis and domain in each dimension. Each basis must be 
            able to represent quadratic functions exactly for the 
            representation to be exact.

        """

        dim = bases.dim
        if Q.shape != (dim, dim) or centres.numel() != dim:
            msg = (f"Expected {dim} * {dim} matrix and {dim}-dimensional " 
                   + "vector of centres.")
            raise ShapeMismatch(msg)

        # State at the seam before dimension k: the value accumulated 
        # so far, the linear coefficients of the remaining variables, 
        # and the constant 1.
        def states(k: int) -> List:
            if k == 0:
                return ["one"]
            if k == dim:
                return ["value"]
            return ["value"] + [("coef", m) for m in range(k, dim)] + ["one"]

        cores = []
        for k in range(dim):
            
            poly, domain = bases[k]
            c = float(centres[k])
            one = cls._constant(1.0, bases, k)
            zero = cls._constant(0.0, bases, k)
            ys = UnivariateFunction.approximate(lambda xs, c=c: xs - c, poly, domain)
            ys_sq = UnivariateFunction.approximate(lambda xs, c=c: (xs - c) ** 2, poly, domain)
            
            entries = []
            for row in states(k):
                entries_row = []
                for col in states(k+1):
                    if row == col:
                        f = one
                    elif row == ("coef", k) and col == "value":
                        f = ys
                    elif row == "one" and col == "value":
                        f = ys_sq.scale(float(Q[k, k]))
                    elif row == "one" and isinstance(col, tuple):
                        m = col[1]
                        f = ys.scale(float(Q[m, k] + Q[k, m]))
                    else:
                        f = zero
                    entries_row.append(f)
                entries.append(entries_row)
            
            cores.append(Core.from_functions(entries))

        return cls(cores)

    @classmethod
    def random(
        cls, 
        bases: ApproxBases, 
        ranks: Sequence[int]|Tensor, 
        generator: torch.Generator|None = None
    ) -> "FunctionTrain":
        """Returns a train with a given set of ranks, with normally 
        distributed coefficients.
        """
        
        ranks = [int(r) for r in ranks]
        if len(ranks) != bases.dim + 1:
            msg = f"Expected {bases.dim+1} ranks (got {len(ranks)})."
            raise RankMismatch(msg)
        if min(ranks) < 1:
            msg = "All ranks must be positive."
            raise InvalidArguments(msg)

        cardinalities = bases.get_cardinalities()
        cores = []
        for k in range(bases.dim):
            poly, domain = bases[k]
            shape = (ranks[k], int(cardinalities[k]), ranks[k+1])
            coeffs = torch.randn(shape, generator=generator) / (shape[1] * shape[2]) ** 0.5
            cores.append(Core(poly, domain, coeffs))
        return cls(cores)
