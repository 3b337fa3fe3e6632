import abc
from typing import Tuple

import torch
from torch import Tensor

from ..constants import EPS, ZERO_TOL


class Domain(abc.ABC):
    """Parent class for all approximation domains. Each domain is 
    related to the local domain, [-1, 1], through an affine mapping.
    """

    @property
    @abc.abstractmethod
    def bounds(self) -> Tensor:
        """The boundary of the approximation domain."""
        return

    @property
    @abc.abstractmethod
    def mean(self) -> Tensor:
        """The midpoint of the approximation domain."""
        return

    @property
    @abc.abstractmethod
    def dxdl(self) -> Tensor:
        """The gradient of the mapping from the local domain to the 
        approximation domain.
        """
        return

    @property
    def left(self) -> Tensor:
        """The left-hand boundary of the approximation domain."""
        return self.bounds[0]

    @property
    def right(self) -> Tensor:
        """The right-hand boundary of the approximation domain."""
        return self.bounds[1]

    def local2approx(self, ls: Tensor) -> Tuple[Tensor, Tensor]:
        """Maps a set of points in the local domain to the 
        approximation domain.

        Parameters
        ----------
        ls:
            An n-dimensional vector containing points from the local 
            domain.

        Returns
        -------
        xs:
            An n-dimensional vector containing the corresponding points 
            in the approximation domain.
        dxdls:
            An n-dimensional vector containing the gradient of the 
            mapping evaluated at each point.

        """
        xs = ls * self.dxdl + self.mean
        dxdls = torch.full(ls.shape, float(self.dxdl))
        return xs, dxdls

    def approx2local(self, xs: Tensor) -> Tuple[Tensor, Tensor]:
        """Maps a set of points in the approximation domain to the 
        local domain. Points that lie within a small tolerance of the 
        boundary are moved onto it.

        Parameters
        ----------
        xs:
            An n-dimensional vector containing points from the 
            approximation domain.

        Returns
        -------
        ls:
            An n-dimensional vector containing the corresponding points 
            in the local domain.
        dldxs:
            An n-dimensional vector containing the gradient of the 
            mapping evaluated at each point.

        """
        ls = (xs - self.mean) / self.dxdl
        ls = torch.where((ls < -1.0) & (ls > -1.0 - EPS), -1.0, ls)
        ls = torch.where((ls > 1.0) & (ls < 1.0 + EPS), 1.0, ls)
        dldxs = torch.full(xs.shape, 1.0 / float(self.dxdl))
        return ls, dldxs

    def matches(self, other: "Domain") -> bool:
        """Returns whether two domains have the same bounds."""
        return bool((self.bounds - other.bounds).abs().max() <= ZERO_TOL)
