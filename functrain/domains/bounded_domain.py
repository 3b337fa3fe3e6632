import torch
from torch import Tensor

from .domain import Domain
from ..errors import InvalidArguments


class BoundedDomain(Domain):
    """A bounded interval, [a, b], of the real line.

    Parameters
    ----------
    bounds:
        A two-dimensional vector containing the left- and right-hand 
        boundaries of the interval. Defaults to [-1, 1].

    """

    def __init__(self, bounds: Tensor|None = None):

        if bounds is None:
            bounds = torch.tensor([-1.0, 1.0])
        bounds = torch.as_tensor(bounds, dtype=torch.get_default_dtype())

        if bounds.numel() != 2:
            msg = "Bounds should contain exactly two values."
            raise InvalidArguments(msg)

        if bounds[0] >= bounds[1]:
            msg = "Left-hand bound must be less than right-hand bound."
            raise InvalidArguments(msg)

        self._bounds = bounds
        self._mean = self.bounds.mean()
        self._dxdl = 0.5 * (self.bounds[1] - self.bounds[0])
        return

    @property
    def bounds(self) -> Tensor:
        return self._bounds

    @property
    def mean(self) -> Tensor:
        return self._mean

    @property
    def dxdl(self) -> Tensor:
        return self._dxdl

    def __repr__(self) -> str:
        return f"BoundedDomain([{float(self.left)}, {float(self.right)}])"
