import torch

from .recurr import Recurr
from ..errors import InvalidArguments


class Legendre(Recurr):
    """Legendre polynomials, normalised such that they are orthonormal 
    with respect to the weight function lambda(l) = 1/2.
    
    Parameters
    ----------
    order:
        The maximum order of the polynomials.
        
    """

    def __init__(self, order: int):
        if order < 0:
            msg = "Order of polynomials must be non-negative."
            raise InvalidArguments(msg)
        a, b, c, norm = Legendre.recurrence(order+1)
        Recurr.__init__(self, order, a, b, c, norm)
        return

    @staticmethod
    def recurrence(n: int):
        n = torch.arange(n)
        a = (2*n + 1) / (n + 1)
        b = torch.zeros(n.shape)
        c = n / (n + 1)
        norm = torch.sqrt(2*n + 1)
        return a, b, c, norm
