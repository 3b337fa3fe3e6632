from .basis_1d import Basis1D
from .spectral import Spectral
from .recurr import Recurr
from .legendre import Legendre
from .fourier import Fourier
from .lagrange_1 import Lagrange1
from .product_table import ProductTable


POLY2NAME = {
    Legendre: "legendre",
    Fourier: "fourier",
    Lagrange1: "lagrange1"
}

NAME2POLY = {v: k for k, v in POLY2NAME.items()}
