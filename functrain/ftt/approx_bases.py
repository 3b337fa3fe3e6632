from typing import List, Tuple

import torch
from torch import Tensor

from ..domains import Domain
from ..errors import DomainMismatch, ShapeMismatch
from ..polynomials import Basis1D


PolyType = Basis1D | List[Basis1D]
DomainType = Domain | List[Domain]


class ApproxBases():

    def __init__(self, polys: PolyType, domains: DomainType, dim: int):
        """Class containing a set of univariate bases (one for each 
        dimension) and the mappings between the local domain and the 
        approximation domain in each dimension.

        Parameters
        ----------
        polys:
            Univariate basis functions, defined on the local domain. 
            If a single basis is passed in, it is used for every 
            dimension.
        domains:
            The approximation domain in each dimension. If a single 
            domain is passed in, it is used for every dimension.
        dim:
            The dimension of the approximation domain.
        
        """
        
        if isinstance(polys, Basis1D):
            polys = [polys]
        if isinstance(domains, Domain):
            domains = [domains]

        polys = list(polys)
        domains = list(domains)

        if len(domains) == 1:
            domains *= dim
        if len(polys) == 1:
            polys *= dim

        if len(domains) != dim:
            msg = ("Dimension of domain does not equal specified " 
                   + f"dimension (expected {dim}, got {len(domains)}).")
            raise ShapeMismatch(msg)
        
        if len(polys) != dim:
            msg = ("Dimension of polynomials does not equal specified " 
                   + f"dimension (expected {dim}, got {len(polys)}).")
            raise ShapeMismatch(msg)

        self.dim = dim
        self.domains = domains 
        self.polys = polys
        return

    def __getitem__(self, k: int) -> Tuple[Basis1D, Domain]:
        return self.polys[k], self.domains[k]

    def get_cardinalities(self) -> Tensor:
        """Returns the cardinality of the basis in each dimension."""
        return torch.tensor([poly.cardinality for poly in self.polys])

    def check_compatible(self, other: "ApproxBases") -> None:
        """Raises a DomainMismatch error if the bases in any dimension 
        cannot be combined with the bases of another set.
        """
        if self.dim != other.dim:
            msg = f"Dimensions do not match ({self.dim} vs {other.dim})."
            raise DomainMismatch(msg)
        for k in range(self.dim):
            self.polys[k].check_compatible(other.polys[k])
            if not self.domains[k].matches(other.domains[k]):
                msg = f"Domains in dimension {k} do not match."
                raise DomainMismatch(msg)
        return
