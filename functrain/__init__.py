import torch
torch.set_default_dtype(torch.float64)

from .directions import Direction
from .domains import BoundedDomain, Domain
from .errors import (
    AllocationFailure,
    DomainMismatch,
    FunctionTrainError,
    InvalidArguments,
    LinearAlgebraFailure,
    NumericDegeneracy,
    RankMismatch,
    ShapeMismatch
)
from .ftt import (
    ApproxBases,
    Core,
    FunctionTrain,
    UnivariateFunction,
    adapt_ranks,
    add,
    dmrg_approx,
    evaluate,
    gradient,
    inner,
    integrate,
    multiply,
    norm,
    norm_diff,
    orthogonalise,
    pad_ranks,
    round,
    scale,
    truncate_svd,
    update_all_right
)
from .options import DMRGOptions, RankAdaptOptions, RoundOptions
from .polynomials import (
    Basis1D,
    Fourier,
    Lagrange1,
    Legendre,
    ProductTable,
    Recurr,
    Spectral
)
