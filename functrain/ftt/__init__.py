from .approx_bases import ApproxBases
from .univariate import UnivariateFunction
from .core import Core
from .function_train import FunctionTrain
from .algebra import add, evaluate, gradient, inner, integrate, multiply, norm, norm_diff, scale
from .rounding import orthogonalise, orthogonalise_left, orthogonalise_right, round, truncate_svd
from .dmrg import dmrg_approx, sweep_lr, sweep_lrl, sweep_rl, update_all_right, update_left, update_right
from .rank_adapt import adapt_ranks, pad_ranks
