from .round_options import RoundOptions
from .dmrg_options import DMRGOptions
from .rank_adapt_options import RankAdaptOptions
