from .printing import adapt_info, dmrg_info, round_info
from .saving import dict_to_h5, h5_to_dict
from .verification import check_finite
