from torch import Tensor 

import warnings


def check_finite(xs: Tensor) -> bool:
    """Checks whether there are any NAN or INF values in a tensor, and 
    warns the user if so. Returns whether all values are finite.
    """
    finite = True
    if (n_nans := int(xs.isnan().sum())) > 0:
        msg = f"{n_nans} NAN values detected."
        warnings.warn(msg)
        finite = False
    if (n_infs := int(xs.isinf().sum())) > 0:
        msg = f"{n_infs} INF values detected."
        warnings.warn(msg)
        finite = False
    return finite
