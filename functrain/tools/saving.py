from typing import Dict

import h5py
import torch
from torch import Tensor


def dict_to_h5(group: h5py.Group, d: Dict) -> None:
    """Writes a (nested) dictionary to an HDF5 group. Tensors are 
    stored as datasets, dictionaries as subgroups and all other values 
    as attributes.
    """
    for key, value in d.items():
        key = str(key)
        if isinstance(value, dict):
            dict_to_h5(group.create_group(key), value)
        elif isinstance(value, Tensor):
            group.create_dataset(key, data=value.detach().cpu().numpy())
        else:
            group.attrs[key] = value
    return


def h5_to_dict(group: h5py.Group) -> Dict:
    """Reads the contents of an HDF5 group (written using dict_to_h5) 
    into a dictionary.
    """
    d = {}
    for key, value in group.attrs.items():
        d[key] = value.item() if hasattr(value, "item") else value
    for key, value in group.items():
        if isinstance(value, h5py.Group):
            d[key] = h5_to_dict(value)
        else:
            d[key] = torch.tensor(value[()])
    return d
