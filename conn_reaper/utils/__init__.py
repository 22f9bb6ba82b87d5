from .net import parse_addr, split_pair
from .path import to_abs_path
