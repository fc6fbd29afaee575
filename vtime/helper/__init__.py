from .config import logger
from .constants import FREQUENCIES, WEEKDAYS, ValueType
from .converter import num_to_digits, to_list, to_vname
from .time_funcs import split_delta
