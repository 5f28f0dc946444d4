"""
This module defines helping utilities shared by the tasks.

"""

# relative
from .context import *
from .exceptions import *
from .types import *
from .utils import *
from .utils_paths import *
from .utils_shell import *
