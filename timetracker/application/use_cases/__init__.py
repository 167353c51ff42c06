"""
Application layer use cases.
"""

from .base_use_case import *
from .time_entry_use_cases import *
from .report_use_cases import *
