"""
Application layer DTOs.
Data Transfer Objects for API requests and responses.
"""

from .base_dto import *
from .time_entry_dto import *
from .report_dto import *
