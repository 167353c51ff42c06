"""
Project read model.
Projects and clients are owned elsewhere; the time tracker only reads them.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Project:
    """A project time can be tracked against, with its client's name."""
    
    id: str
    name: str
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    active: bool = True
