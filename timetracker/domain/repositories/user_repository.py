"""User repository interface.
Source of stored roles and reporting lines for authorization.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class UserRepository(ABC):

    @abstractmethod
    async def get_stored_role(self, user_id: str) -> Optional[str]:
        """
        Role recorded for the user in persistence.
        Returns None for unknown users or users without a role.
        """
        pass

    @abstractmethod
    async def find_direct_report_ids(self, manager_id: str) -> List[str]:
        """IDs of users whose manager is ``manager_id``."""
        pass
