"""Project repository interface.
Projects are read-only from the time tracker's point of view.
"""

from abc import ABC, abstractmethod
from typing import Collection, Dict, Optional

from timetracker.domain.models.project import Project


class ProjectRepository(ABC):
    """Read access to projects and their clients."""

    @abstractmethod
    async def exists(self, project_id: str) -> bool:
        pass

    @abstractmethod
    async def get(self, project_id: str) -> Optional[Project]:
        """
        Find a project by its ID.
        Returns None if not found.
        """
        pass

    @abstractmethod
    async def find_by_ids(self, project_ids: Collection[str]) -> Dict[str, Project]:
        """
        Find several projects at once, keyed by ID.
        Unknown IDs are left out of the result.
        """
        pass
