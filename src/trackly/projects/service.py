from __future__ import annotations

from ..catalog.service import CatalogService
from ..core.enums import Collection


class ProjectService(CatalogService):
    entity = "Project"
    collection = Collection.PROJECTS
