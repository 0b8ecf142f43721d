from __future__ import annotations

from flask import Flask

from ..catalog.controller import register_catalog
from ..container import Container


def register(app: Flask, container: Container) -> None:
    register_catalog(app, container.project_service, path="projects", name="project")
