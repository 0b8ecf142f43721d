from __future__ import annotations

from flask import Flask

from ..catalog.controller import register_catalog
from ..container import Container


def register(app: Flask, container: Container) -> None:
    register_catalog(app, container.task_type_service, path="task-types", name="task_type")
