"""Blueprint table of the SimpleCards API.

Every feature package under ``simplecards_app.modules`` exposes one blueprint.
The table below says where it lives and where it is mounted; the application
factory mounts them all through :func:`register_default_modules`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from flask import Blueprint, Flask
from werkzeug.utils import import_string


@dataclass(frozen=True)
class ModuleDefinition:
    """A blueprint given as ``"package.routes:attribute"`` plus its mount point."""

    target: str
    url_prefix: Optional[str] = None

    def load_blueprint(self) -> Blueprint:
        blueprint = import_string(self.target)
        if not isinstance(blueprint, Blueprint):
            raise TypeError(f"{self.target} is {type(blueprint).__name__}, not a Flask Blueprint")
        return blueprint


def register_modules(app: Flask, modules: Sequence[ModuleDefinition]) -> None:
    for module in modules:
        blueprint = module.load_blueprint()
        app.register_blueprint(blueprint, url_prefix=module.url_prefix)
        app.logger.debug("Mounted %s at %s", blueprint.name, module.url_prefix or "/")


def register_default_modules(app: Flask) -> None:
    register_modules(app, DEFAULT_MODULES)


DEFAULT_MODULES: Tuple[ModuleDefinition, ...] = (
    ModuleDefinition("simplecards_app.modules.health.routes:health_bp"),
    ModuleDefinition("simplecards_app.modules.auth.routes:auth_bp", "/api/user"),
    ModuleDefinition("simplecards_app.modules.card_modules.routes:modules_bp", "/api/modules"),
    ModuleDefinition("simplecards_app.modules.cards.routes:cards_bp", "/api/modules/<module_uuid>/cards"),
)
