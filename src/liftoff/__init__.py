"""Liftoff - deployment lifecycle wrapper around the Heroku platform API."""

__version__ = "0.1.0"
__author__ = "Liftoff Core Team"

from liftoff.core.config import Settings
from liftoff.wrapper import HerokuWrapper

__all__ = ["Settings", "HerokuWrapper", "__version__"]
