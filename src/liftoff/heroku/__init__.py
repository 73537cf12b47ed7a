"""Heroku API access."""

from .client import ApiResponse, HerokuApi, HttpHerokuApi

__all__ = ["ApiResponse", "HerokuApi", "HttpHerokuApi"]
