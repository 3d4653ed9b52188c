"""HTTP API for saved scores."""
from .server import create_api_blueprint, create_app, register_api

__all__ = ['create_api_blueprint', 'create_app', 'register_api']
