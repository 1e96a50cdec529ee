# Routers package
from . import users_router

__all__ = [
    "users_router",
]
