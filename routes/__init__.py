# Routes package __init__.py - re-exports routers for main.py convenience
from .auth import router as auth_router
from .themes import router as themes_router
from .game import router as game_router
from .stats import router as stats_router

__all__ = ['auth_router', 'themes_router', 'game_router', 'stats_router']
