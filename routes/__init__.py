# Routes package __init__.py - re-exports routers for main.py convenience
from .revision import router as revision_router
from .plans import router as plans_router
from .quiz import router as quiz_router
from .bookmarks import router as bookmarks_router
from .chapters import router as chapters_router

__all__ = ['revision_router', 'plans_router', 'quiz_router', 'bookmarks_router', 'chapters_router']
