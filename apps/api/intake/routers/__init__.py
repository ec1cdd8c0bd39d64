from .chat import router as chat_router
from .session import router as session_router
from .notes import router as notes_router

ROUTERS = (chat_router, session_router, notes_router)

__all__ = [
    "ROUTERS",
    "chat_router",
    "session_router",
    "notes_router",
]
