from .chat import (
    ChatProvider,
    ChatServiceError,
    ChatRateLimitError,
    ChatConfigError,
    MockChatProvider,
    get_chat_provider,
)

__all__ = [
    "ChatProvider",
    "ChatServiceError",
    "ChatRateLimitError",
    "ChatConfigError",
    "MockChatProvider",
    "get_chat_provider",
]
