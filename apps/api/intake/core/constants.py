"""Shared API constants."""

# Fence markers the interview prompt asks the model to use for structured notes.
RESUME_JSON_MARKER = "resume-json"
GENERIC_JSON_MARKER = "json"

# Labels for gaps in the user's notes (fed back into the system prompt and session summary)
MISSING_PROFILE = "profile (bio, role, or skills)"
MISSING_WORK_EXPERIENCE = "work experience"
MISSING_PROJECTS = "projects"

SESSION_STATUS_ACTIVE = "active"
SESSION_STATUS_ENDED = "ended"

SESSION_LIST_LIMIT = 50

# Deterministic replies when LLM_MODE=mock (no external API calls)
MOCK_CHAT_MESSAGE = (
    "This is a mock response for local development. Your message was received. "
    "Set LLM_MODE=remote to use the real model."
)
MOCK_SESSION_SUMMARY = (
    "Session wrapped up (mock mode). We captured what you shared. Come back anytime to add more."
)
FALLBACK_SESSION_SUMMARY = (
    "Thanks for chatting! Everything you shared is saved in your notes. "
    "Come back anytime to pick up where we left off."
)
