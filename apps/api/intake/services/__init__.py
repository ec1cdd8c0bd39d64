"""Business logic: exchange orchestration, sessions, transcripts, notes."""
