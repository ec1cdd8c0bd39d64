"""Story Intake API: conversational career interview with structured note capture."""
