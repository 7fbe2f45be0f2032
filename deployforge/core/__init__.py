"""Core workflow engine: errors, hashing, state machine, orchestrator."""
