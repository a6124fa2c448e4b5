"""Domain layer (pure logic).

- Keep prediction and scratch-card rules and calculations here.
- Avoid I/O: no DB sessions, no HTTP/FastAPI, no outbound API calls.
- Prefer deterministic functions (the current instant is passed in as an argument).
"""
