"""
Realtime synchronization core.

Sessions, the registry of who is online, presence and broadcast fan-out, the
per-identity rate limiter, the board mutation pipeline and the event router
that ties them together.
"""
