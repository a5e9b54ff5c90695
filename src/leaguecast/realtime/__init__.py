"""Real-time infrastructure — in-process broadcaster + WebSocket.

Learn: Events flow through one hop:
1. Services → EventBroadcaster.broadcast() after a committed write
2. EventBroadcaster → every registered WebSocket client

There is no broker in between: one process owns all live connections,
and a client that is offline when an event fires simply misses it
(it can always re-fetch GET /players to catch up).
"""
