"""LeagueCast — sports-league backend with live change notifications.

Players, teams and matches live in a relational store behind a REST API.
Every player write is fanned out to connected WebSocket clients, and
push notifications can be relayed through an external messaging service.
"""

__version__ = "0.1.0"
