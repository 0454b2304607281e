"""Game domain services: word bank, room registry, roles and timers.

This package contains pure(ish) domain logic that is called by the socket
handlers and HTTP routes, keeping transport concerns separated from core
game mechanics.
"""
