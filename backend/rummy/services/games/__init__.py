"""Game domain services: turns, tile transfers, lobby flow and per-player views.

This package holds the transport-free game mechanics. Every operation takes a
session (already locked by the caller), mutates it, and returns the list of
Outbound messages the socket layer should emit, keeping Socket.IO concerns
separated from the core rules.
"""
