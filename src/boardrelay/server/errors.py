from __future__ import annotations


class BoardError(Exception):
    """Base class for relay errors. None of these are ever sent to a peer."""


class Unauthenticated(BoardError):
    """Upgrade request carries no created session; the connection is never admitted."""


class DuplicateConnection(BoardError):
    """A connection was admitted twice."""


class MalformedMessage(BoardError):
    """Inbound payload is not JSON or lacks a string `type` tag. Logged and dropped."""

    def __init__(self, reason: str, payload: object = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.payload = payload
