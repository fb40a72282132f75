"""Session state carried across requests by the session-store collaborator."""

from shared_kernel.session.value_objects import FlashLevel, FlashMessage, SessionData

__all__ = ["FlashLevel", "FlashMessage", "SessionData"]
