"""Session coordinator package."""

from jellypick.coordinator.channel import LOBBY_UPDATE
from jellypick.coordinator.channel import PubSubChannel
from jellypick.coordinator.channel import SESSION_UPDATE
from jellypick.coordinator.service import CREATE_LOBBY
from jellypick.coordinator.service import JOIN_LOBBY
from jellypick.coordinator.service import JOIN_LOBBY_CODE
from jellypick.coordinator.service import LEAVE_LOBBY
from jellypick.coordinator.service import START_SESSION
from jellypick.coordinator.service import SUBMIT_VOTE
from jellypick.coordinator.service import SessionCoordinator

__all__ = [
    "CREATE_LOBBY",
    "JOIN_LOBBY",
    "JOIN_LOBBY_CODE",
    "LEAVE_LOBBY",
    "LOBBY_UPDATE",
    "PubSubChannel",
    "SESSION_UPDATE",
    "START_SESSION",
    "SUBMIT_VOTE",
    "SessionCoordinator",
]
