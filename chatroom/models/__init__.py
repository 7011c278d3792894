from chatroom.models.user import User, now_iso
from chatroom.models.message import Message, SYSTEM_USER_ID, SYSTEM_USERNAME
from chatroom.models.events import JoinPayload, SendMessagePayload

__all__ = [
    "User",
    "Message",
    "JoinPayload",
    "SendMessagePayload",
    "SYSTEM_USER_ID",
    "SYSTEM_USERNAME",
    "now_iso",
]
