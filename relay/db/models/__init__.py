from relay.db.models.room import Room
from relay.db.models.message import Message
from relay.db.models.profile import Profile

__all__ = ["Room", "Message", "Profile"]
