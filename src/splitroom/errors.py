"""Error hierarchy for room sessions.

``RoomLogicError`` subclasses mean the caller drove the core with state that does not
match the room (bad index, unknown participant, ...). ``RoomServiceError`` subclasses come
from the remote room resource and carry a message fit for showing to the user.
"""

from __future__ import annotations


class SplitRoomError(Exception):
    pass


class RoomLogicError(SplitRoomError):
    pass


class InvalidIndex(RoomLogicError, IndexError):
    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"item index {index} is out of range for a receipt of {size} items")
        self.index = index
        self.size = size


class UnknownParticipant(RoomLogicError, LookupError):
    def __init__(self, participant_id: str) -> None:
        super().__init__(f"participant {participant_id!r} is not in this room")
        self.participant_id = participant_id


class DegenerateRoom(RoomLogicError, ValueError):
    pass


class SelfSettlementNotAllowed(RoomLogicError, PermissionError):
    def __init__(self, participant_id: str) -> None:
        super().__init__(f"participant {participant_id!r} cannot request payment from themselves")
        self.participant_id = participant_id


class RoomServiceError(SplitRoomError):
    default_message = "The room service could not complete the request."

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        self.status_code = status_code
        super().__init__(self.message)


class TransportError(RoomServiceError):
    default_message = "Unable to connect to server. Please check your internet connection."


class NotFound(RoomServiceError):
    default_message = "Room not found"


class RoomInactive(RoomServiceError):
    default_message = "This room is no longer active"


class UnsupportedMediaType(RoomServiceError):
    default_message = "Please upload only JPEG or PNG images"


class ParseFailed(RoomServiceError):
    default_message = "Could not read any items from the receipt"
