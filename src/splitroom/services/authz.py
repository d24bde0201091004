from __future__ import annotations

from splitroom.errors import RoomInactive, SelfSettlementNotAllowed, UnknownParticipant
from splitroom.models import Participant, Room


def assert_room_participant(room: Room, participant_id: str) -> Participant:
    participant = room.get_participant(participant_id)
    if participant is None:
        raise UnknownParticipant(participant_id)
    return participant


def assert_room_active(room: Room) -> None:
    if not room.is_active:
        raise RoomInactive()


def assert_can_request_payment(room: Room, requester_id: str, participant_id: str) -> tuple[Participant, Participant]:
    requester = assert_room_participant(room, requester_id)
    participant = assert_room_participant(room, participant_id)
    if requester.id == participant.id:
        raise SelfSettlementNotAllowed(participant.id)
    return requester, participant
