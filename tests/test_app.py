from factories import item, receipt, room
from splitroom.app import report
from splitroom.config import Settings
from splitroom.session import RoomSession


class StaticService:
    async def get_room(self, room_id):
        return room(receipt=receipt([item(0, "Pizza", "300", tags={"b"})], service_charge="30"))


def test_report_prints_room_card(capsys):
    current = room(receipt=receipt([item(0, "Pizza", "300", tags={"b"})], service_charge="30"))
    session = RoomSession(StaticService(), current, "a")  # type: ignore[arg-type]

    report(session, Settings(_env_file=None, TZ="Asia/Kolkata", CURRENCY="INR"))

    out = capsys.readouterr().out
    assert "Dinner" in out
    assert "- B, share 310.00 INR" in out
