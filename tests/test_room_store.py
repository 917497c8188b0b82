"""Tests for RoomStore ownership and membership rules."""
from chatrooms.core.results import ErrorCode
from chatrooms.models.models import RoomPayload
from tests.conftest import ALICE, BOB, CAROL, send

PAYLOAD = RoomPayload(title="General", description="Chat", avatar="a.png")


class TestCreateAndGet:

    def test_create_sets_owner_and_first_member(self, rooms, clock):
        result = rooms.create(PAYLOAD, ALICE)
        assert result.success
        room = result.data
        assert room.id == "id-1"
        assert room.owner == ALICE
        assert room.members == [ALICE]
        assert room.created_at == clock()
        assert room.updated_at is None

    def test_get_round_trip(self, rooms):
        created = rooms.create(PAYLOAD, ALICE).data
        result = rooms.get(created.id)
        assert result.success
        fetched = result.data
        assert (fetched.title, fetched.description, fetched.avatar) == ("General", "Chat", "a.png")
        assert fetched.created_at == created.created_at
        assert fetched.updated_at is None

    def test_get_missing(self, rooms):
        result = rooms.get("nope")
        assert not result.success
        assert result.error_code == ErrorCode.NOT_FOUND
        assert result.error == "A room with id=nope was not found."

    def test_ids_are_unique(self, rooms):
        first = rooms.create(PAYLOAD, ALICE).data
        second = rooms.create(PAYLOAD, ALICE).data
        assert first.id != second.id
        assert rooms.count() == 2


class TestListForCaller:

    def test_only_member_rooms(self, rooms):
        mine = rooms.create(PAYLOAD, ALICE).data
        rooms.create(PAYLOAD, BOB)

        listed = rooms.list_for_caller(ALICE).data
        assert [r.id for r in listed] == [mine.id]
        assert rooms.list_for_caller(CAROL).data == []

    def test_added_member_sees_room(self, rooms):
        created = rooms.create(PAYLOAD, ALICE).data
        assert rooms.list_for_caller(BOB).data == []

        rooms.add_member(created.id, BOB, ALICE)
        assert [r.id for r in rooms.list_for_caller(BOB).data] == [created.id]


class TestUpdate:

    def test_owner_updates_fields_and_timestamp(self, rooms, clock):
        created = rooms.create(PAYLOAD, ALICE).data
        later = clock.advance(60)

        result = rooms.update(created.id, RoomPayload(title="Renamed", description="New", avatar="b.png"), ALICE)
        assert result.success
        updated = result.data
        assert (updated.title, updated.description, updated.avatar) == ("Renamed", "New", "b.png")
        assert updated.updated_at == later
        assert updated.created_at == created.created_at
        assert rooms.get(created.id).data == updated

    def test_non_owner_rejected_and_room_unchanged(self, room, rooms):
        before = rooms.get(room.id).data

        result = rooms.update(room.id, RoomPayload(title="Hijacked"), BOB)
        assert result.error_code == ErrorCode.UNAUTHORIZED
        assert result.error == "You are not authorized to update the room."
        assert rooms.get(room.id).data == before

    def test_missing_room(self, rooms):
        result = rooms.update("nope", PAYLOAD, ALICE)
        assert result.error_code == ErrorCode.NOT_FOUND
        assert result.error == "Couldn't update a room with id=nope. Room not found."

    def test_updated_at_never_goes_backwards(self, rooms, clock):
        created = rooms.create(PAYLOAD, ALICE).data
        first = rooms.update(created.id, PAYLOAD, ALICE).data.updated_at

        clock.advance(-3600)
        second = rooms.update(created.id, PAYLOAD, ALICE).data.updated_at
        assert second >= first >= created.created_at


class TestAddMember:

    def test_owner_adds_member(self, rooms):
        created = rooms.create(PAYLOAD, ALICE).data
        result = rooms.add_member(created.id, BOB, ALICE)
        assert result.success
        assert result.data.members == [ALICE, BOB]
        assert ALICE in result.data.members
        # membership changes do not touch updated_at
        assert result.data.updated_at is None

    def test_non_owner_rejected(self, room, rooms):
        result = rooms.add_member(room.id, CAROL, BOB)
        assert result.error_code == ErrorCode.UNAUTHORIZED
        assert result.error == "You are not the owner of the room."
        assert CAROL not in rooms.get(room.id).data.members

    def test_duplicate_member_is_appended(self, room, rooms):
        result = rooms.add_member(room.id, BOB, ALICE)
        assert result.data.members == [ALICE, BOB, BOB]

    def test_missing_room(self, rooms):
        result = rooms.add_member("nope", BOB, ALICE)
        assert result.error_code == ErrorCode.NOT_FOUND


class TestDelete:

    def test_owner_deletes(self, room, rooms):
        result = rooms.delete(room.id, ALICE)
        assert result.success
        assert result.data == "Successfully deleted the room."
        assert rooms.get(room.id).error_code == ErrorCode.NOT_FOUND

    def test_non_owner_rejected(self, room, rooms):
        result = rooms.delete(room.id, BOB)
        assert result.error_code == ErrorCode.UNAUTHORIZED
        assert result.error == "You are not authorized to delete the room."
        assert rooms.get(room.id).success

    def test_missing_room(self, rooms):
        result = rooms.delete("nope", ALICE)
        assert result.error_code == ErrorCode.NOT_FOUND
        assert result.error == "couldn't delete a room with id=nope. Room not found"

    def test_cascades_to_messages(self, room, rooms, messages):
        other = rooms.create(PAYLOAD, ALICE).data
        send(messages, room.id, ALICE)
        send(messages, room.id, BOB)
        kept = send(messages, other.id, ALICE)

        rooms.delete(room.id, ALICE)

        assert messages.count() == 1
        assert messages.list_for_room(other.id, ALICE).data == [kept]
        assert messages.list_for_room(room.id, BOB).error_code == ErrorCode.NOT_FOUND
