"""Unit tests for the MongoDB UserRepository (motor collection mocked)."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from userstore.domain.user.core.entities.user import User
from userstore.domain.user.core.exceptions.user_errors import UserNotFoundError
from userstore.infrastructure.user.mongo_user_repository import UserRepository

USER_OID = ObjectId("65f1c0ffee0000000000abcd")


def make_document(**overrides):
    document = {
        "_id": USER_OID,
        "firstName": "A",
        "lastName": "B",
        "email": "a@x.com",
        "avatar": None,
        "avatarHash": None,
        "avatarBase64": None,
        "userId": "u1",
    }
    document.update(overrides)
    return document


@pytest.fixture
def collection():
    """Motor collection double."""
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=USER_OID))
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.find_one_and_delete = AsyncMock(return_value=None)
    collection.create_index = AsyncMock()
    collection.find.return_value.to_list = AsyncMock(return_value=[])
    return collection


@pytest.fixture
def db(collection):
    db = MagicMock()
    db.__getitem__.return_value = collection
    return db


@pytest.fixture
def repository(db):
    return UserRepository(db)


class TestUserRepositoryInit:
    """Test repository wiring."""

    def test_uses_users_collection(self, db, collection, repository):
        db.__getitem__.assert_called_once_with("users")
        assert repository.collection is collection

    @pytest.mark.asyncio
    async def test_ensure_indexes_runs_once(self, repository, collection):
        await repository.ensure_indexes()
        await repository.ensure_indexes()

        assert collection.create_index.await_count == 3
        keys = [call.args[0] for call in collection.create_index.await_args_list]
        assert keys == ["email", "userId", "externalId"]


class TestUserRepositoryCreate:
    """Test create()."""

    @pytest.mark.asyncio
    async def test_create_persists_all_fields(self, repository, collection, sample_user):
        created = await repository.create(sample_user)

        inserted = collection.insert_one.await_args.args[0]
        assert inserted["firstName"] == "A"
        assert inserted["lastName"] == "B"
        assert inserted["email"] == "a@x.com"
        assert inserted["userId"] == "u1"
        assert inserted["avatarHash"] is None
        assert "externalId" not in inserted

        assert created.id == str(USER_OID)
        assert created.first_name == sample_user.first_name
        assert created.email == sample_user.email
        assert created.user_id == "u1"

    @pytest.mark.asyncio
    async def test_create_ignores_caller_id(self, repository, collection):
        user = User(id="caller-chosen", first_name="A", last_name="B", email="a@x.com")

        created = await repository.create(user)

        assert "_id" not in collection.insert_one.await_args.args[0]
        assert created.id == str(USER_OID)


class TestUserRepositoryReads:
    """Test find_* operations."""

    @pytest.mark.asyncio
    async def test_find_all_maps_documents_in_store_order(self, repository, collection):
        second_oid = ObjectId()
        collection.find.return_value.to_list.return_value = [
            make_document(),
            make_document(_id=second_oid, email="b@x.com", userId=None),
        ]

        users = await repository.find_all()

        collection.find.assert_called_once_with({})
        assert [u.id for u in users] == [str(USER_OID), str(second_oid)]
        assert users[1].user_id is None

    @pytest.mark.asyncio
    async def test_find_all_empty(self, repository):
        assert await repository.find_all() == []

    @pytest.mark.asyncio
    async def test_find_by_id_found(self, repository, collection):
        collection.find_one.return_value = make_document()

        user = await repository.find_by_id(str(USER_OID))

        collection.find_one.assert_awaited_once_with({"_id": USER_OID})
        assert user == User(
            id=str(USER_OID),
            first_name="A",
            last_name="B",
            email="a@x.com",
            user_id="u1",
        )

    @pytest.mark.asyncio
    async def test_find_by_id_missing_returns_none(self, repository):
        assert await repository.find_by_id(str(ObjectId())) is None

    @pytest.mark.asyncio
    async def test_find_by_id_malformed_returns_none(self, repository, collection):
        assert await repository.find_by_id("not-an-object-id") is None
        collection.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_optional_fields_become_none(self, repository, collection):
        document = make_document(avatar="", avatarHash="", userId="")
        del document["avatarBase64"]
        collection.find_one.return_value = document

        user = await repository.find_by_id(str(USER_OID))

        assert user.avatar is None
        assert user.avatar_hash is None
        assert user.avatar_base64 is None
        assert user.user_id is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, key",
        [
            ("find_by_user_id", "userId"),
            ("find_by_email", "email"),
            ("find_by_external_id", "externalId"),
        ],
    )
    async def test_find_by_field(self, repository, collection, method, key):
        collection.find_one.return_value = make_document(externalId="idp|1")

        user = await getattr(repository, method)("value")

        collection.find_one.assert_awaited_once_with({key: "value"})
        assert user.id == str(USER_OID)

    @pytest.mark.asyncio
    async def test_find_by_email_missing_returns_none(self, repository):
        assert await repository.find_by_email("nobody@x.com") is None


class TestUserRepositoryUpdate:
    """Test update()."""

    @pytest.mark.asyncio
    async def test_update_sets_translated_fields(self, repository, collection):
        collection.find_one_and_update.return_value = make_document(firstName="Ada")

        user = await repository.update(str(USER_OID), {"first_name": "Ada"})

        collection.find_one_and_update.assert_awaited_once_with(
            {"_id": USER_OID},
            {"$set": {"firstName": "Ada"}},
            return_document=ReturnDocument.AFTER,
        )
        assert user.first_name == "Ada"

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self, repository):
        assert await repository.update(str(ObjectId()), {"email": "new@x.com"}) is None

    @pytest.mark.asyncio
    async def test_update_malformed_id_returns_none(self, repository, collection):
        assert await repository.update("bogus", {"email": "new@x.com"}) is None
        collection.find_one_and_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_with_no_changes_reads_current_state(self, repository, collection):
        collection.find_one.return_value = make_document()

        user = await repository.update(str(USER_OID), {})

        collection.find_one_and_update.assert_not_awaited()
        assert user.id == str(USER_OID)

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_fields(self, repository, collection):
        with pytest.raises(ValueError, match="id"):
            await repository.update(str(USER_OID), {"id": "other"})
        collection.find_one_and_update.assert_not_awaited()


class TestUserRepositoryAvatar:
    """Test avatar mutations."""

    @pytest.mark.asyncio
    async def test_update_avatar_sets_hash_and_base64(self, repository, collection):
        collection.find_one_and_update.return_value = make_document(
            avatarHash="h2", avatarBase64="b64"
        )

        user = await repository.update_avatar("u1", "h2", "b64")

        collection.find_one_and_update.assert_awaited_once_with(
            {"userId": "u1"},
            {"$set": {"avatarHash": "h2", "avatarBase64": "b64"}},
            return_document=ReturnDocument.AFTER,
        )
        assert user.avatar_hash == "h2"
        assert user.avatar_base64 == "b64"

    @pytest.mark.asyncio
    async def test_update_avatar_hash_leaves_base64(self, repository, collection):
        collection.find_one_and_update.return_value = make_document(
            avatarHash="h3", avatarBase64="old"
        )

        user = await repository.update_avatar_hash("u1", "h3")

        update = collection.find_one_and_update.await_args.args[1]
        assert update == {"$set": {"avatarHash": "h3"}}
        assert user.avatar_hash == "h3"
        assert user.avatar_base64 == "old"

    @pytest.mark.asyncio
    async def test_remove_avatar_unsets_fields(self, repository, collection):
        collection.find_one_and_update.return_value = make_document()

        user = await repository.remove_avatar("u1")

        update = collection.find_one_and_update.await_args.args[1]
        assert update == {"$unset": {"avatarHash": "", "avatarBase64": ""}}
        assert user.avatar_hash is None
        assert user.avatar_base64 is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, args",
        [
            ("update_avatar", ("h", "b64")),
            ("update_avatar_hash", ("h",)),
            ("remove_avatar", ()),
        ],
    )
    async def test_avatar_mutation_unknown_user_raises(self, repository, method, args):
        with pytest.raises(UserNotFoundError) as exc_info:
            await getattr(repository, method)("ghost", *args)

        assert exc_info.value.identifier == "ghost"
        assert "ghost" in str(exc_info.value)


class TestUserRepositoryDelete:
    """Test delete()."""

    @pytest.mark.asyncio
    async def test_delete_existing(self, repository, collection):
        collection.find_one_and_delete.return_value = make_document()

        assert await repository.delete(str(USER_OID)) is None
        collection.find_one_and_delete.assert_awaited_once_with({"_id": USER_OID})

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, repository, collection):
        await repository.delete(str(ObjectId()))

        collection.find_one_and_delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_malformed_id_is_noop(self, repository, collection):
        await repository.delete("bogus")

        collection.find_one_and_delete.assert_not_awaited()


class TestUserRepositoryStorageErrors:
    """Storage errors reach the caller unchanged."""

    @pytest.mark.asyncio
    async def test_find_error_propagates(self, repository, collection):
        error = PyMongoError("connection reset")
        collection.find_one.side_effect = error

        with pytest.raises(PyMongoError) as exc_info:
            await repository.find_by_email("a@x.com")

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_avatar_update_error_is_not_wrapped(self, repository, collection):
        collection.find_one_and_update.side_effect = PyMongoError("write conflict")

        with pytest.raises(PyMongoError):
            await repository.update_avatar("u1", "h", "b64")
