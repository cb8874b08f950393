"""Integration tests for the SQLAlchemy record store and RSS item index (SQLite)."""

import pytest
from sqlalchemy import func, select

from paymeta.domain.entities import PaymentMetadata, PaymentRevision, PaymentType, new_identifier
from paymeta.domain.exceptions import DuplicateEntityError
from paymeta.infrastructure.database.models import RSSItemIndexModel
from paymeta.infrastructure.database.repositories import (
    SQLAlchemyPaymentMetadataRepository,
    SQLAlchemyRSSItemIndex,
)


def _record(**overrides) -> PaymentMetadata:
    fields = {
        "type": PaymentType.BITCOIN_LIGHTNING,
        "metadata": {"payment_hash": "abc", "amt_paid_msat": "21000", "nested": {"ok": [1, 2.5, None, True]}},
        "signature": "sig-1",
        "podcast_guid": "p1",
        "rss_item_guid": "e1",
    }
    fields.update(overrides)
    return PaymentMetadata(**fields)


def _revision(**overrides) -> PaymentRevision:
    fields = {
        "type": PaymentType.MONERO,
        "metadata": {"tx_hash": "def"},
        "signature": None,
        "update_token": new_identifier(),
    }
    fields.update(overrides)
    return PaymentRevision(**fields)


@pytest.fixture
def index(session) -> SQLAlchemyRSSItemIndex:
    return SQLAlchemyRSSItemIndex(session)


@pytest.fixture
def repo(session, index) -> SQLAlchemyPaymentMetadataRepository:
    return SQLAlchemyPaymentMetadataRepository(session, index)


async def _index_rows(session) -> int:
    result = await session.execute(select(func.count()).select_from(RSSItemIndexModel))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_create_then_get_round_trips_all_fields(repo):
    record = _record()
    await repo.create(record)

    found = await repo.get_by_id(record.id)
    assert found is not None
    assert found.id == record.id
    assert found.type is PaymentType.BITCOIN_LIGHTNING
    assert found.metadata == record.metadata
    assert found.signature == "sig-1"
    assert found.podcast_guid == "p1"
    assert found.rss_item_guid == "e1"
    assert found.update_token == record.update_token


@pytest.mark.asyncio
async def test_get_missing_returns_none(repo):
    assert await repo.get_by_id(new_identifier()) is None


@pytest.mark.asyncio
async def test_create_persists_across_sessions(database):
    record = _record()
    async with database.session_factory() as s1:
        await SQLAlchemyPaymentMetadataRepository(s1).create(record)
        await s1.commit()

    async with database.session_factory() as s2:
        repo = SQLAlchemyPaymentMetadataRepository(s2)
        found = await repo.get_by_id(record.id)
        by_item = await repo.find_by_rss_item("p1", "e1")

    assert found is not None
    assert [r.id for r in by_item] == [record.id]


@pytest.mark.asyncio
async def test_create_indexes_record_with_both_guids(repo, index):
    record = _record()
    await repo.create(record)

    assert await index.members_of("p1", "e1") == {record.id}
    assert [r.id for r in await repo.find_by_rss_item("p1", "e1")] == [record.id]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "podcast_guid, rss_item_guid",
    [("p1", None), (None, "e1"), (None, None), ("p1", ""), ("", "e1")],
)
async def test_create_without_both_guids_is_not_indexed(repo, session, podcast_guid, rss_item_guid):
    record = _record(podcast_guid=podcast_guid, rss_item_guid=rss_item_guid)
    await repo.create(record)

    assert await _index_rows(session) == 0
    assert await repo.get_by_id(record.id) is not None


@pytest.mark.asyncio
async def test_create_rejects_id_collision(repo):
    record = _record()
    await repo.create(record)

    with pytest.raises(DuplicateEntityError):
        await repo.create(_record(id=record.id, metadata={"other": 1}))

    found = await repo.get_by_id(record.id)
    assert found.metadata == record.metadata


@pytest.mark.asyncio
async def test_update_rotates_token_and_keeps_index_key(repo, index):
    record = _record()
    await repo.create(record)
    old_token = record.update_token
    revision = _revision()

    assert await repo.update(record.id, revision, expected_token=old_token) is True

    found = await repo.get_by_id(record.id)
    assert found.type is PaymentType.MONERO
    assert found.metadata == {"tx_hash": "def"}
    assert found.signature is None
    assert found.podcast_guid == "p1"
    assert found.rss_item_guid == "e1"
    assert await repo.validate_update_token(record.id, old_token) is False
    assert await repo.validate_update_token(record.id, revision.update_token) is True
    assert await index.members_of("p1", "e1") == {record.id}


@pytest.mark.asyncio
async def test_update_with_stale_token_changes_nothing(repo):
    record = _record()
    await repo.create(record)

    applied = await repo.update(record.id, _revision(), expected_token=new_identifier())

    assert applied is False
    found = await repo.get_by_id(record.id)
    assert found.metadata == record.metadata
    assert found.update_token == record.update_token


@pytest.mark.asyncio
async def test_update_missing_record_returns_false(repo):
    assert await repo.update(new_identifier(), _revision()) is False


@pytest.mark.asyncio
async def test_delete_removes_record_and_index_entry(repo, index):
    record = _record()
    await repo.create(record)

    assert await repo.delete(record.id, expected_token=record.update_token) is True

    assert await repo.get_by_id(record.id) is None
    assert await index.members_of("p1", "e1") == set()
    assert await repo.find_by_rss_item("p1", "e1") == []
    assert await repo.count() == 0


@pytest.mark.asyncio
async def test_second_delete_reports_not_found(repo):
    record = _record()
    await repo.create(record)

    assert await repo.delete(record.id) is True
    assert await repo.delete(record.id) is False


@pytest.mark.asyncio
async def test_delete_with_wrong_token_keeps_record_indexed(repo, index):
    record = _record()
    await repo.create(record)

    assert await repo.delete(record.id, expected_token=new_identifier()) is False

    assert await repo.get_by_id(record.id) is not None
    assert await index.members_of("p1", "e1") == {record.id}


@pytest.mark.asyncio
async def test_delete_leaves_other_bucket_members(repo, index):
    first, second = _record(), _record()
    await repo.create(first)
    await repo.create(second)

    await repo.delete(first.id)

    assert await index.members_of("p1", "e1") == {second.id}


@pytest.mark.asyncio
async def test_validate_update_token(repo):
    record = _record()
    await repo.create(record)

    assert await repo.validate_update_token(record.id, record.update_token) is True
    assert await repo.validate_update_token(record.id, new_identifier()) is False
    assert await repo.validate_update_token(new_identifier(), record.update_token) is False


@pytest.mark.asyncio
async def test_pagination_covers_every_record_once(repo):
    created = {(await repo.create(_record(podcast_guid=None))).id for _ in range(5)}

    pages = [await repo.get_all(skip=offset, limit=2) for offset in (0, 2, 4, 6)]

    assert [len(p) for p in pages] == [2, 2, 1, 0]
    seen = [r.id for page in pages for r in page]
    assert len(seen) == len(set(seen))
    assert set(seen) == created
    assert await repo.count() == 5


@pytest.mark.asyncio
async def test_count_matches_findable_records(repo):
    kept = _record()
    gone = _record()
    await repo.create(kept)
    await repo.create(gone)
    await repo.delete(gone.id)

    listed = await repo.get_all(limit=100)
    assert await repo.count() == len(listed) == 1
    assert all([await repo.get_by_id(r.id) is not None for r in listed])


@pytest.mark.asyncio
async def test_find_by_rss_item_drops_dangling_ids(repo, index):
    record = _record()
    await repo.create(record)
    await index.add("p1", "e1", new_identifier())

    results = await repo.find_by_rss_item("p1", "e1")

    assert [r.id for r in results] == [record.id]


@pytest.mark.asyncio
async def test_find_by_rss_item_is_scoped_to_the_pair(repo):
    await repo.create(_record(podcast_guid="p1", rss_item_guid="e1"))
    other = _record(podcast_guid="p1", rss_item_guid="e2")
    await repo.create(other)

    assert [r.id for r in await repo.find_by_rss_item("p1", "e2")] == [other.id]
    assert await repo.find_by_rss_item("p2", "e1") == []


@pytest.mark.asyncio
async def test_index_add_is_idempotent_and_remove_tolerates_non_members(index, session):
    record_id = new_identifier()
    await index.add("p1", "e1", record_id)
    await index.add("p1", "e1", record_id)

    assert await index.members_of("p1", "e1") == {record_id}
    assert await _index_rows(session) == 1

    await index.remove("p1", "e1", new_identifier())
    await index.remove("p9", "e9", record_id)
    assert await index.members_of("p1", "e1") == {record_id}

    await index.remove("p1", "e1", record_id)
    assert await index.members_of("p1", "e1") == set()
