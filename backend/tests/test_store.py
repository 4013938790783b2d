"""
Tests for the manual store against the test database.

These go straight to ManualStore with a session of their own, below the
HTTP layer, to pin down soft-delete scoping, patch semantics, search and
pagination.
"""

import math

import pytest

from manual_api.errors import ManualNotFound
from manual_api.services.store import ManualStore


async def test_create_assigns_id_and_timestamps(db_session):
    manual = await ManualStore(db_session).create({"title": "Guide"})

    assert manual.id is not None
    assert manual.title == "Guide"
    assert manual.serial_number is None
    assert manual.created_at is not None
    assert manual.updated_at is not None
    assert manual.deleted_at is None


async def test_find_by_id_missing(db_session):
    with pytest.raises(ManualNotFound) as exc_info:
        await ManualStore(db_session).find_by_id(999999)
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "User manual not found"


@pytest.mark.parametrize("manual_id", [0, -1, 2**31, 2**40, 10**20])
async def test_find_by_id_outside_id_column_is_not_found(db_session, manual_id):
    with pytest.raises(ManualNotFound):
        await ManualStore(db_session).find_by_id(manual_id)


async def test_update_touches_only_given_fields(db_session, test_manual):
    store = ManualStore(db_session)

    updated = await store.update(test_manual.id, {"title": "Partially Updated Title"})

    assert updated.title == "Partially Updated Title"
    assert updated.serial_number == test_manual.serial_number
    assert updated.description == test_manual.description
    assert updated.video_link == test_manual.video_link


async def test_repeated_partial_update_only_moves_updated_at(db_session, test_manual):
    store = ManualStore(db_session)

    first = await store.update(test_manual.id, {"description": "Same text"})
    first_snapshot = (first.title, first.serial_number, first.description,
                      first.video_link, first.created_at, first.updated_at)
    second = await store.update(test_manual.id, {"description": "Same text"})

    assert (second.title, second.serial_number, second.description,
            second.video_link, second.created_at) == first_snapshot[:5]
    assert second.updated_at >= first_snapshot[5]


async def test_soft_delete_scoping(db_session, test_manual):
    store = ManualStore(db_session)

    await store.soft_delete(test_manual.id)

    with pytest.raises(ManualNotFound):
        await store.find_by_id(test_manual.id)

    trashed = await store.find_by_id(test_manual.id, include_deleted=True)
    assert trashed.id == test_manual.id
    assert trashed.deleted_at is not None

    page = await store.list(page=1, per_page=15)
    assert page.total == 0
    page = await store.list(page=1, per_page=15, include_deleted=True)
    assert [m.id for m in page.items] == [test_manual.id]


async def test_deleted_manual_cannot_be_updated_or_deleted_again(db_session, test_manual):
    store = ManualStore(db_session)
    await store.soft_delete(test_manual.id)

    with pytest.raises(ManualNotFound):
        await store.update(test_manual.id, {"title": "Zombie"})
    with pytest.raises(ManualNotFound):
        await store.soft_delete(test_manual.id)


@pytest.mark.parametrize("count,per_page", [(15, 5), (7, 3), (1, 15), (16, 15)])
async def test_pagination_covers_all_records_in_insertion_order(
    db_session, make_manual, count, per_page
):
    created = [await make_manual() for _ in range(count)]
    store = ManualStore(db_session)

    pages = math.ceil(count / per_page)
    seen = []
    for k in range(1, pages + 1):
        page = await store.list(page=k, per_page=per_page)
        assert page.total == count
        expected = created[(k - 1) * per_page:k * per_page]
        assert [m.id for m in page.items] == [m.id for m in expected]
        seen.extend(page.items)

    assert len(seen) == count
    beyond = await store.list(page=pages + 1, per_page=per_page)
    assert beyond.items == []
    assert beyond.total == count


async def test_search_is_case_insensitive_substring(db_session, make_manual):
    alpha = await make_manual(title="Unique Test Title Alpha")
    await make_manual(title="Another Unique Title Beta")
    await make_manual(title="Something Else Entirely")
    store = ManualStore(db_session)

    page = await store.list(page=1, per_page=15, search="unique test title ALPHA")
    assert [m.id for m in page.items] == [alpha.id]
    assert page.total == 1

    page = await store.list(page=1, per_page=15, search="unique")
    assert page.total == 2


async def test_search_treats_wildcards_literally(db_session, make_manual):
    await make_manual(title="100% Cotton Care")
    await make_manual(title="1000 Watt Heater")
    store = ManualStore(db_session)

    page = await store.list(page=1, per_page=15, search="100%")
    assert [m.title for m in page.items] == ["100% Cotton Care"]

    page = await store.list(page=1, per_page=15, search="_")
    assert page.total == 0


async def test_search_excludes_deleted(db_session, make_manual):
    doomed = await make_manual(title="Doomed Manual")
    store = ManualStore(db_session)
    await store.soft_delete(doomed.id)

    page = await store.list(page=1, per_page=15, search="Doomed")
    assert page.total == 0


async def test_search_folds_non_ascii_case(db_session, make_manual):
    ecole = await make_manual(title="École Guide")
    await make_manual(title="Kettle Manual")
    store = ManualStore(db_session)

    page = await store.list(page=1, per_page=15, search="école")
    assert page.total == 1
    assert [m.id for m in page.items] == [ecole.id]

    page = await store.list(page=1, per_page=15, search="ÉCOLE")
    assert page.total == 1


async def test_page_far_past_the_end_is_empty(db_session, make_manual):
    await make_manual()
    store = ManualStore(db_session)

    page = await store.list(page=10**20, per_page=100)

    assert page.items == []
    assert page.total == 1
    assert page.page == 10**20
