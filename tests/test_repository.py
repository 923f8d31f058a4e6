import pytest

from harvestboard.errors import TaskNotFoundError
from harvestboard.models import Task
from harvestboard.repository import TaskRepository


def _task(row_key, day="2024-07-04", crop="Kale"):
    return Task(row_key, {"Crop": crop, "Harvest Date": day})


def test_views_share_order_and_index():
    repo = TaskRepository([_task(3), _task(2), _task(5, "7/5/2024")])
    assert [t.row_key for t in repo.all()] == [3, 2, 5]
    assert repo.by_key(5).harvest_date == "7/5/2024"
    assert len(repo) == 3


def test_by_date_renormalizes_and_compares_strings():
    repo = TaskRepository([_task(2), _task(3, "7/4/2024"), _task(4, "July 4th"), _task(5, "2024-07-05")])
    assert [t.row_key for t in repo.by_date("2024-07-04")] == [2, 3]
    assert repo.by_date("July 4th") == [repo.by_key(4)]


def test_replace_all_swaps_both_views():
    repo = TaskRepository([_task(2), _task(3)])
    repo.replace_all([_task(9)])
    assert [t.row_key for t in repo.all()] == [9]
    with pytest.raises(TaskNotFoundError):
        repo.by_key(2)


def test_apply_field_updates_mutates_in_place():
    task = _task(2)
    repo = TaskRepository([task])
    repo.apply_field_updates(2, {"Status": "Assigned"})
    assert task.status == "Assigned"
    with pytest.raises(TaskNotFoundError):
        repo.apply_field_updates(7, {"Status": "Assigned"})


def test_remove_drops_from_both_views():
    repo = TaskRepository([_task(2), _task(3)])
    repo.remove(2)
    assert [t.row_key for t in repo.all()] == [3]
    assert repo.by_date("2024-07-04") == [repo.by_key(3)]
    with pytest.raises(TaskNotFoundError):
        repo.by_key(2)
    with pytest.raises(TaskNotFoundError):
        repo.remove(2)


def test_all_returns_a_copy():
    repo = TaskRepository([_task(2)])
    repo.all().clear()
    assert len(repo) == 1
