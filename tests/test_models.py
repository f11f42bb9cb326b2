import pytest

from common.models import PlacedTask, Task, TaskDurationError


def test_place_sets_start_and_end_time():
    placed = Task(id=3, duration=4).place(start_time=6, vm_id=2)

    assert placed == PlacedTask(id=3, duration=4, start_time=6, end_time=10, vm_id=2)
    assert placed.wait_time == 6


def test_place_leaves_task_unchanged():
    task = Task(id=1, duration=5)
    task.place(start_time=10, vm_id=1)

    assert task == Task(id=1, duration=5)


@pytest.mark.parametrize("duration", [0, -3])
def test_place_rejects_non_positive_duration(duration):
    with pytest.raises(TaskDurationError):
        Task(id=9, duration=duration).place(start_time=0, vm_id=1)


def test_task_is_immutable():
    task = Task(id=1, duration=5)
    with pytest.raises(AttributeError):
        task.duration = 3


def test_task_str():
    assert str(Task(id=7, duration=2)) == "Task-7 (2 units)"
