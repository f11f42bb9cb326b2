import matplotlib
matplotlib.use("Agg")

import pytest

from common.models import Task


@pytest.fixture
def scenario_tasks():
    """Four tasks with durations 3, 1, 4, 2 (ids 1-4)"""
    return [Task(id=1, duration=3), Task(id=2, duration=1), Task(id=3, duration=4), Task(id=4, duration=2)]


@pytest.fixture
def mixed_tasks():
    durations = [5, 2, 9, 2, 7, 1, 5, 3, 8, 2, 6]
    return [Task(id=i + 1, duration=d) for i, d in enumerate(durations)]


@pytest.fixture
def simulation_config(tmp_path):
    return {
        'num_vms': '3',
        'num_tasks': '12',
        'max_task_duration': '10',
        'random_seed': '7',
        'output_directory': str(tmp_path / "output"),
    }
