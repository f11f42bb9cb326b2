"""
Shared data models for the VM Scheduling Simulator.

This module contains the task records and error types used across the simulation, data handling and analysis components.
"""

from collections import namedtuple


class SimulationConfigError(ValueError):
    """Raised when the simulation is set up with invalid parameters (e.g. a data center with no VMs)."""


class TaskDurationError(ValueError):
    """Raised when a task with a non-positive duration reaches a VM."""


class Task(namedtuple('Task', ['id', 'duration'])):
    """Represents a unit of work waiting to be scheduled. Immutable, so one task list can feed several runs."""

    __slots__ = ()

    def place(self, start_time, vm_id):
        """Returns the placed record for this task when it starts at start_time on the given VM."""
        if self.duration <= 0:
            raise TaskDurationError(f"Task {self.id} has non-positive duration {self.duration}")
        return PlacedTask(
            id=self.id,
            duration=self.duration,
            start_time=start_time,
            end_time=start_time + self.duration,
            vm_id=vm_id,
        )

    def __str__(self):
        return f"Task-{self.id} ({self.duration} units)"


class PlacedTask(namedtuple('PlacedTask', ['id', 'duration', 'start_time', 'end_time', 'vm_id'])):
    """A task after placement on a VM, with its start and end time fixed."""

    __slots__ = ()

    @property
    def wait_time(self):
        # Tasks run back to back with no preemption, so waiting ends when the task starts
        return self.start_time
