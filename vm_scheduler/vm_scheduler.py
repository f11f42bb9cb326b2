import time
from collections import deque

from common.models import SimulationConfigError, TaskDurationError
from vm_scheduler.metrics import calculate_performance_metrics


class VM:
    def __init__(self, id):
        self.id = id
        self.tasks = []
        self.current_time = 0 # End of this VM's timeline, tasks are appended here back to back


    def add_task(self, task):
        placed_task = task.place(self.current_time, self.id)
        self.current_time = placed_task.end_time
        self.tasks.append(placed_task)
        return placed_task

    def get_total_work_time(self):
        return self.current_time

    def get_average_wait_time(self):
        if not self.tasks:
            return 0
        total_wait = sum(task.wait_time for task in self.tasks)
        return total_wait / len(self.tasks)

    def get_utilization(self, total_simulation_time):
        if total_simulation_time == 0:
            return 0
        busy_time = sum(task.duration for task in self.tasks)
        return (busy_time / total_simulation_time) * 100


class DataCenter:
    """Fixed pool of VMs with ids 1..N that tasks are distributed across."""

    def __init__(self, num_vms):
        if num_vms < 1:
            raise SimulationConfigError(f"A data center needs at least one VM, got {num_vms}")
        self.vm_list = [VM(id=i + 1) for i in range(num_vms)]

    def __len__(self):
        return len(self.vm_list)

    def __iter__(self):
        return iter(self.vm_list)

    def get_vm(self, index):
        """Returns the VM at a 0-based list position"""
        if not 0 <= index < len(self.vm_list):
            raise IndexError(f"VM index {index} out of range for data center of {len(self.vm_list)} VMs")
        return self.vm_list[index]

    def least_loaded_vm(self):
        """
        Returns the VM with the smallest total work time.
        Ties go to the first VM encountered in id order, which keeps shortest job first reproducible.
        """
        least_loaded = self.vm_list[0]
        for vm in self.vm_list[1:]:
            if vm.get_total_work_time() < least_loaded.get_total_work_time():
                least_loaded = vm
        return least_loaded


PLACEMENT_COLUMNS = ["strategy", "placement_order", "task_id", "duration", "vm_id", "start_time", "end_time"]


class SchedulingStrategy:
    """Base class for scheduling strategies that place a batch of tasks onto a data center"""
    name = None

    def schedule(self, tasks, datacenter):
        """Places every task on a VM of the data center, returns the placed tasks in placement order"""
        raise NotImplementedError


class RoundRobinScheduling(SchedulingStrategy):
    """
    Hands tasks out to VMs in turn: task k goes to VM (k mod N).
    Tasks are taken strictly in the order given, there is no sorting and no awareness of load.
    """
    name = "Round Robin"

    def schedule(self, tasks, datacenter):
        queue = deque(tasks)
        placed_tasks = []
        current_vm = 0
        while queue:
            task = queue.popleft()
            placed_tasks.append(datacenter.get_vm(current_vm).add_task(task))
            current_vm = (current_vm + 1) % len(datacenter)
        return placed_tasks


class ShortestJobFirstScheduling(SchedulingStrategy):
    """
    Sorts tasks by duration (shortest first) then greedily puts each one on the currently least loaded VM.
    The sort is stable, so equal durations keep their input order.
    There is no lookahead and no rebalancing after a task is placed, so the result is balanced but not optimal.
    """
    name = "Shortest Job First"

    def schedule(self, tasks, datacenter):
        sorted_tasks = sorted(tasks, key=lambda task: task.duration)
        placed_tasks = []
        for task in sorted_tasks:
            placed_tasks.append(datacenter.least_loaded_vm().add_task(task))
        return placed_tasks


class VMSchedulingSimulation:
    def __init__(self, num_vms, scheduling_strategy, log_file=None):
        self.num_vms = num_vms
        self.scheduling_strategy = scheduling_strategy
        self.datacenter = None
        self.placed_tasks = []
        self.stats = {
            'placed': 0,
            'failed_placement': 0,
        }
        self.log_file = log_file

    def _log(self, message):
        """Write message to log file and print to console"""
        print(message)
        if self.log_file:
            with open(self.log_file, 'a') as f:
                f.write(message + "\n")

    def run(self, tasks):
        """Schedules the tasks on a fresh data center and returns the performance report for the run"""
        self.datacenter = DataCenter(self.num_vms)
        self._log(f"[RUN] {self.scheduling_strategy.name}: {len(tasks)} tasks on {self.num_vms} VMs")

        start = time.perf_counter()
        try:
            self.placed_tasks = self.scheduling_strategy.schedule(tasks, self.datacenter)
        except TaskDurationError as e:
            self.stats['failed_placement'] += 1
            self._log(f"[FAIL PLACE] {type(e).__name__}: {e}")
            raise
        execution_time_ms = (time.perf_counter() - start) * 1000

        for placed_task in self.placed_tasks:
            self._log(f"[PLACE] Task {placed_task.id} ({placed_task.duration} units): VM {placed_task.vm_id} [{placed_task.start_time}-{placed_task.end_time}]")
        self.stats['placed'] += len(self.placed_tasks)

        return calculate_performance_metrics(self.datacenter, execution_time_ms, strategy_name=self.scheduling_strategy.name)

    def get_stats(self):
        """Return simulation statistics"""
        return self.stats.copy()

    def get_placement_records(self):
        return [{
            'strategy': self.scheduling_strategy.name,
            'placement_order': i,
            'task_id': placed_task.id,
            'duration': placed_task.duration,
            'vm_id': placed_task.vm_id,
            'start_time': placed_task.start_time,
            'end_time': placed_task.end_time,
            }
        for i, placed_task in enumerate(self.placed_tasks)]
