"""
Performance metrics for a finished scheduling run.

Everything here is a read-only pass over a data center whose VMs already hold their placed tasks.
"""

from collections import namedtuple

import numpy as np
import pandas as pd


VMReportRow = namedtuple('VMReportRow', ['vm_id', 'task_count', 'total_time', 'average_wait_time', 'utilization'])


class PerformanceReport:
    """Structured results of one scheduling run"""

    def __init__(self, strategy_name, execution_time_ms, total_simulation_time, vm_rows,
                 overall_average_wait_time, overall_average_utilization, load_balancing_std_dev):
        self.strategy_name = strategy_name
        self.execution_time_ms = execution_time_ms # Informational only, not reproducible between runs
        self.total_simulation_time = total_simulation_time
        self.vm_rows = vm_rows
        self.overall_average_wait_time = overall_average_wait_time
        self.overall_average_utilization = overall_average_utilization
        self.load_balancing_std_dev = load_balancing_std_dev

    def vm_table(self):
        """Per-VM rows as a dataframe, one row per VM in id order"""
        return pd.DataFrame(self.vm_rows, columns=VMReportRow._fields)

    def summary(self):
        return {
            'strategy': self.strategy_name,
            'execution_time_ms': self.execution_time_ms,
            'total_simulation_time': self.total_simulation_time,
            'overall_average_wait_time': self.overall_average_wait_time,
            'overall_average_utilization': self.overall_average_utilization,
            'load_balancing_std_dev': self.load_balancing_std_dev,
        }

    def format_report(self):
        lines = [
            f"Simulation completed in {self.execution_time_ms:.0f} ms",
            f"Total simulation time: {self.total_simulation_time} units",
            "",
            "VM\tTasks\tTotal Time\tAvg Wait\tUtilization",
            "------------------------------------------------",
        ]
        for row in self.vm_rows:
            lines.append(f"{row.vm_id}\t{row.task_count}\t{row.total_time}\t\t{row.average_wait_time:.1f}\t\t{row.utilization:.1f}%")
        lines.append("")
        lines.append(f"Overall Average Wait Time: {self.overall_average_wait_time}")
        lines.append(f"Overall Average Utilization: {self.overall_average_utilization}%")
        lines.append(f"Load Balancing (Std Dev of Workloads): {self.load_balancing_std_dev}")
        return "\n".join(lines)


def get_total_simulation_time(datacenter):
    """Overall makespan: the latest finishing VM decides when the simulation ends"""
    return max((vm.get_total_work_time() for vm in datacenter), default=0)


def calculate_load_balancing_std_dev(workloads):
    """
    Population standard deviation (divides by N, not N-1) of per-VM total work times.
    Lower is better balanced.
    """
    if len(workloads) == 0:
        return 0.0
    return float(np.std(np.asarray(workloads, dtype=float)))


def calculate_performance_metrics(datacenter, execution_time_ms=0.0, strategy_name=None):
    """
    Builds the performance report for a data center after all tasks are placed.

    The overall average wait time is the mean of the per-VM average wait times,
    so a VM with one task counts as much as a VM with ten.
    """
    total_simulation_time = get_total_simulation_time(datacenter)

    vm_rows = [
        VMReportRow(
            vm_id=vm.id,
            task_count=len(vm.tasks),
            total_time=vm.get_total_work_time(),
            average_wait_time=vm.get_average_wait_time(),
            utilization=vm.get_utilization(total_simulation_time),
        )
        for vm in datacenter
    ]

    wait_times = [row.average_wait_time for row in vm_rows]
    utilizations = [row.utilization for row in vm_rows]
    workloads = [row.total_time for row in vm_rows]

    return PerformanceReport(
        strategy_name=strategy_name,
        execution_time_ms=execution_time_ms,
        total_simulation_time=total_simulation_time,
        vm_rows=vm_rows,
        overall_average_wait_time=float(np.mean(wait_times)) if wait_times else 0.0,
        overall_average_utilization=float(np.mean(utilizations)) if utilizations else 0.0,
        load_balancing_std_dev=calculate_load_balancing_std_dev(workloads),
    )
