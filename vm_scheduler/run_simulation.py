import sys
from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from common.models import SimulationConfigError
from data_handling.task_generation import generate_random_tasks, load_tasks
from vm_scheduler.vm_scheduler import PLACEMENT_COLUMNS, VMSchedulingSimulation, RoundRobinScheduling, ShortestJobFirstScheduling


DEFAULT_STRATEGIES = "RoundRobinScheduling, ShortestJobFirstScheduling"


def load_config(config_file="config.txt"):
    """Load configuration from config file"""
    config_path = Path(config_file)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file '{config_file}' not found")

    config = {}
    with open(config_path, 'r') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            if '=' in line:
                key, value = line.split('=', 1)
                config[key.strip()] = value.strip()
    return config


def get_int_setting(config, key, default, minimum=1):
    value = config.get(key, '')
    if value == '':
        return default
    try:
        number = int(value)
    except ValueError:
        raise SimulationConfigError(f"Config value '{key}' must be an integer, got '{value}'")
    if number < minimum:
        raise SimulationConfigError(f"Config value '{key}' must be at least {minimum}, got {number}")
    return number


def get_strategy_instance(strategy_name):
    if strategy_name == "RoundRobinScheduling":
        return RoundRobinScheduling()
    elif strategy_name == "ShortestJobFirstScheduling":
        return ShortestJobFirstScheduling()
    else:
        raise ValueError(f"Unknown Scheduling Strategy: {strategy_name}")


def get_tasks(config):
    """Load tasks from the configured input file, or generate a random task set"""
    input_tasks = config.get('input_tasks')
    if input_tasks:
        return load_tasks(input_tasks)

    return generate_random_tasks(
        get_int_setting(config, 'num_tasks', 20),
        get_int_setting(config, 'max_task_duration', 10),
        seed=get_int_setting(config, 'random_seed', None, minimum=0),
    )


def run_simulation(config):
    """Run every configured scheduling strategy on the same tasks and return their reports"""

    num_vms = get_int_setting(config, 'num_vms', 5)
    tasks = get_tasks(config)
    strategy_names = [name.strip() for name in config.get('scheduling_strategies', DEFAULT_STRATEGIES).split(',') if name.strip()]
    if not strategy_names:
        raise SimulationConfigError("No scheduling strategies configured")
    strategies = [get_strategy_instance(name) for name in strategy_names]

    # Setup output directory and file paths
    output_directory = config.get('output_directory', 'output')

    output_path = Path(output_directory)
    output_path.mkdir(parents=True, exist_ok=True)

    output_placements = output_path / config.get('output_placements', 'simulation_placements.parquet')
    output_vms = output_path / config.get('output_vms', 'simulation_vms.parquet')
    output_summary = output_path / config.get('output_summary', 'simulation_summary.parquet')
    output_log = output_path / config.get('output_log', 'simulation.log')

    print("=== VM Scheduling Simulation ===")
    print(f"Number of VMs: {num_vms}")
    print(f"Number of tasks: {len(tasks)}")
    print()

    placement_records = []
    vm_records = []
    summary_records = []
    reports = []

    for strategy in strategies:
        print(f"--- {strategy.name} Scheduling ---")
        # Each strategy gets its own simulation and data center, only the immutable task values are shared
        simulation = VMSchedulingSimulation(num_vms, strategy, log_file=str(output_log))
        report = simulation.run(list(tasks))
        print(report.format_report())

        stats = simulation.get_stats()
        print("\nSimulation complete:")
        for key, value in stats.items():
            print(f"{key}: {value:,}")
        print()

        placement_records.extend(simulation.get_placement_records())
        vm_table = report.vm_table()
        vm_table.insert(0, 'strategy', strategy.name)
        vm_records.append(vm_table)
        summary_records.append({**report.summary(), **stats})
        reports.append(report)

    placements_table = pa.Table.from_pandas(pd.DataFrame(placement_records, columns=PLACEMENT_COLUMNS), preserve_index=False)
    vms_table = pa.Table.from_pandas(pd.concat(vm_records, ignore_index=True), preserve_index=False)
    summary_table = pa.Table.from_pandas(pd.DataFrame(summary_records), preserve_index=False)

    pq.write_table(placements_table, output_placements)
    pq.write_table(vms_table, output_vms)
    pq.write_table(summary_table, output_summary)

    print(f"Results written to: {output_path}")

    return reports


if __name__ == "__main__":
    config = load_config(sys.argv[1] if len(sys.argv) > 1 else "config.txt")
    run_simulation(config)
