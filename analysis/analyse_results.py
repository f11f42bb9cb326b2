import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from vm_scheduler.run_simulation import load_config


def load_results(input_directory, config=None):
    """Read the placement, VM and summary parquet files written by a simulation run"""
    config = config or {}
    input_path = Path(input_directory)

    files = {
        'placements': input_path / config.get('output_placements', 'simulation_placements.parquet'),
        'vms': input_path / config.get('output_vms', 'simulation_vms.parquet'),
        'summary': input_path / config.get('output_summary', 'simulation_summary.parquet'),
    }

    missing = [str(path) for path in files.values() if not path.exists()]
    if missing:
        raise FileNotFoundError(f"Simulation output not found: {missing}")

    return {name: pd.read_parquet(path) for name, path in files.items()}


def summarise_runs(summary_df):
    """Strategy comparison table, one row per strategy"""
    columns = ['placed', 'total_simulation_time', 'overall_average_wait_time', 'overall_average_utilization', 'load_balancing_std_dev']
    return summary_df.set_index('strategy')[columns]


def plot_vm_workloads(vms_df):
    """Grouped bar chart of each VM's total work time, one bar group per VM and one colour per strategy"""
    strategies = list(dict.fromkeys(vms_df['strategy']))
    vm_ids = sorted(vms_df['vm_id'].unique())
    x = np.arange(len(vm_ids))
    width = 0.8 / max(len(strategies), 1)

    fig, ax = plt.subplots(figsize=(10, 6))
    for i, strategy in enumerate(strategies):
        workloads = (
            vms_df[vms_df['strategy'] == strategy]
            .set_index('vm_id')['total_time']
            .reindex(vm_ids, fill_value=0)
        )
        ax.bar(x + i * width, workloads.values, width, label=strategy)

    ax.set_xticks(x + width * (len(strategies) - 1) / 2)
    ax.set_xticklabels([f"VM {vm_id}" for vm_id in vm_ids])
    ax.set_xlabel("VM")
    ax.set_ylabel("Total work time (units)")
    ax.set_title("Workload per VM by scheduling strategy")
    ax.grid(True, axis='y', alpha=0.3)
    ax.legend()
    fig.tight_layout()
    return fig


def plot_placement_timeline(placements_df):
    """Gantt style timeline of every placed task, one row per VM and one panel per strategy"""
    if placements_df.empty:
        return go.Figure(layout_title_text="Task placement timeline")

    df = placements_df.copy()
    df['vm'] = "VM " + df['vm_id'].astype(str)
    df['task'] = "Task " + df['task_id'].astype(str)

    fig = px.bar(
        df,
        x='duration',
        y='vm',
        base='start_time',
        orientation='h',
        color='strategy',
        facet_row='strategy',
        text='task',
        hover_data=['task_id', 'start_time', 'end_time'],
        title="Task placement timeline",
    )
    fig.update_yaxes(categoryorder='category descending')
    fig.update_xaxes(title_text="Simulation time (units)")
    return fig


if __name__ == "__main__":
    config = load_config(sys.argv[1] if len(sys.argv) > 1 else "config.txt")
    results = load_results(config.get('input_directory', config.get('output_directory', 'output')), config)

    print("\n" + "="*60)
    print("STRATEGY COMPARISON")
    print("="*60)
    print(summarise_runs(results['summary']).to_string())
    print("="*60 + "\n")

    plot_vm_workloads(results['vms'])
    plt.show()

    plot_placement_timeline(results['placements']).show()
