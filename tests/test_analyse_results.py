import pytest

from analysis.analyse_results import load_results, plot_placement_timeline, plot_vm_workloads, summarise_runs
from vm_scheduler.run_simulation import run_simulation


@pytest.fixture
def results(simulation_config):
    run_simulation(simulation_config)
    return load_results(simulation_config['output_directory'], simulation_config)


def test_load_results(results):
    assert set(results) == {'placements', 'vms', 'summary'}
    assert len(results['placements']) == 24


def test_load_results_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_results(tmp_path)


def test_summarise_runs(results):
    summary = summarise_runs(results['summary'])

    assert summary.index.tolist() == ["Round Robin", "Shortest Job First"]
    assert 'load_balancing_std_dev' in summary.columns


def test_plot_vm_workloads(results):
    fig = plot_vm_workloads(results['vms'])

    # 3 VMs for each of the 2 strategies
    assert len(fig.axes[0].patches) == 6


def test_plot_placement_timeline(results):
    fig = plot_placement_timeline(results['placements'])

    assert len(fig.data) == 2
    assert sum(len(trace.x) for trace in fig.data) == 24


def test_analysis_of_run_with_no_tasks(simulation_config, tmp_path):
    task_file = tmp_path / "tasks.csv"
    task_file.write_text("task_id,duration\n1,0\n")
    simulation_config['input_tasks'] = str(task_file)
    run_simulation(simulation_config)

    results = load_results(simulation_config['output_directory'], simulation_config)

    assert summarise_runs(results['summary'])['placed'].tolist() == [0, 0]
    # every VM still gets a zero height bar
    assert len(plot_vm_workloads(results['vms']).axes[0].patches) == 6
    assert len(plot_placement_timeline(results['placements']).data) == 0
