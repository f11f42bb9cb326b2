import sys
from pathlib import Path

import numpy as np
import pandas as pd

from common.models import SimulationConfigError, Task


def generate_random_tasks(count, max_duration, seed=None):
    """
    Generate tasks with ids 1..count and durations drawn uniformly from [1, max_duration].
    Passing a seed makes the task set reproducible.
    """
    if count < 1:
        raise SimulationConfigError(f"Task count must be at least 1, got {count}")
    if max_duration < 1:
        raise SimulationConfigError(f"Maximum task duration must be at least 1, got {max_duration}")

    rng = np.random.default_rng(seed)
    durations = rng.integers(1, max_duration + 1, size=count)
    return [Task(id=i + 1, duration=int(duration)) for i, duration in enumerate(durations)]


def tasks_to_dataframe(tasks):
    return pd.DataFrame(
        [{'task_id': task.id, 'duration': task.duration} for task in tasks],
        columns=['task_id', 'duration'],
    )


def save_tasks(tasks, output_file):
    """Save a task set as parquet or csv depending on the file extension"""
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    df = tasks_to_dataframe(tasks)

    if output_file.suffix == '.parquet':
        df.to_parquet(output_file, index=False, engine='pyarrow')
    elif output_file.suffix == '.csv':
        df.to_csv(output_file, index=False)
    else:
        raise ValueError(f"Unsupported task file type: {output_file.suffix}")
    return output_file


def load_tasks(input_file):
    """
    Read a task set from a .csv or .parquet file with task_id and duration columns.
    Rows with missing, non-integer or non-positive values are dropped, as are repeated task ids.
    """
    input_path = Path(input_file)

    if not input_path.exists():
        raise FileNotFoundError(f"Task file not found: {input_file}")

    if input_path.suffix == '.parquet':
        df = pd.read_parquet(input_path, engine='pyarrow')
    elif input_path.suffix == '.csv':
        df = pd.read_csv(input_path)
    else:
        raise ValueError(f"Unsupported task file type: {input_path.suffix}")

    required_columns = ['task_id', 'duration']
    missing_columns = [column for column in required_columns if column not in df.columns]
    if missing_columns:
        raise ValueError(f"Task file {input_path.name} is missing columns: {missing_columns}")

    df = df[required_columns].copy()
    initial_row_count = len(df)

    for column in required_columns:
        df[column] = pd.to_numeric(df[column], errors='coerce')
        mask = df[column].isna() | (df[column] % 1 != 0)
        dropped_count = mask.sum()
        if dropped_count > 0:
            print(f"  Dropped {dropped_count} row(s) from {input_path.name} due to missing or non-integer value in column '{column}'")
            df = df[~mask]

    mask = (df['task_id'] < 1) | (df['duration'] < 1)
    dropped_count = mask.sum()
    if dropped_count > 0:
        print(f"  Dropped {dropped_count} row(s) from {input_path.name} due to non-positive task_id or duration:")
        for _, row in df[mask].iterrows():
            print(f"    task_id: {row['task_id']}, duration: {row['duration']}")
        df = df[~mask]

    duplicates = df.duplicated(subset=['task_id'], keep='first')
    if duplicates.sum() > 0:
        print(f"  Dropped {duplicates.sum()} row(s) from {input_path.name} due to repeated task_id")
        df = df[~duplicates]

    total_dropped = initial_row_count - len(df)
    if total_dropped > 0:
        print(f"  Total rows dropped from {input_path.name}: {total_dropped} (from {initial_row_count} to {len(df)})")

    return [Task(id=int(row.task_id), duration=int(row.duration)) for row in df.itertuples(index=False)]


if __name__ == "__main__":
    # python -m data_handling.task_generation <output file> [count] [max duration] [seed]
    output_file = sys.argv[1] if len(sys.argv) > 1 else "output/tasks.parquet"
    count = int(sys.argv[2]) if len(sys.argv) > 2 else 20
    max_duration = int(sys.argv[3]) if len(sys.argv) > 3 else 10
    seed = int(sys.argv[4]) if len(sys.argv) > 4 else None

    tasks = generate_random_tasks(count, max_duration, seed)
    saved_file = save_tasks(tasks, output_file)
    print(f"Generated {len(tasks):,} tasks -> {saved_file}")
