import os
import time

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib.ticker import ScalarFormatter

from sequential_matrix_multiplication import sequential_matrix_multiplication
from shared_memory_model import pool_matrix_multiplication, threaded_matrix_multiplication

METHODS = {
    'Sequential': sequential_matrix_multiplication,
    'Threaded': threaded_matrix_multiplication,
    'Pool': pool_matrix_multiplication,
}


def benchmark_single_run(size, verify=True):
    """Time every implementation for a single matrix size"""
    A = np.random.randint(0, 10, (size, size))
    B = np.random.randint(0, 10, (size, size))

    expected_C = np.matmul(A, B) if verify else None

    results = {'Size': size}
    for name, multiply in METHODS.items():
        start_time = time.perf_counter()
        C = multiply(A, B)
        results[name] = time.perf_counter() - start_time

        if verify:
            assert np.array_equal(C, expected_C), f"{name} result incorrect for size {size}"

    return results


def run_benchmarks(sizes=(10, 50, 100), verify=True):
    """Run benchmarks for all matrix sizes and implementations"""
    all_results = []

    for size in sizes:
        print(f"\nBenchmarking matrices of size {size}x{size}")
        result = benchmark_single_run(size, verify=verify)
        all_results.append(result)

        print(f"Sequential: {result['Sequential']:.4f} seconds")
        for k, v in result.items():
            if k not in ('Size', 'Sequential'):
                speedup = result['Sequential'] / v
                print(f"{k}: {v:.4f} seconds (Speedup: {speedup:.2f}x)")

    return pd.DataFrame(all_results, columns=['Size', *METHODS])


def calculate_speedup(results_df):
    """Calculate speedup relative to sequential execution"""
    speedup_df = pd.DataFrame({'Size': results_df['Size']})

    for column in results_df.columns:
        if column not in ('Size', 'Sequential'):
            speedup_df[column] = results_df['Sequential'] / results_df[column]

    return speedup_df


def plot_execution_times(results_df, path='matrix_multiplication_time_comparison.png'):
    """Plot execution times for all implementations"""
    plot_df = pd.melt(results_df, id_vars=['Size'],
                      var_name='Implementation', value_name='Time (seconds)')

    plt.figure(figsize=(12, 8))
    sns.lineplot(data=plot_df, x='Size', y='Time (seconds)',
                 hue='Implementation', marker='o', linewidth=2.5)

    plt.xscale('log')
    plt.yscale('log')
    plt.grid(True, which="both", ls="--", alpha=0.7)

    plt.title('Row-Parallel Matrix Multiplication Performance', fontsize=16)
    plt.xlabel('Matrix Size (n × n)', fontsize=14)
    plt.ylabel('Execution Time (seconds)', fontsize=14)

    # Show actual values instead of powers
    for axis in [plt.gca().xaxis, plt.gca().yaxis]:
        axis.set_major_formatter(ScalarFormatter())

    plt.legend(title='Implementation', bbox_to_anchor=(1.05, 1), loc='upper left')
    plt.tight_layout()
    plt.savefig(path, dpi=150)
    plt.close()
    return path


def plot_speedup(speedup_df, path='matrix_multiplication_speedup_comparison.png'):
    """Plot speedup of the threaded implementations"""
    plot_df = pd.melt(speedup_df, id_vars=['Size'],
                      var_name='Implementation', value_name='Speedup')

    plt.figure(figsize=(12, 8))
    sns.lineplot(data=plot_df, x='Size', y='Speedup',
                 hue='Implementation', marker='o', linewidth=2.5)

    plt.xscale('log')
    plt.grid(True, which="both", ls="--", alpha=0.7)

    # Baseline: no speedup
    plt.axhline(y=1, color='r', linestyle='--', alpha=0.7, label='Baseline (Sequential)')

    plt.title('Speedup of Row-Parallel Matrix Multiplication', fontsize=16)
    plt.xlabel('Matrix Size (n × n)', fontsize=14)
    plt.ylabel('Speedup (Relative to Sequential)', fontsize=14)
    plt.gca().xaxis.set_major_formatter(ScalarFormatter())

    plt.legend(title='Implementation', bbox_to_anchor=(1.05, 1), loc='upper left')
    plt.tight_layout()
    plt.savefig(path, dpi=150)
    plt.close()
    return path


def create_comparison_table(results_df, speedup_df):
    """Create a comparison table with execution times and speedups"""
    table_df = pd.DataFrame({'Size': results_df['Size']})
    table_df['Sequential (s)'] = results_df['Sequential']

    for column in results_df.columns:
        if column not in ('Size', 'Sequential'):
            table_df[f'{column} (s)'] = results_df[column]
            table_df[f'{column} Speedup'] = speedup_df[column]

    return table_df


def main():
    print(f"Running on a machine with {os.cpu_count()} CPU cores")

    print("\nRunning benchmarks...")
    results_df = run_benchmarks(sizes=[3, 10, 50, 100])
    speedup_df = calculate_speedup(results_df)

    print("\nCreating visualizations...")
    plot_execution_times(results_df)
    plot_speedup(speedup_df)

    table_df = create_comparison_table(results_df, speedup_df)
    print("\nPerformance Comparison Table:")
    print(table_df.to_string(index=False))


if __name__ == "__main__":
    main()
