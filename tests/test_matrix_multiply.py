import io
import logging
import time

import numpy as np
import pytest

import matrix_multiply
from matrix_multiply import HEADER, build_inputs, format_matrix, main, run
from shared_memory_model import multiply_row, threaded_matrix_multiplication, SpawnFailure

EXPECTED_OUTPUT = (
    "Resultant Matrix C = A x B:\n"
    "  30  24  18\n"
    "  84  69  54\n"
    " 138 114  90\n"
)


def test_main_prints_result(capsys):
    assert main() == 0

    captured = capsys.readouterr()
    assert captured.out == EXPECTED_OUTPUT
    assert captured.err == ""


def test_repeated_runs_print_the_same_grid():
    outputs = []
    for _ in range(5):
        buffer = io.StringIO()
        run(file=buffer)
        outputs.append(buffer.getvalue())

    assert outputs == [EXPECTED_OUTPUT] * 5


def test_output_waits_for_slow_worker():
    def slow_worker(A, B, row_out, row_idx):
        if row_idx == 2:
            time.sleep(0.2)
        multiply_row(A, B, row_out, row_idx)

    buffer = io.StringIO()
    C = run(worker=slow_worker, file=buffer)

    assert buffer.getvalue() == EXPECTED_OUTPUT
    assert C[2].tolist() == [138, 114, 90]


def test_build_inputs_are_read_only():
    A, B = build_inputs()

    assert A.shape == B.shape == (3, 3)
    with pytest.raises(ValueError):
        A[0, 0] = 0
    with pytest.raises(ValueError):
        B[0, 0] = 0


def test_format_matrix_field_width():
    text = format_matrix(np.array([[12345, -1], [0, 7]]))
    lines = text.splitlines()

    assert lines[0] == HEADER
    assert lines.count(HEADER) == 1
    assert lines[1] == "12345  -1"
    assert lines[2] == "   0   7"
    assert text.endswith("\n")


def test_format_matrix_custom_width():
    assert format_matrix(np.array([[1, 2]]), width=6).splitlines()[1] == "     1     2"


def test_phases_are_logged_in_order(caplog):
    caplog.set_level(logging.DEBUG)
    run(file=io.StringIO())

    phases = [record.getMessage().split()[-1] for record in caplog.records
              if record.getMessage().startswith("Entering phase")]
    assert phases == ["INIT", "SPAWNING", "AWAITING_COMPLETION", "PRINTING", "DONE"]


def test_main_reports_spawn_failure(monkeypatch, capsys):
    def refuse(A, B, worker):
        raise SpawnFailure("Could not start worker for row 0")

    monkeypatch.setattr(matrix_multiply, "threaded_matrix_multiplication", refuse)

    assert main() == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Could not start worker for row 0" in captured.err


def test_main_reports_failed_worker(monkeypatch, capsys):
    def broken_worker(A, B, row_out, row_idx):
        if row_idx == 1:
            raise MemoryError
        multiply_row(A, B, row_out, row_idx)

    def multiply(A, B, worker):
        return threaded_matrix_multiplication(A, B, worker=broken_worker)

    monkeypatch.setattr(matrix_multiply, "threaded_matrix_multiplication", multiply)

    assert main() == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "row 1" in captured.err
