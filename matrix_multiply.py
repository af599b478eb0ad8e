import logging
import sys

import numpy as np

from shared_memory_model import (
    MatrixMultiplicationError,
    Phase,
    log_phase,
    multiply_row,
    threaded_matrix_multiplication,
)

logger = logging.getLogger(__name__)

SIZE = 3

A_ROWS = (
    (1, 2, 3),
    (4, 5, 6),
    (7, 8, 9),
)

B_ROWS = (
    (9, 8, 7),
    (6, 5, 4),
    (3, 2, 1),
)

HEADER = "Resultant Matrix C = A x B:"
FIELD_WIDTH = 4


def build_inputs():
    """Return fresh read-only copies of the fixed input matrices A and B."""
    A = np.array(A_ROWS, dtype=np.int64).reshape(SIZE, SIZE)
    B = np.array(B_ROWS, dtype=np.int64).reshape(SIZE, SIZE)
    A.flags.writeable = False
    B.flags.writeable = False
    return A, B


def format_matrix(C, width=FIELD_WIDTH):
    """Render C under the header line, one row per line, each value as %{width}d."""
    lines = [HEADER]
    for row in C:
        lines.append("".join(f"{int(value):{width}d}" for value in row))
    return "\n".join(lines) + "\n"


def print_matrix(C, file=None):
    print(format_matrix(C), end="", file=file)


def run(worker=multiply_row, file=None):
    """
    Multiply the fixed matrices one thread per row and print the result.
    Returns the result matrix C.
    """
    log_phase(Phase.INIT)
    A, B = build_inputs()

    C = threaded_matrix_multiplication(A, B, worker=worker)

    log_phase(Phase.PRINTING)
    print_matrix(C, file=file)

    log_phase(Phase.DONE)
    return C


def main():
    logging.basicConfig(level=logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        run()
    except MatrixMultiplicationError as exc:
        logger.debug("Aborting without output", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
