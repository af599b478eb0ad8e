import enum
import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import numpy as np

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    """Lifecycle of one multiplication run."""
    INIT = "init"
    SPAWNING = "spawning"
    AWAITING_COMPLETION = "awaiting_completion"
    PRINTING = "printing"
    DONE = "done"


def log_phase(phase):
    logger.debug("Entering phase %s", phase.name)


class MatrixMultiplicationError(RuntimeError):
    """Fatal failure while orchestrating row workers."""


class SpawnFailure(MatrixMultiplicationError):
    """A row worker could not be started."""


class JoinFailure(MatrixMultiplicationError):
    """A row worker was not observed to complete its row."""


def multiply_row(A, B, row_out, row_idx):
    """
    Compute one row of the result matrix C.
    A: matrix (n x n), read only
    B: matrix (n x n), read only
    row_out: writable view of row `row_idx` of C
    row_idx: row index to compute
    """
    n, p = B.shape
    row_result = np.zeros(p, dtype=row_out.dtype)

    for j in range(p):
        for k in range(n):
            row_result[j] += A[row_idx][k] * B[k][j]

    # Publish the row only once it is complete
    row_out[:] = row_result


def _square_dimension(A, B):
    if A.ndim != 2 or A.shape[0] != A.shape[1] or A.shape != B.shape or A.shape[0] < 1:
        raise ValueError("Matrix dimensions incompatible for multiplication")
    return A.shape[0]


def _join_started(threads):
    for thread in threads:
        thread.join()


def threaded_matrix_multiplication(A, B, worker=multiply_row, thread_factory=threading.Thread):
    """
    Parallel matrix multiplication with one thread per output row.
    A: square matrix (n x n)
    B: square matrix (n x n)
    worker: callable(A, B, row_out, row_idx) computing a single row
    thread_factory: constructor with the threading.Thread signature
    Returns: result matrix C (n x n)

    Every worker only receives a view of its own row of C, so no locking is
    needed; C is returned after all workers have been joined.
    """
    n = _square_dimension(A, B)
    C = np.zeros((n, n), dtype=np.result_type(A, B))

    completed = [False] * n
    failures = [None] * n

    def run_row(row_idx, row_out):
        try:
            worker(A, B, row_out, row_idx)
        except Exception as exc:
            failures[row_idx] = exc
            return
        completed[row_idx] = True

    log_phase(Phase.SPAWNING)
    threads = []
    for row_idx in range(n):
        thread = thread_factory(target=run_row, args=(row_idx, C[row_idx]),
                                name=f"row-worker-{row_idx}")
        try:
            thread.start()
        except RuntimeError as exc:
            logger.debug("Worker for row %d failed to start, joining %d started workers",
                         row_idx, len(threads))
            _join_started(threads)
            raise SpawnFailure(f"Could not start worker for row {row_idx}") from exc
        threads.append(thread)
        logger.debug("Started worker for row %d", row_idx)

    log_phase(Phase.AWAITING_COMPLETION)
    for row_idx, thread in enumerate(threads):
        try:
            thread.join()
        except KeyboardInterrupt as exc:
            raise JoinFailure(f"Wait for the row {row_idx} worker was interrupted") from exc
        logger.debug("Joined worker for row %d", row_idx)

    for row_idx in range(n):
        if failures[row_idx] is not None:
            raise JoinFailure(f"Worker for row {row_idx} did not complete its row") from failures[row_idx]
        if not completed[row_idx]:
            raise JoinFailure(f"Worker for row {row_idx} did not complete its row")

    return C


def pool_matrix_multiplication(A, B, worker=multiply_row, max_workers=None):
    """
    Parallel matrix multiplication submitting one row task per row to a thread pool.
    A: square matrix (n x n)
    B: square matrix (n x n)
    worker: callable(A, B, row_out, row_idx) computing a single row
    max_workers: pool size (default is one thread per row)
    Returns: result matrix C (n x n)
    """
    n = _square_dimension(A, B)
    C = np.zeros((n, n), dtype=np.result_type(A, B))

    if max_workers is None:
        max_workers = n

    # Leaving the executor block waits for every submitted task
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="row-worker") as pool:
        log_phase(Phase.SPAWNING)
        futures = []
        for row_idx in range(n):
            try:
                futures.append(pool.submit(worker, A, B, C[row_idx], row_idx))
            except RuntimeError as exc:
                raise SpawnFailure(f"Could not submit task for row {row_idx}") from exc

        log_phase(Phase.AWAITING_COMPLETION)
        for row_idx, future in enumerate(futures):
            try:
                future.result()
            except KeyboardInterrupt as exc:
                raise JoinFailure(f"Wait for the row {row_idx} task was interrupted") from exc
            except Exception as exc:
                raise JoinFailure(f"Task for row {row_idx} did not complete its row") from exc

    return C


def verify_shared_memory(sizes):
    """
    Check both parallel algorithms against numpy for different matrix sizes.
    """
    for size in sizes:
        A = np.random.randint(-10, 10, (size, size))
        B = np.random.randint(-10, 10, (size, size))
        expected_C = np.matmul(A, B)

        assert np.array_equal(threaded_matrix_multiplication(A, B), expected_C), \
            f"Threaded result incorrect for size {size}"
        assert np.array_equal(pool_matrix_multiplication(A, B), expected_C), \
            f"Pool result incorrect for size {size}"
        print(f"Matrix size: {size}x{size}, threaded and pool results match numpy")


if __name__ == "__main__":
    sizes = [3, 10, 25]
    verify_shared_memory(sizes)
