import numpy as np


def sequential_matrix_multiplication(A, B):
    """
    Sequential matrix multiplication.
    A: integer matrix (m x n)
    B: integer matrix (n x p)
    Returns: result matrix C (m x p)
    """
    if A.ndim != 2 or B.ndim != 2 or A.shape[1] != B.shape[0]:
        raise ValueError("Matrix dimensions incompatible for multiplication")

    m, n = A.shape
    n, p = B.shape

    C = np.zeros((m, p), dtype=np.result_type(A, B))

    for i in range(m):
        for j in range(p):
            for k in range(n):
                C[i][j] += A[i][k] * B[k][j]

    return C


if __name__ == "__main__":
    A = np.random.randint(0, 10, (4, 4))
    B = np.random.randint(0, 10, (4, 4))
    C = sequential_matrix_multiplication(A, B)

    # Verify correctness with numpy
    assert np.array_equal(C, np.matmul(A, B)), "Sequential result incorrect"
    print(C)
