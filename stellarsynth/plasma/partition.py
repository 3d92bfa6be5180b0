"""
Partition function evaluation logic.

Partition functions are plain callables ``U(T)``; the classes here are the
two forms shipped with the package.
"""

from typing import List, Union
import numpy as np


def polynomial_partition_function(
    T_K: Union[float, np.ndarray], coefficients: List[float]
) -> Union[float, np.ndarray]:
    """
    Evaluate partition function using Irwin polynomial form.

    log(U) = sum(a_n * (log T)^n)

    Parameters
    ----------
    T_K : float or array
        Temperature in Kelvin
    coefficients : List[float]
        Polynomial coefficients [a0, a1, a2, ...]

    Returns
    -------
    float or array
        Partition function value U(T); 1 for T <= 1 K
    """
    T = np.asarray(T_K, dtype=float)
    ln_T = np.log(np.maximum(T, 1.0))
    ln_U = np.zeros_like(ln_T)

    for i, a in enumerate(coefficients):
        ln_U = ln_U + a * (ln_T**i)

    U = np.where(T <= 1.0, 1.0, np.exp(ln_U))
    return float(U) if U.ndim == 0 else U


class PolynomialPartitionFunction:
    """Partition function from Irwin (1981) polynomial coefficients."""

    def __init__(self, coefficients: List[float]):
        self.coefficients = list(coefficients)

    def __call__(self, T_K):
        return polynomial_partition_function(T_K, self.coefficients)

    def __repr__(self):
        return f"PolynomialPartitionFunction({self.coefficients})"


class ConstantPartitionFunction:
    """
    Temperature-independent partition function.

    Used with the statistical weight of the ground term, which is the low
    temperature limit of U(T).
    """

    def __init__(self, value: float):
        if value <= 0:
            raise ValueError("Partition function value must be positive")
        self.value = float(value)

    def __call__(self, T_K):
        if np.ndim(T_K) == 0:
            return self.value
        return np.full(np.shape(T_K), self.value)

    def __repr__(self):
        return f"ConstantPartitionFunction({self.value})"
