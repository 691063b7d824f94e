"""
Shared fixtures: seeded random test systems.
"""

import numpy as np
import pytest

SYSTEM_ORDER = 20


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1)


@pytest.fixture
def spd_system(rng: np.random.Generator) -> tuple[np.ndarray, np.ndarray]:
    """Well-conditioned real SPD matrix and right-hand side."""
    B = rng.standard_normal((SYSTEM_ORDER, SYSTEM_ORDER))
    A = B.T @ B + SYSTEM_ORDER * np.eye(SYSTEM_ORDER)
    b = rng.standard_normal(SYSTEM_ORDER)
    return A, b


@pytest.fixture
def hermitian_system(rng: np.random.Generator) -> tuple[np.ndarray, np.ndarray]:
    """Hermitian positive definite complex64 matrix A = B^H B and right-hand side."""
    B = rng.standard_normal((SYSTEM_ORDER, SYSTEM_ORDER)) + 1j * rng.standard_normal(
        (SYSTEM_ORDER, SYSTEM_ORDER)
    )
    A = (B.conj().T @ B + SYSTEM_ORDER * np.eye(SYSTEM_ORDER)).astype(np.complex64)
    b = (rng.standard_normal(SYSTEM_ORDER) + 1j * rng.standard_normal(SYSTEM_ORDER)).astype(
        np.complex64
    )
    return A, b


@pytest.fixture
def vectors() -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Placeholder solution, source and residual vectors."""
    return np.zeros(3), np.ones(3), np.ones(3)
