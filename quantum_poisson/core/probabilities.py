from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from quantum_poisson.core.errors import EngineInputError

DEFAULT_RHO = -0.05
FULL_TIME_CAP = 10
HALF_TIME_CAP = 6
HALF_TIME_FACTOR = 0.45


def poisson_pmf(lam: float, k: int) -> float:
    if k < 0:
        return 0.0
    num = 1.0
    for i in range(1, k + 1):
        num *= lam / i
    return num * math.exp(-lam)


def dixon_coles_tau(i: int, j: int, lam_h: float, lam_a: float, rho: float) -> float:
    if rho == 0.0:
        return 1.0
    if i == 0 and j == 0:
        return 1.0 - (lam_h * lam_a * rho)
    if i == 0 and j == 1:
        return 1.0 + (lam_h * rho)
    if i == 1 and j == 0:
        return 1.0 + (lam_a * rho)
    if i == 1 and j == 1:
        return 1.0 - rho
    return 1.0


def build_score_grid(lam_h: float, lam_a: float, rho: float = DEFAULT_RHO, size: int = FULL_TIME_CAP) -> np.ndarray:
    """Griglia congiunta P(casa=i, ospite=j) per i, j in 0..size-1.

    Troncata a `size`: per lambda realistiche (< ~3) la massa persa e' trascurabile.
    """
    if lam_h < 0 or lam_a < 0:
        raise EngineInputError(f"lambda negative non ammesse: home={lam_h}, away={lam_a}")
    if size <= 0:
        raise EngineInputError(f"dimensione griglia non valida: {size}")

    p_h = [poisson_pmf(lam_h, k) for k in range(size)]
    p_a = [poisson_pmf(lam_a, k) for k in range(size)]

    grid = np.zeros((size, size), dtype=float)
    for i, ph in enumerate(p_h):
        for j, pa in enumerate(p_a):
            tau = dixon_coles_tau(i, j, lam_h, lam_a, rho)
            grid[i, j] = ph * pa * max(0.0, tau)
    return grid


def build_half_time_grid(lam_h: float, lam_a: float, rho: float = 0.0, factor: float = HALF_TIME_FACTOR,
                         size: int = HALF_TIME_CAP) -> np.ndarray:
    return build_score_grid(lam_h * factor, lam_a * factor, rho=rho, size=size)


def outcome_split(grid: np.ndarray) -> Tuple[float, float, float]:
    """(p_home, p_draw, p_away) come somme su i>j, i=j, i<j."""
    p_home = float(np.tril(grid, k=-1).sum())
    p_draw = float(np.trace(grid))
    p_away = float(np.triu(grid, k=1).sum())
    return p_home, p_draw, p_away


def total_goals(size: int) -> np.ndarray:
    idx = np.arange(size)
    return np.add.outer(idx, idx)
