from __future__ import annotations

import math
from typing import Any, Dict, Optional

import numpy as np

from quantum_poisson.core.errors import EngineInputError

DEFAULT_TRIALS = 10000


def sample_poisson(rng: np.random.Generator, lam: float, size: int) -> np.ndarray:
    """Campionamento per trasformazione inversa: moltiplica uniformi finche' il prodotto
    scende sotto e^-lam; il numero di moltiplicazioni meno uno e' il campione."""
    threshold = math.exp(-lam)
    k = np.zeros(size, dtype=np.int64)
    p = np.ones(size, dtype=float)
    active = np.ones(size, dtype=bool)
    while active.any():
        n = int(active.sum())
        p[active] *= rng.random(n)
        k[active] += 1
        active &= p > threshold
    return k - 1


def simulate(lam_h: float, lam_a: float, trials: int = DEFAULT_TRIALS, seed: Optional[int] = None) -> Dict[str, Any]:
    if trials <= 0:
        raise EngineInputError(f"trials deve essere > 0 (ricevuto {trials})")
    if lam_h < 0 or lam_a < 0:
        raise EngineInputError(f"lambda negative non ammesse: home={lam_h}, away={lam_a}")

    rng = np.random.default_rng(seed)
    home_goals = sample_poisson(rng, lam_h, trials)
    away_goals = sample_poisson(rng, lam_a, trials)

    home_win = int(np.count_nonzero(home_goals > away_goals))
    away_win = int(np.count_nonzero(home_goals < away_goals))
    draw = trials - home_win - away_win

    # Diagnostica convergenza: differenza tra meta' 1 e meta' 2
    half = trials // 2
    if half >= 1000:
        p_home_1 = float(np.mean(home_goals[:half] > away_goals[:half]))
        p_home_2 = float(np.mean(home_goals[half:] > away_goals[half:]))
        conv_delta = abs(p_home_1 - p_home_2)
    else:
        conv_delta = None

    return {
        "home_win": home_win / trials * 100,
        "draw": draw / trials * 100,
        "away_win": away_win / trials * 100,
        "trials": trials,
        "seed": seed,
        "convergence_delta": conv_delta,
    }
