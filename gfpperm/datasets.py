"""Simulated EEG trials"""
from typing import List, Sequence, Tuple

import numpy as np
from scipy.signal import windows


def simulate_trials(
        n_subjects: int = 6,
        n_trials: Tuple[int, int] = (30, 20),
        n_channels: int = 16,
        n_samples: int = 60,
        effect: Tuple[int, int] = None,
        amplitude: float = 1.,
        seed: int = 0,
) -> Tuple[List[np.ndarray], List[np.ndarray]]:
    """Simulate average referenced trials for two conditions

    Parameters
    ----------
    n_subjects
        Number of subjects.
    n_trials
        Number of trials in condition A and B. Subjects randomly lose up to
        20 % of their trials, so the design is unbalanced.
    n_channels
        Number of channels.
    n_samples
        Number of samples per trial.
    effect
        Start and stop sample of the window in which condition A has an
        additional topography (and thus a larger GFP). The default is the
        middle third of the trial.
    amplitude
        Amplitude of the effect relative to the noise standard deviation
        (``0`` to simulate data under the null hypothesis).
    seed
        Random seed.

    Returns
    -------
    a, b : list of array  (n_channels, n_samples, n_trials)
        Trials for each subject.
    """
    rng = np.random.RandomState(seed)
    if effect is None:
        effect = (n_samples // 3, 2 * n_samples // 3)
    start, stop = effect
    if not 0 <= start < stop <= n_samples:
        raise ValueError(f"{effect=} for {n_samples=}")
    time_course = np.zeros(n_samples)
    time_course[start:stop] = windows.hann(stop - start)
    a = []
    b = []
    for _ in range(n_subjects):
        topography = rng.normal(0, 1, n_channels)
        topography -= topography.mean()
        pattern = amplitude * topography[:, None] * time_course
        for n, out, signal in zip(n_trials, (a, b), (pattern, np.zeros_like(pattern))):
            n_keep = n - rng.randint(0, n // 5 + 1)
            x = rng.normal(0, 1, (n_channels, n_samples, n_keep))
            x += signal[:, :, None]
            x -= x.mean(0)
            out.append(x)
    return a, b


def constant_trials(values: Sequence[float], n_trials: Sequence[int], n_channels: int = 4, n_samples: int = 10):
    """Trials in which the GFP is constant

    Channels alternate between ``+value`` and ``-value``, so the GFP of every
    sample equals ``value`` (for an even number of channels).

    Returns
    -------
    trials : list of array  (n_channels, n_samples, n_trials)
        One trial set for each value.
    """
    if n_channels % 2:
        raise ValueError(f"{n_channels=}: needs to be even")
    sign = np.tile([1., -1.], n_channels // 2)
    return [np.repeat((v * sign)[:, None, None], n_samples, 1).repeat(n, 2) for v, n in zip(values, n_trials)]
