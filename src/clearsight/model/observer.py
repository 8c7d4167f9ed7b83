"""
observer.py
-----------

Simulated observer for the gap-orientation task.

The observer answers a 4-alternative forced choice with probability of
being correct given by a logistic psychometric function of log size:

    p(correct | s) = guess + (1 - guess - lapse) * sigmoid(slope * (log s - log t))

where t is the observer's threshold size. At s = t the observer is halfway
between chance and its ceiling. Wrong answers are spread uniformly over the
three other directions.

Used by tests and examples to drive a StaircaseController without a UI.
"""

from __future__ import annotations

from dataclasses import dataclass

import jax
import jax.numpy as jnp
import jax.random as jr

from clearsight.data.dataset import GapDirection, Trial

_DIRECTIONS = tuple(GapDirection)


@dataclass(frozen=True)
class ObserverConfig:
    """
    Parameters of a simulated observer.

    Attributes
    ----------
    threshold_norm : float
        Size at which performance is halfway between guess and ceiling.
    slope : float
        Steepness of the psychometric function in log-size units.
    guess_rate : float
        Chance performance (0.25 for four directions).
    lapse_rate : float
        Probability of an error regardless of size.
    """

    threshold_norm: float
    slope: float = 8.0
    guess_rate: float = 0.25
    lapse_rate: float = 0.02

    def __post_init__(self):
        if self.threshold_norm <= 0:
            raise ValueError(f"threshold_norm must be positive, got {self.threshold_norm}")
        if self.slope <= 0:
            raise ValueError(f"slope must be positive, got {self.slope}")
        if not 0 <= self.guess_rate < 1:
            raise ValueError(f"guess_rate must be in [0, 1), got {self.guess_rate}")
        if not 0 <= self.lapse_rate < 1 - self.guess_rate:
            raise ValueError(
                f"lapse_rate must be in [0, 1 - guess_rate), got {self.lapse_rate}"
            )


class SimulatedObserver:
    """
    Synthetic respondent with a logistic psychometric function.

    Parameters
    ----------
    config : ObserverConfig
        Psychometric parameters.
    key : jax.Array
        PRNG key; split on every response.

    Examples
    --------
    >>> import jax.random as jr
    >>> obs = SimulatedObserver(ObserverConfig(threshold_norm=0.06), jr.PRNGKey(0))
    >>> float(obs.p_correct(0.5)) > 0.9
    True
    """

    def __init__(self, config: ObserverConfig, key: jax.Array):
        self.config = config
        self._key = key

    def p_correct(self, size_norm) -> jnp.ndarray:
        """
        Probability of a correct answer at the given size(s).

        Parameters
        ----------
        size_norm : float or array
            Normalized stimulus size(s), > 0.

        Returns
        -------
        jnp.ndarray
            Probability in [guess_rate, 1 - lapse_rate].
        """
        cfg = self.config
        s = jnp.asarray(size_norm, dtype=jnp.float32)
        z = cfg.slope * (jnp.log(s) - jnp.log(cfg.threshold_norm))
        return cfg.guess_rate + (1.0 - cfg.guess_rate - cfg.lapse_rate) * jax.nn.sigmoid(z)

    def respond(self, trial: Trial) -> GapDirection:
        """
        Answer one trial.

        Parameters
        ----------
        trial : Trial
            The presented stimulus.

        Returns
        -------
        GapDirection
            The actual gap with probability p_correct(trial.size_norm),
            otherwise one of the other three directions.
        """
        self._key, k_correct, k_wrong = jr.split(self._key, 3)
        if bool(jr.uniform(k_correct) < self.p_correct(trial.size_norm)):
            return trial.gap
        wrong = [d for d in _DIRECTIONS if d is not trial.gap]
        return wrong[int(jr.randint(k_wrong, (), 0, len(wrong)))]

    __call__ = respond
