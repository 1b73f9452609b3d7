"""Scripted policies for automated traversal runs.

Each policy takes an observation and returns an action compatible with
HopperEnv's Discrete(3) action space.
"""

import numpy as np
from typing import Dict, Optional

from .gym_env import ACTION_LEFT, ACTION_RIGHT, ACTION_STAY


class BasePolicy:
    """Base class for scripted policies."""

    name: str = "base"

    def __call__(self, obs: Dict[str, np.ndarray]) -> int:
        return self.act(obs)

    def act(self, obs: Dict[str, np.ndarray]) -> int:
        raise NotImplementedError

    def reset(self):
        """Called at the start of each episode."""
        pass


class RandomPolicy(BasePolicy):
    """Uniform random action each step. Mostly jitters in place."""

    name = "random"

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng or np.random.default_rng()

    def act(self, obs):
        return int(self.rng.integers(0, 3))


class WalkerPolicy(BasePolicy):
    """Always walk one way. Visits a new level every screen width."""

    name = "walker"

    def __init__(self, direction: int = 1):
        self.action = ACTION_RIGHT if direction >= 0 else ACTION_LEFT

    def act(self, obs):
        return self.action


class PacerPolicy(BasePolicy):
    """Walk right, pause, walk left, pause; a fixed number of steps each.

    Exercises stepping back and forth along carousel history.
    """

    name = "pacer"

    _PATTERN = (ACTION_RIGHT, ACTION_STAY, ACTION_LEFT, ACTION_STAY)

    def __init__(self, period: int = 400):
        self.period = period
        self._step = 0

    def reset(self):
        self._step = 0

    def act(self, obs):
        phase = (self._step // self.period) % len(self._PATTERN)
        self._step += 1
        return self._PATTERN[phase]


POLICIES = {
    "random": RandomPolicy,
    "walker": WalkerPolicy,
    "pacer": PacerPolicy,
}


def run_episode(
    env,
    policy: BasePolicy,
    seed: Optional[int] = None,
    options: Optional[Dict] = None,
) -> Dict:
    """Play one episode of ``env`` with ``policy`` until it ends.

    Returns:
        Summary dict: steps, total reward, transitions, levels visited and
        the level the episode ended in.
    """
    policy.reset()
    obs, info = env.reset(seed=seed, options=options)
    total_reward = 0.0

    while True:
        obs, reward, terminated, truncated, info = env.step(policy(obs))
        total_reward += reward
        if terminated or truncated:
            break

    return {
        "policy": policy.name,
        "steps": info["episode_steps"],
        "total_reward": total_reward,
        "transitions": info["transitions"],
        "levels_visited": len(info["visited"]),
        "level_count": info["level_count"],
        "final_level": info["level_id"],
    }
