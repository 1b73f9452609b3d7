"""Tests for scripted policies."""

import numpy as np
import pytest

from universe_hopper.gym_env import ACTION_LEFT, ACTION_RIGHT, ACTION_STAY, HopperEnv
from universe_hopper.policies import POLICIES, PacerPolicy, RandomPolicy, WalkerPolicy, run_episode


@pytest.fixture
def env(game_config):
    e = HopperEnv(config=game_config, max_episode_steps=600)
    yield e
    e.close()


@pytest.fixture
def obs(env):
    o, _ = env.reset(seed=42)
    return o


class TestRandomPolicy:
    def test_returns_valid_action(self, obs):
        policy = RandomPolicy(rng=np.random.default_rng(0))
        assert policy(obs) in (ACTION_STAY, ACTION_LEFT, ACTION_RIGHT)

    def test_varies_actions(self, obs):
        policy = RandomPolicy(rng=np.random.default_rng(0))
        assert len({policy(obs) for _ in range(30)}) == 3


class TestWalkerPolicy:
    def test_direction(self, obs):
        assert WalkerPolicy()(obs) == ACTION_RIGHT
        assert WalkerPolicy(direction=-1)(obs) == ACTION_LEFT

    def test_visits_levels(self, env):
        policy = WalkerPolicy()
        obs, _ = env.reset(seed=0)
        for _ in range(400):
            obs, _, _, truncated, info = env.step(policy(obs))
        assert info["transitions"] >= 2
        assert len(info["visited"]) == 3


class TestPacerPolicy:
    def test_pattern(self, obs):
        policy = PacerPolicy(period=2)
        actions = [policy(obs) for _ in range(10)]
        assert actions == [
            ACTION_RIGHT, ACTION_RIGHT, ACTION_STAY, ACTION_STAY,
            ACTION_LEFT, ACTION_LEFT, ACTION_STAY, ACTION_STAY,
            ACTION_RIGHT, ACTION_RIGHT,
        ]

    def test_reset(self, obs):
        policy = PacerPolicy(period=1)
        policy(obs)
        policy(obs)
        policy.reset()
        assert policy(obs) == ACTION_RIGHT


class TestRegistry:
    def test_all_policies_registered(self):
        assert set(POLICIES) == {"random", "walker", "pacer"}

    def test_policies_run_in_env(self, env):
        for name, cls in POLICIES.items():
            policy = cls()
            policy.reset()
            obs, _ = env.reset(seed=0)
            for _ in range(50):
                obs, *_ = env.step(policy(obs))


class TestRunEpisode:
    def test_walker_summary(self, env):
        summary = run_episode(env, WalkerPolicy(), seed=0)
        assert summary["policy"] == "walker"
        assert summary["steps"] == 600
        assert summary["transitions"] >= 2
        assert summary["levels_visited"] == 3
        assert summary["level_count"] == 3

    def test_passes_reset_options(self, game_config):
        env = HopperEnv(config=game_config, max_episode_steps=5)
        summary = run_episode(env, PacerPolicy(), options={"debug_level": 1})
        assert summary["final_level"] == "alpha"
        assert summary["total_reward"] == pytest.approx(5 * -0.01)
        env.close()
