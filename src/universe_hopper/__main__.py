"""Command-line entry point: ``python -m universe_hopper``."""

import argparse
import copy
import logging
import sys
from typing import List, Optional

from .config import CONFIGS, GameConfig, LevelConfig
from .engine import HopperEngine
from .errors import HopperError
from .gym_env import HopperEnv
from .policies import POLICIES, run_episode


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="universe_hopper",
        description="Walk off either edge of the screen to hop to another universe.",
    )
    parser.add_argument("--levels", help="Level document (JSON), relative to the asset root")
    parser.add_argument("--asset-root", help="Directory asset paths are resolved against")
    parser.add_argument("--preset", choices=sorted(CONFIGS), default="default")
    parser.add_argument("--policy", choices=LevelConfig.SELECTION_POLICIES,
                        help="Level selection policy (overrides the preset)")
    parser.add_argument("--debug", action="store_true", help="Enable debug overrides")
    parser.add_argument("--level", help="1-based start level (only with --debug)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    autoplay = parser.add_argument_group("autoplay")
    autoplay.add_argument("--autoplay", choices=sorted(POLICIES),
                          help="Let a scripted policy walk instead of the keyboard")
    autoplay.add_argument("--steps", type=int, default=2000, help="Frames per autoplay episode")
    autoplay.add_argument("--episodes", type=int, default=1)
    autoplay.add_argument("--seed", type=int, default=None)
    autoplay.add_argument("--headless", action="store_true", help="Autoplay without a window")
    return parser


def config_from_args(args: argparse.Namespace) -> GameConfig:
    """Copy the chosen preset and apply command-line overrides."""
    config = copy.deepcopy(CONFIGS[args.preset])
    if args.levels:
        config.levels.levels_path = args.levels
    if args.asset_root:
        config.levels.asset_root = args.asset_root
    if args.policy:
        config.levels.selection_policy = args.policy
    return config


def autoplay(config: GameConfig, args: argparse.Namespace) -> int:
    """Run scripted episodes through HopperEnv and print a summary of each."""
    try:
        env = HopperEnv(
            config=config,
            render_mode=None if args.headless else "human",
            max_episode_steps=args.steps,
        )
    except HopperError as e:
        logger.error("Startup failed: %s", e)
        return 1

    options = {"debug_level": args.level} if args.debug and args.level else None
    policy = POLICIES[args.autoplay]()
    try:
        for episode in range(args.episodes):
            seed = None if args.seed is None else args.seed + episode
            summary = run_episode(env, policy, seed=seed, options=options)
            print(
                f"Episode {episode + 1}: {summary['steps']} steps, "
                f"{summary['transitions']} transitions, "
                f"{summary['levels_visited']}/{summary['level_count']} levels, "
                f"reward {summary['total_reward']:.2f}, ended in {summary['final_level']}"
            )
    finally:
        env.close()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = config_from_args(args)

    if args.autoplay:
        return autoplay(config, args)

    engine = HopperEngine(
        config,
        debug_level=args.level if args.debug else None,
    )
    engine.run()
    return 1 if engine.fatal_error else 0


if __name__ == "__main__":
    sys.exit(main())
