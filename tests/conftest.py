"""Pytest configuration and shared fixtures."""

import os

# Ensure headless pygame for all tests
os.environ['SDL_VIDEODRIVER'] = 'dummy'
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

import json
from types import SimpleNamespace

import pygame
import pytest

from universe_hopper.assets import LevelAssetBundle, LoadedLevels, PlayerSprites
from universe_hopper.config import GameConfig, LevelConfig, PlayerConfig, ViewportConfig
from universe_hopper.levels import LevelDescriptor


BG_COLORS = [
    (200, 0, 0),
    (0, 160, 0),
    (0, 0, 180),
    (200, 200, 0),
    (0, 200, 200),
    (200, 0, 200),
]
IDLE_COLOR = (250, 250, 250)
WALK_COLOR = (120, 120, 120)
SPRITE_SIZE = (40, 80)


def solid(size, color):
    surface = pygame.Surface(size)
    surface.fill(color)
    return surface


def write_png(path, size=(64, 36), color=(255, 0, 0)):
    path.parent.mkdir(parents=True, exist_ok=True)
    pygame.image.save(solid(size, color), str(path))
    return path


def write_frames(folder, count, size=SPRITE_SIZE, color=IDLE_COLOR):
    for i in range(1, count + 1):
        write_png(folder / f"frame_{i:02d}.png", size, color)
    return folder


def write_levels(root, levels, name="data/levels.json"):
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"levels": levels}))
    return path


@pytest.fixture
def files():
    """Helpers for writing images and level documents."""
    return SimpleNamespace(solid=solid, png=write_png, frames=write_frames, levels=write_levels)


@pytest.fixture
def small_config():
    """Small viewport so walks across the screen take few frames."""
    return GameConfig(
        viewport=ViewportConfig(width=320, height=180),
        player=PlayerConfig(floor_y=150),
    )


@pytest.fixture
def make_levels():
    """Factory for in-memory level pools with solid-colour backgrounds."""
    def _make(count, home=None, size=(320, 180)):
        descriptors = []
        bundles = {}
        for i in range(count):
            level_id = f"level{i + 1}"
            descriptors.append(LevelDescriptor(
                id=level_id, background=f"{level_id}.png", is_home=(i == home),
            ))
            bundles[level_id] = LevelAssetBundle(
                level_id=level_id,
                background=solid(size, BG_COLORS[i % len(BG_COLORS)]),
            )
        return LoadedLevels(descriptors=descriptors, bundles=bundles)
    return _make


@pytest.fixture
def sprites():
    """One idle frame and four walk frames."""
    return PlayerSprites(
        idle=[solid(SPRITE_SIZE, IDLE_COLOR)],
        walk=[solid(SPRITE_SIZE, WALK_COLOR) for _ in range(4)],
        idle_fps=1,
        walk_fps=12,
    )


@pytest.fixture
def asset_root(tmp_path):
    """On-disk game: three levels (the second is home) and hero sprites."""
    for i, name in enumerate(["alpha", "beta", "gamma"]):
        write_png(tmp_path / "assets" / "levels" / name / "bg.png", color=BG_COLORS[i])
    write_png(tmp_path / "assets" / "levels" / "beta" / "fg.png", color=(10, 10, 10))
    write_frames(tmp_path / "assets" / "levels" / "gamma" / "stars", 3, size=(64, 36), color=(255, 255, 255))
    write_frames(tmp_path / "assets" / "sprites" / "hero_idle_custom", 1, color=IDLE_COLOR)
    write_frames(tmp_path / "assets" / "sprites" / "hero_walk_custom", 8, color=WALK_COLOR)

    write_levels(tmp_path, [
        {"id": "alpha", "background": "assets/levels/alpha/bg.png"},
        {"id": "beta", "background": "assets/levels/beta/bg.png",
         "foreground": "assets/levels/beta/fg.png", "isHome": True},
        {"id": "gamma", "background": "assets/levels/gamma/bg.png",
         "layer1": {"type": "frames", "folder": "assets/levels/gamma/stars", "count": 3, "fps": 8}},
    ])
    return tmp_path


@pytest.fixture
def game_config(asset_root):
    """Small-viewport config reading the on-disk game."""
    return GameConfig(
        viewport=ViewportConfig(width=320, height=180),
        player=PlayerConfig(floor_y=150),
        levels=LevelConfig(levels_path="data/levels.json", asset_root=str(asset_root)),
    )
