"""Layer compositor: draws one level's visual stack back to front.

Background and foreground use zoom-and-pan-follow: the image is scaled up
by a per-role zoom so it overhangs the viewport, then shifted horizontally
in proportion to the player's normalized position. The pan can never exceed
half the overhang, so image edges are never revealed.

Optional layers are drawn either with the background's exact transform
(background-aligned) or stretched over the viewport with no transform
(screen-fixed).
"""

import math
from typing import Dict, Optional, Tuple

import pygame

from .assets import AnimatedLayer, LevelAssetBundle, PlayerSprites, ResolvedLayer, StaticLayer
from .config import GameConfig
from .levels import Alignment
from .player import AnimMode, FACING_LEFT, PlayerState


COLOR_CLEAR = (0, 0, 0)
COLOR_ERROR_BG = (17, 17, 17)
COLOR_ERROR_TEXT = (235, 235, 235)

FATAL_MESSAGE = "Asset loading error. Check console."


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def hero_normalized_x(x: float, render_w: float, viewport_width: float) -> float:
    """Player position across its walkable range, mapped to [-1, +1].

    Left edge → -1, center → 0, right edge → +1.
    """
    walkable = max(1.0, viewport_width - render_w)
    t = clamp(x / walkable, 0.0, 1.0)
    return t * 2 - 1


def max_pan(zoom: float, viewport_width: float, max_pan_px: float) -> float:
    """Largest pan allowed: the zoom overhang per side, capped by ``max_pan_px``."""
    from_zoom = (viewport_width * zoom - viewport_width) / 2
    return max(0.0, min(from_zoom, max_pan_px))


def pan_offset(
    hero_n: float, zoom: float, follow: float, viewport_width: float, max_pan_px: float,
) -> float:
    """Horizontal pan for a zoomed layer; same sign as the player's side."""
    limit = max_pan(zoom, viewport_width, max_pan_px)
    pan = clamp(hero_n, -1.0, 1.0) * limit * clamp(follow, 0.0, 1.0)
    return clamp(pan, -limit, limit)


def zoom_pan_rect(
    hero_n: float,
    zoom: float,
    follow: float,
    viewport_width: float,
    viewport_height: float,
    max_pan_px: float,
) -> Tuple[float, float, float, float]:
    """Destination (x, y, w, h) of a zoomed image, centred then panned."""
    draw_w = viewport_width * zoom
    draw_h = viewport_height * zoom
    pan = pan_offset(hero_n, zoom, follow, viewport_width, max_pan_px)
    x = -(draw_w - viewport_width) / 2 + pan
    y = -(draw_h - viewport_height) / 2
    return x, y, draw_w, draw_h


class LayerCompositor:
    """Renders a level bundle plus the player onto a pygame surface.

    Scaled copies of images are cached, since every layer is drawn at a
    fixed size for the whole session.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self._cache: Dict[Tuple[int, int, int, bool], Tuple[pygame.Surface, pygame.Surface]] = {}

    def _scaled(self, image: pygame.Surface, size: Tuple[int, int], flip: bool = False) -> pygame.Surface:
        key = (id(image), size[0], size[1], flip)
        hit = self._cache.get(key)
        if hit is not None and hit[0] is image:
            return hit[1]
        scaled = image if image.get_size() == size else pygame.transform.scale(image, size)
        if flip:
            scaled = pygame.transform.flip(scaled, True, False)
        self._cache[key] = (image, scaled)
        return scaled

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def draw_zoom_pan_follow(
        self, surface: pygame.Surface, image: Optional[pygame.Surface],
        zoom: float, follow: float, hero_n: float,
    ) -> None:
        if image is None:
            return
        vp = self.config.viewport
        x, y, w, h = zoom_pan_rect(
            hero_n, zoom, follow, vp.width, vp.height, self.config.parallax.max_pan_px,
        )
        # Round size up so float positions never leave a one-pixel gap
        scaled = self._scaled(image, (math.ceil(w), math.ceil(h)))
        surface.blit(scaled, (round(x), round(y)))

    def draw_screen_fixed(self, surface: pygame.Surface, image: pygame.Surface) -> None:
        vp = self.config.viewport
        surface.blit(self._scaled(image, (vp.width, vp.height)), (0, 0))

    def draw_layer(self, surface: pygame.Surface, layer: ResolvedLayer, hero_n: float, dt: float) -> None:
        """Advance (if animated) and draw one optional layer."""
        if isinstance(layer, AnimatedLayer):
            if not layer.frames:
                return
            layer.animation.advance(dt)
            image = layer.current_frame
        elif isinstance(layer, StaticLayer):
            image = layer.image
        else:
            raise TypeError(f"Unknown layer type: {type(layer).__name__}")

        if layer.alignment is Alignment.BACKGROUND:
            p = self.config.parallax
            self.draw_zoom_pan_follow(surface, image, p.background_zoom, p.background_follow, hero_n)
        elif layer.alignment is Alignment.SCREEN:
            self.draw_screen_fixed(surface, image)
        else:
            raise TypeError(f"Unknown alignment: {layer.alignment!r}")

    def draw_player(self, surface: pygame.Surface, player: PlayerState, sprites: Optional[PlayerSprites]) -> None:
        if not player.visible or sprites is None:
            return

        frames = sprites.walk if player.anim is AnimMode.WALK else sprites.idle
        if not frames:
            return
        img = frames[player.frame_index % len(frames)]

        cfg = self.config.player
        draw_w = round(img.get_width() * cfg.sprite_scale)
        draw_h = round(img.get_height() * cfg.sprite_scale)

        walk_bob = 0.0
        if player.anim is AnimMode.WALK and cfg.walk_bob_px > 0 and sprites.walk:
            phase = (player.frame_index / len(sprites.walk)) * math.pi * 2
            walk_bob = math.sin(phase) * cfg.walk_bob_px

        x = round(player.x)
        y = round(cfg.floor_y - draw_h - cfg.feet_fudge_px + walk_bob)
        scaled = self._scaled(img, (draw_w, draw_h), flip=player.facing == FACING_LEFT)
        surface.blit(scaled, (x, y))

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def draw_frame(
        self,
        surface: pygame.Surface,
        bundle: Optional[LevelAssetBundle],
        player: PlayerState,
        sprites: Optional[PlayerSprites],
        dt: float,
    ) -> None:
        """Clear ``surface`` and draw the whole stack in ``layer_order``."""
        surface.fill(COLOR_CLEAR)
        if bundle is None:
            return

        p = self.config.parallax
        hero_n = hero_normalized_x(player.x, player.render_w, self.config.viewport.width)

        for slot in self.config.levels.layer_order:
            if slot == "background":
                self.draw_zoom_pan_follow(
                    surface, bundle.background, p.background_zoom, p.background_follow, hero_n,
                )
            elif slot == "foreground":
                self.draw_zoom_pan_follow(
                    surface, bundle.foreground, p.foreground_zoom, p.foreground_follow, hero_n,
                )
            elif slot == "player":
                self.draw_player(surface, player, sprites)
            else:
                layer = bundle.layers.get(slot)
                if layer is not None:
                    self.draw_layer(surface, layer, hero_n, dt)


def draw_fatal_error(surface: pygame.Surface, message: str = FATAL_MESSAGE) -> None:
    """Replace the frame with a static, legible error message."""
    if not pygame.font.get_init():
        pygame.font.init()
    surface.fill(COLOR_ERROR_BG)
    font = pygame.font.Font(None, 28)
    text_surface = font.render(message, True, COLOR_ERROR_TEXT)
    surface.blit(text_surface, (20, 20))
