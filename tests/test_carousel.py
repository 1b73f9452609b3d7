"""Tests for level selection policies."""

import numpy as np
import pytest

from universe_hopper.carousel import LevelCarousel, RandomSelector, make_selector
from universe_hopper.player import Edge


def rng(seed=0):
    return np.random.default_rng(seed)


class TestCarouselSeeding:
    def test_home_seeds_history(self):
        carousel = LevelCarousel(5, home_index=3, rng=rng())
        assert carousel.sequence == [3]
        assert carousel.current == 3

    def test_start_index_beats_home(self):
        carousel = LevelCarousel(5, home_index=3, rng=rng(), start_index=1)
        assert carousel.current == 1

    def test_random_seed_without_home(self):
        seen = {LevelCarousel(4, rng=rng(s)).current for s in range(40)}
        assert seen == {0, 1, 2, 3}

    def test_rejects_empty_pool(self):
        with pytest.raises(ValueError):
            LevelCarousel(0)

    @pytest.mark.parametrize("kwargs", [{"home_index": 5}, {"start_index": -1}])
    def test_rejects_out_of_range(self, kwargs):
        with pytest.raises(ValueError):
            LevelCarousel(5, rng=rng(), **kwargs)


class TestCarouselMoves:
    def test_single_level_is_noop(self):
        carousel = LevelCarousel(1, rng=rng())
        assert carousel.move_right() == 0
        assert carousel.move_left() == 0
        assert carousel.sequence == [0]
        assert carousel.cursor == 0

    def test_right_then_left_returns(self):
        carousel = LevelCarousel(6, home_index=0, rng=rng())
        nxt = carousel.move_right()
        assert nxt != 0
        assert carousel.move_left() == 0
        assert carousel.sequence == [0, nxt]
        assert carousel.move_right() == nxt
        assert len(carousel.sequence) == 2

    def test_left_prepends(self):
        carousel = LevelCarousel(6, home_index=2, rng=rng())
        prev = carousel.move_left()
        assert carousel.sequence == [prev, 2]
        assert carousel.cursor == 0
        assert carousel.move_right() == 2

    def test_first_move_from_home_picks_non_home(self):
        for seed in range(20):
            carousel = LevelCarousel(3, home_index=1, rng=rng(seed))
            assert carousel.move(Edge.RIGHT) != 1

    @pytest.mark.parametrize("seed", range(5))
    def test_no_repeats_until_exhausted(self, seed):
        n = 5
        carousel = LevelCarousel(n, rng=rng(seed))
        for _ in range(n - 1):
            carousel.move_right()
            assert len(set(carousel.sequence)) == len(carousel.sequence)
        assert sorted(carousel.sequence) == list(range(n))
        assert carousel.exhausted

        # Ring is frozen: the next move rotates back to the first entry
        assert carousel.move_right() == carousel.sequence[0]
        assert len(carousel.sequence) == n

    def test_exhausted_with_home(self):
        carousel = LevelCarousel(4, home_index=0, rng=rng())
        for _ in range(3):
            carousel.move_right()
        assert carousel.exhausted
        assert carousel.unused == []
        assert carousel.move_right() == 0
        assert carousel.move_left() == carousel.sequence[-1]

    def test_mixed_directions_cover_pool(self):
        carousel = LevelCarousel(5, home_index=2, rng=rng(7))
        carousel.move_left()
        carousel.move_left()
        carousel.move_right()
        carousel.move_right()
        carousel.move_right()
        carousel.move_right()
        assert sorted(carousel.sequence) == [0, 1, 2, 3, 4]

    def test_non_home_start_keeps_home_out(self):
        carousel = LevelCarousel(4, home_index=0, rng=rng(), start_index=2)
        for _ in range(10):
            assert carousel.move_right() != 0
        assert sorted(carousel.sequence) == [1, 2, 3]

    def test_two_levels_ping_pong(self):
        carousel = LevelCarousel(2, home_index=0, rng=rng())
        assert [carousel.move_right() for _ in range(4)] == [1, 0, 1, 0]


class TestRandomSelector:
    def test_start_index(self):
        assert RandomSelector(4, rng=rng(), start_index=2).current == 2

    def test_draws_with_replacement(self):
        selector = RandomSelector(3, rng=rng(1))
        draws = [selector.move(Edge.LEFT) for _ in range(60)]
        assert set(draws) == {0, 1, 2}
        assert draws[-1] == selector.current

    def test_deterministic_with_seed(self):
        a = RandomSelector(10, rng=rng(3))
        b = RandomSelector(10, rng=rng(3))
        assert [a.move_right() for _ in range(20)] == [b.move_right() for _ in range(20)]


class TestMakeSelector:
    def test_carousel(self):
        selector = make_selector("carousel", 3, home_index=1, rng=rng())
        assert isinstance(selector, LevelCarousel)
        assert selector.current == 1

    def test_random_ignores_home(self):
        selector = make_selector("random", 3, home_index=1, rng=rng(), start_index=0)
        assert isinstance(selector, RandomSelector)
        assert selector.current == 0

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown selection policy"):
            make_selector("shuffle", 3)
