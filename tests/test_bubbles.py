import random
from collections import Counter

import pytest

from bubbles import (
    BubbleManager, bubble_scale, points_for_size, pick_kind,
    NORMAL, LIFE, GROWING, IDLE, SHRINKING)
from config import POOL_WIDTH, POOL_HEIGHT, HUD_HEIGHT, BUBBLE_MIN_SIZE, BUBBLE_MAX_SIZE
from powerups import SLOWTIME, DOUBLESCORE


@pytest.mark.parametrize('size, points', [
    (40, 100), (42, 100), (45, 100), (46, 75), (55, 50),
    (60, 35), (65, 25), (70, 20), (75, 15), (76, 10), (80, 10),
])
def test_points_for_size(size, points):
    assert points_for_size(size) == points


@pytest.mark.parametrize('roll, kind', [
    (0.0, SLOWTIME), (0.049, SLOWTIME), (0.05, DOUBLESCORE), (0.099, DOUBLESCORE),
    (0.1, LIFE), (0.199, LIFE), (0.2, NORMAL), (0.999, NORMAL),
])
def test_pick_kind(roll, kind):
    assert pick_kind(roll) == kind


def test_kind_distribution():
    rng = random.Random(11)
    counts = Counter(pick_kind(rng.random()) for _ in range(20000))
    assert abs(counts[SLOWTIME] / 20000 - 0.05) < 0.01
    assert abs(counts[DOUBLESCORE] / 20000 - 0.05) < 0.01
    assert abs(counts[LIFE] / 20000 - 0.10) < 0.01
    assert abs(counts[NORMAL] / 20000 - 0.80) < 0.02


def test_scale_grows_holds_and_shrinks():
    assert bubble_scale(0, None, 0) == pytest.approx(0.15)
    assert bubble_scale(0, None, 300) == pytest.approx(0.575)
    assert bubble_scale(0, None, 600) == pytest.approx(1.0)
    assert bubble_scale(0, None, 1500) == pytest.approx(1.0)
    assert bubble_scale(0, 1700, 1700) == pytest.approx(1.0)
    assert bubble_scale(0, 1700, 1850) == pytest.approx(0.5)
    assert bubble_scale(0, 1700, 2000) == 0
    assert bubble_scale(0, 1700, 5000) == 0
    # same inputs, same answer
    assert bubble_scale(100, None, 400) == bubble_scale(100, None, 400)


def test_spawn_stays_inside_play_area():
    manager = BubbleManager(random.Random(5))
    for now in range(0, 50000, 100):
        bubble = manager.spawn(now)
        x, y = bubble.position
        assert BUBBLE_MIN_SIZE <= bubble.size <= BUBBLE_MAX_SIZE
        assert x - bubble.radius >= 0
        assert x + bubble.radius <= POOL_WIDTH
        assert y - bubble.radius >= HUD_HEIGHT
        assert y + bubble.radius <= POOL_HEIGHT


def test_ids_are_never_reused():
    manager = BubbleManager(random.Random(1))
    first = manager.spawn(0)
    manager.click(first.id)
    manager.clear()
    second = manager.spawn(10)
    assert second.id != first.id


def test_slowed_spawn_doubles_lifetime():
    manager = BubbleManager(random.Random(1))
    assert manager.spawn(0, kind=NORMAL).lifetime == 1700
    assert manager.spawn(0, slowed=True, kind=NORMAL).lifetime == 3400


def test_phases():
    manager = BubbleManager(random.Random(1))
    bubble = manager.spawn(0, kind=NORMAL, size=50)
    assert bubble.phase(0) == GROWING
    assert bubble.phase(599) == GROWING
    assert bubble.phase(600) == IDLE
    assert manager.expire(bubble.id, 1700) is True
    assert bubble.phase(1700) == SHRINKING
    assert bubble.shrink_start == 1700
    assert bubble.missed


def test_expire_happens_once():
    manager = BubbleManager(random.Random(1))
    bubble = manager.spawn(0, kind=NORMAL)
    assert manager.expire(bubble.id, 1700) is True
    assert manager.expire(bubble.id, 1800) is False
    assert bubble.shrink_start == 1700


def test_expired_powerups_are_not_misses():
    manager = BubbleManager(random.Random(1))
    for kind in (LIFE, SLOWTIME, DOUBLESCORE):
        bubble = manager.spawn(0, kind=kind)
        assert manager.expire(bubble.id, 1700) is False
        assert bubble.shrink_start == 1700
        assert not bubble.missed


def test_click_removes_bubble():
    manager = BubbleManager(random.Random(1))
    bubble = manager.spawn(0, kind=NORMAL)
    assert manager.click(bubble.id) is bubble
    assert manager.click(bubble.id) is None
    assert manager.expire(bubble.id, 1700) is False
    assert len(manager) == 0


def test_bubble_at_hits_inside_radius():
    manager = BubbleManager(random.Random(1))
    bubble = manager.spawn(0, kind=NORMAL, size=60)
    x, y = bubble.position
    assert manager.bubble_at((x + 29, y)) is bubble
    assert manager.bubble_at((x + 31, y)) is None


def test_unknown_kind():
    with pytest.raises(ValueError):
        BubbleManager().spawn(0, kind='bomb')


def test_snapshot_carries_scale():
    manager = BubbleManager(random.Random(1))
    bubble = manager.spawn(0, kind=NORMAL, size=42)
    snapshot = manager.snapshots(300)[0]
    assert snapshot['id'] == bubble.id
    assert snapshot['value'] == 100
    assert snapshot['scale'] == pytest.approx(0.575)
    assert snapshot['phase'] == GROWING
