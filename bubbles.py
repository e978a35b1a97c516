import random

from config import (
    POOL_WIDTH, POOL_HEIGHT, HUD_HEIGHT,
    BUBBLE_MIN_SIZE, BUBBLE_MAX_SIZE,
    SCORE_BANDS, SCORE_FLOOR,
    SLOWTIME_CHANCE, DOUBLESCORE_CHANCE, LIFE_CHANCE,
    GROWTH_MS, GROWTH_START_SCALE, SHRINK_MS,
    BUBBLE_LIFETIME_MS, SLOWTIME_LIFETIME_FACTOR)
from powerups import SLOWTIME, DOUBLESCORE

NORMAL = 'normal'
LIFE = 'life'
KINDS = (NORMAL, LIFE, SLOWTIME, DOUBLESCORE)

GROWING = 'growing'
IDLE = 'idle'
SHRINKING = 'shrinking'

COLORS = (
    (239, 68, 68),
    (59, 130, 246),
    (34, 197, 94),
    (234, 179, 8),
    (168, 85, 247),
    (236, 72, 153),
    (99, 102, 241),
    (249, 115, 22),
)
KIND_COLORS = {
    LIFE: (236, 72, 153),
    SLOWTIME: (96, 165, 250),
    DOUBLESCORE: (250, 204, 21),
}


def points_for_size(size):
    for max_size, points in SCORE_BANDS:
        if size <= max_size:
            return points
    return SCORE_FLOOR


def pick_kind(roll):
    '''
    map a roll in [0, 1) onto the bubble type bands
    '''
    if roll < SLOWTIME_CHANCE:
        return SLOWTIME
    if roll < SLOWTIME_CHANCE + DOUBLESCORE_CHANCE:
        return DOUBLESCORE
    if roll < SLOWTIME_CHANCE + DOUBLESCORE_CHANCE + LIFE_CHANCE:
        return LIFE
    return NORMAL


def bubble_scale(created_at, shrink_start, now):
    '''
    visual scale of a bubble at time now

    grows from 0.15 to 1.0 over the growth window, holds at 1.0, and once
    shrinking goes down to 0 over the shrink window
    '''
    if shrink_start is not None:
        progress = min(max(now - shrink_start, 0) / SHRINK_MS, 1)
        return max(0.0, 1 - progress)
    progress = min(max(now - created_at, 0) / GROWTH_MS, 1)
    return GROWTH_START_SCALE + progress * (1 - GROWTH_START_SCALE)


class Bubble:

    def __str__(self):
        return str(self.snapshot())

    def __init__(self, id, position, size, color, kind, created_at, lifetime):
        self.id = id
        self.position = position
        self.size = size
        self.radius = size / 2
        self.color = color
        self.kind = kind
        self.value = points_for_size(size)
        self.created_at = created_at
        self.lifetime = lifetime
        self.shrink_start = None
        self.missed = False

    @property
    def expires_at(self):
        return self.created_at + self.lifetime

    def phase(self, now):
        if self.shrink_start is not None:
            return SHRINKING
        if now - self.created_at < GROWTH_MS:
            return GROWING
        return IDLE

    def start_shrink(self, now):
        if self.shrink_start is not None:
            return False
        self.shrink_start = now
        return True

    def scale(self, now):
        return bubble_scale(self.created_at, self.shrink_start, now)

    def contains(self, position):
        dx = position[0] - self.position[0]
        dy = position[1] - self.position[1]
        return dx ** 2 + dy ** 2 <= self.radius ** 2

    def snapshot(self, now=None):
        result = {
            'id': self.id,
            'position': self.position,
            'size': self.size,
            'radius': self.radius,
            'color': self.color,
            'kind': self.kind,
            'value': self.value,
            'created_at': self.created_at,
            'shrink_start': self.shrink_start,
            'missed': self.missed,
        }
        if now is not None:
            result['scale'] = self.scale(now)
            result['phase'] = self.phase(now)
        return result


class BubbleManager:
    '''
    bubble manager to create, expire, and consume bubbles
    '''

    def __init__(self, rng=None):
        self.rng = rng or random.Random()
        self._next_id = 0
        self.bubbles = {}

    def __len__(self):
        return len(self.bubbles)

    def __contains__(self, bubble_id):
        return bubble_id in self.bubbles

    def next_id(self):
        result = self._next_id
        self._next_id += 1
        return result

    def random_position(self, size):
        # keep the whole bubble inside the pool and below the HUD band
        radius = size / 2
        x = self.rng.uniform(radius, POOL_WIDTH - radius)
        y = self.rng.uniform(HUD_HEIGHT + radius, POOL_HEIGHT - radius)
        return x, y

    def spawn(self, now, slowed=False, kind=None, size=None):
        if kind is None:
            kind = pick_kind(self.rng.random())
        elif kind not in KINDS:
            raise ValueError(f'unknown bubble kind {kind!r}')
        if size is None:
            size = self.rng.randint(BUBBLE_MIN_SIZE, BUBBLE_MAX_SIZE)
        color = KIND_COLORS.get(kind) or self.rng.choice(COLORS)
        lifetime = BUBBLE_LIFETIME_MS * (SLOWTIME_LIFETIME_FACTOR if slowed else 1)
        bubble = Bubble(self.next_id(), self.random_position(size), size, color, kind, now, lifetime)
        self.bubbles[bubble.id] = bubble
        return bubble

    def get(self, bubble_id):
        return self.bubbles.get(bubble_id)

    def click(self, bubble_id):
        '''
        take a bubble out of play whatever phase it is in

        returns the bubble, or None when it is already gone
        '''
        return self.bubbles.pop(bubble_id, None)

    def expire(self, bubble_id, now):
        '''
        start shrinking a bubble whose lifetime is over

        returns True when the expiry is a miss, i.e. an unclicked normal bubble
        '''
        bubble = self.bubbles.get(bubble_id)
        if bubble is None or not bubble.start_shrink(now):
            return False
        if bubble.kind != NORMAL:
            return False
        bubble.missed = True
        return True

    def remove(self, bubble_id):
        return self.bubbles.pop(bubble_id, None)

    def bubble_at(self, position):
        # the most recent bubble is drawn on top, so it wins the hit test
        for bubble in reversed(list(self.bubbles.values())):
            if bubble.contains(position):
                return bubble
        return None

    def snapshots(self, now=None):
        return [b.snapshot(now) for b in self.bubbles.values()]

    def clear(self):
        self.bubbles.clear()
