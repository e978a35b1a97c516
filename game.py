import logging
import random
from collections import deque

from config import (
    STARTING_LIVES, SPAWN_INTERVAL_MS, SLOWTIME_SPAWN_FACTOR,
    SHRINK_MS, POWERUP_POLL_MS, POWERUP_QUEUE_CAPACITY)
from bubbles import BubbleManager, NORMAL, LIFE
from lives import LifePool
from powerups import PowerupScheduler, SLOWTIME, DOUBLESCORE
from scoring import ScoreAccumulator
from timeline import Timeline

IDLE = 'idle'
RUNNING = 'running'
OVER = 'over'

SPAWN_KEY = 'spawn'
POWERUP_KEY = 'powerup'


class GameSession:
    '''
    one game of bubble pop

    owns the bubbles, lives, powerups and score, and every timer of the game.
    the caller drives it with update(now) from its render loop and forwards
    clicks; nothing here runs on its own thread.
    '''

    def __str__(self):
        return f'GameSession {self.state} score={self.score} lives={self.lives}'

    def __init__(self, rng=None, queue_capacity=POWERUP_QUEUE_CAPACITY):
        self.rng = rng or random.Random()
        self.bubble_manager = BubbleManager(self.rng)
        self.life_pool = LifePool(STARTING_LIVES, on_empty=self._game_over)
        self.powerups = PowerupScheduler(queue_capacity)
        self.scorer = ScoreAccumulator(self.powerups)
        self.timeline = Timeline()
        self.notices = deque(maxlen=5)
        self.state = IDLE
        self.handlers = {
            'spawn': self._on_spawn,
            'expire': self._on_expire,
            'remove': self._on_remove,
            'powerup': self._on_powerup_poll,
        }

    @property
    def running(self):
        return self.state == RUNNING

    @property
    def over(self):
        return self.state == OVER

    @property
    def score(self):
        return self.scorer.score

    @property
    def lives(self):
        return self.life_pool.lives

    @property
    def multiplier(self):
        return self.powerups.multiplier

    @property
    def active_powerup(self):
        return self.powerups.active

    def pending_powerups(self):
        return self.powerups.pending()

    def spawn_interval(self):
        if self.powerups.is_active(SLOWTIME):
            return SPAWN_INTERVAL_MS * SLOWTIME_SPAWN_FACTOR
        return SPAWN_INTERVAL_MS

    def _clear(self):
        # dropping the timeline drops every timer of the previous game with it
        self.timeline.clear()
        self.bubble_manager.clear()
        self.life_pool.reset(STARTING_LIVES)
        self.powerups.reset()
        self.scorer.reset()
        self.notices.clear()

    def start(self, now):
        self._clear()
        self.state = RUNNING
        self.timeline.schedule(now + self.spawn_interval(), 'spawn', SPAWN_KEY)
        self.timeline.schedule(now + POWERUP_POLL_MS, 'powerup', POWERUP_KEY)
        logging.info(f'game started at {now}')

    def reset(self):
        self._clear()
        self.state = IDLE

    def _game_over(self):
        self.state = OVER
        # bubbles already on screen still shrink away, nothing new comes
        self.timeline.cancel_key(SPAWN_KEY)
        self.timeline.cancel_key(POWERUP_KEY)
        logging.info(f'game over, final score {self.score}')

    def notify(self, message):
        self.notices.append(message)

    def update(self, now):
        '''
        run every timer due at or before now, each at its own due time
        '''
        for due, action, key in self.timeline.pop_due(now):
            self.handlers[action](due, key)

    def spawn_bubble(self, now, kind=None, size=None):
        slowed = self.powerups.is_active(SLOWTIME)
        bubble = self.bubble_manager.spawn(now, slowed, kind=kind, size=size)
        self.timeline.schedule(bubble.expires_at, 'expire', bubble.id)
        logging.debug(f'bubble {bubble.id} spawned: {bubble.kind} size={bubble.size}')
        return bubble

    def _on_spawn(self, now, key):
        if not self.running:
            return
        self.spawn_bubble(now)
        # cadence is read here, so a slowtime change applies from the next tick
        self.timeline.schedule(now + self.spawn_interval(), 'spawn', SPAWN_KEY)

    def _on_expire(self, now, bubble_id):
        bubble = self.bubble_manager.get(bubble_id)
        if bubble is None:
            return
        if self.bubble_manager.expire(bubble_id, now):
            logging.debug(f'bubble {bubble_id} missed')
            self.life_pool.lose()
        self.timeline.schedule(now + SHRINK_MS, 'remove', bubble_id)

    def _on_remove(self, now, bubble_id):
        self.bubble_manager.remove(bubble_id)

    def _on_powerup_poll(self, now, key):
        if not self.running:
            return
        expired = self.powerups.tick(now)
        if expired is not None and self.powerups.active is not None:
            self.notify(f'{self.powerups.active.kind} activated')
        self.timeline.schedule(now + POWERUP_POLL_MS, 'powerup', POWERUP_KEY)

    def click_bubble(self, bubble_id, now):
        '''
        resolve a click on a bubble

        clicks on bubbles that are already gone, or while the game is not
        running, are ignored. timers due by now run first, so a late click
        sees the bubble as it is at that time. returns the clicked bubble or None.
        '''
        self.update(now)
        if not self.running:
            return None
        bubble = self.bubble_manager.click(bubble_id)
        if bubble is None:
            return None
        self.timeline.cancel_key(bubble_id)
        if bubble.kind == NORMAL:
            self.scorer.award(bubble.value)
        elif bubble.kind == LIFE:
            # life captures are flat, the multiplier never applies
            self.life_pool.gain()
        elif bubble.kind in (SLOWTIME, DOUBLESCORE):
            result = self.powerups.capture(bubble.kind, now)
            if result == 'active':
                self.notify(f'{bubble.kind} activated')
            elif result == 'dropped':
                self.notify('powerup queue full')
        return bubble

    def click_at(self, position, now):
        self.update(now)
        if not self.running:
            return None
        bubble = self.bubble_manager.bubble_at(position)
        if bubble is None:
            return None
        return self.click_bubble(bubble.id, now)

    def bubbles(self, now=None):
        return self.bubble_manager.snapshots(now)

    def scale_of(self, bubble_id, now):
        bubble = self.bubble_manager.get(bubble_id)
        if bubble is None:
            return 0.0
        return bubble.scale(now)
