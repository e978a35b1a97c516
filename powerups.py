import logging

from config import (
    SLOWTIME_DURATION_MS, DOUBLESCORE_DURATION_MS,
    DOUBLESCORE_MULTIPLIER, POWERUP_QUEUE_CAPACITY)

SLOWTIME = 'slowtime'
DOUBLESCORE = 'doublescore'

DURATIONS = {
    SLOWTIME: SLOWTIME_DURATION_MS,
    DOUBLESCORE: DOUBLESCORE_DURATION_MS,
}


class PowerupQueue:
    '''
    fixed capacity circular FIFO of captured powerups waiting for their turn
    '''

    def __init__(self, capacity=POWERUP_QUEUE_CAPACITY):
        if capacity < 1:
            raise ValueError(f'capacity must be positive, got {capacity}')
        self.capacity = capacity
        self._items = [None] * capacity
        self._front = 0
        self._count = 0

    def __len__(self):
        return self._count

    def is_empty(self):
        return self._count == 0

    def is_full(self):
        return self._count == self.capacity

    def enqueue(self, kind):
        if self.is_full():
            return False
        back = (self._front + self._count) % self.capacity
        self._items[back] = kind
        self._count += 1
        return True

    def dequeue(self):
        '''
        return the oldest pending powerup, or None when there is nothing queued
        '''
        if self.is_empty():
            return None
        kind = self._items[self._front]
        self._items[self._front] = None
        self._front = (self._front + 1) % self.capacity
        self._count -= 1
        return kind

    def pending(self):
        return [self._items[(self._front + i) % self.capacity] for i in range(self._count)]

    def clear(self):
        self._items = [None] * self.capacity
        self._front = 0
        self._count = 0


class ActivePowerup:

    def __str__(self):
        return f'{self.kind} until {self.expires_at}'

    def __init__(self, kind, started_at, duration):
        self.kind = kind
        self.started_at = started_at
        self.duration = duration
        self.expires_at = started_at + duration

    def is_expired(self, now):
        return now >= self.expires_at

    def remaining(self, now):
        return max(0, self.expires_at - now)

    def progress(self, now):
        # fraction of the effect still left, drives the HUD bar
        return self.remaining(now) / self.duration


class PowerupScheduler:
    '''
    one active timed effect plus a bounded queue of captures waiting behind it
    '''

    def __init__(self, queue_capacity=POWERUP_QUEUE_CAPACITY):
        self.queue = PowerupQueue(queue_capacity)
        self.active = None
        self.multiplier = 1

    def reset(self):
        self.queue.clear()
        self.active = None
        self.multiplier = 1

    def is_active(self, kind):
        return self.active is not None and self.active.kind == kind

    def pending(self):
        return self.queue.pending()

    def activate(self, kind, now):
        if kind not in DURATIONS:
            raise ValueError(f'unknown powerup {kind!r}')
        self.active = ActivePowerup(kind, now, DURATIONS[kind])
        if kind == DOUBLESCORE:
            self.multiplier = DOUBLESCORE_MULTIPLIER
        logging.info(f'powerup {self.active} activated')
        return self.active

    def capture(self, kind, now):
        '''
        activate a captured powerup right away, or queue it behind the active one

        returns 'active', 'queued' or 'dropped' (queue full)
        '''
        if kind not in DURATIONS:
            raise ValueError(f'unknown powerup {kind!r}')
        if self.active is None:
            self.activate(kind, now)
            return 'active'
        if self.queue.enqueue(kind):
            logging.debug(f'powerup {kind} queued, {len(self.queue)} pending')
            return 'queued'
        logging.warning(f'powerup queue full, {kind} dropped')
        return 'dropped'

    def tick(self, now):
        '''
        expire the active powerup once its time is up and start the next queued one

        returns the powerup that expired, if any
        '''
        expired = self.active
        if expired is None or not expired.is_expired(now):
            return None
        if expired.kind == DOUBLESCORE:
            self.multiplier = 1
        logging.info(f'powerup {expired.kind} expired')
        next_kind = self.queue.dequeue()
        if next_kind is None:
            self.active = None
        else:
            self.activate(next_kind, now)
        return expired
