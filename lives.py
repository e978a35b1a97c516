import logging

from config import STARTING_LIVES, MAX_LIVES


class LifePool:
    '''
    bounded count of remaining misses before the game is over
    '''

    def __init__(self, lives=STARTING_LIVES, max_lives=MAX_LIVES, on_empty=None):
        self.max_lives = max_lives
        self.on_empty = on_empty
        self.reset(lives)

    def __len__(self):
        return self.lives

    def reset(self, lives=STARTING_LIVES):
        self.lives = max(0, min(self.max_lives, lives))
        self.depleted = self.lives == 0

    def gain(self):
        if self.lives >= self.max_lives:
            return False
        self.lives += 1
        return True

    def lose(self):
        if self.lives <= 0:
            return False
        self.lives -= 1
        logging.debug(f'life lost, {self.lives} left')
        if self.lives == 0 and not self.depleted:
            # only the call that empties the pool ends the game
            self.depleted = True
            if self.on_empty:
                self.on_empty()
        return True
