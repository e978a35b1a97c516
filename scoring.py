class ScoreAccumulator:
    '''
    running score, every award goes through the multiplier owned by the powerups
    '''

    def __init__(self, multiplier_source):
        self.multiplier_source = multiplier_source
        self.score = 0

    @property
    def multiplier(self):
        return self.multiplier_source.multiplier

    def award(self, points):
        gained = points * self.multiplier
        self.score += gained
        return gained

    def reset(self):
        self.score = 0
