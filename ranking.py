import bisect
import itertools


def _entry_fields(entry):
    if isinstance(entry, dict):
        return entry['name'], entry['score'], entry.get('createdAt')
    name, score = entry[0], entry[1]
    created_at = entry[2] if len(entry) > 2 else None
    return name, score, created_at


def _place(keys, entries, seq, name, score, created_at=None):
    key = (-score, seq)
    index = bisect.bisect_right(keys, key)
    entry = {'name': name, 'score': score}
    if created_at is not None:
        entry['createdAt'] = created_at
    keys.insert(index, key)
    entries.insert(index, entry)
    return index


class RankingStore:
    '''
    name/score pairs ordered by score, highest first

    equal scores keep the order they were submitted in, first submitted first
    '''

    def __init__(self, entries=None):
        self._seq = itertools.count()
        self._keys = []
        self._entries = []
        if entries:
            self.bulk_load(entries)

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self.to_ordered_list())

    def insert(self, name, score, created_at=None):
        return _place(self._keys, self._entries, next(self._seq), name, score, created_at)

    def bulk_load(self, entries):
        '''
        replace the whole store with the given entries

        entries are dicts with name, score and an optional createdAt, or
        (name, score[, createdAt]) tuples. the new contents are built aside
        and swapped in at the end, so a reader on another thread sees either
        the old list or the new one, never half of it.
        '''
        seq = itertools.count()
        keys = []
        ordered = []
        for entry in entries:
            _place(keys, ordered, next(seq), *_entry_fields(entry))
        self._seq = seq
        self._keys, self._entries = keys, ordered

    def to_ordered_list(self):
        return [dict(entry) for entry in self._entries]

    def top(self, limit):
        return [dict(entry) for entry in self._entries[:max(0, limit)]]

    def rank_of(self, score):
        # 1-based place a new score would take
        return bisect.bisect_right(self._keys, (-score, float('inf'))) + 1
