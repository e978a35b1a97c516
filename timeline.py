import heapq
import itertools


class Timeline:
    '''
    pending timer events of a game, drained synchronously by the owner

    events are (due, seq, action, key) and come out in due order, ties in
    scheduling order. cancelling by key drops every event of an entity.
    '''

    def __init__(self):
        self._heap = []
        self._seq = itertools.count()
        self._cancelled = set()
        self._by_key = {}

    def __len__(self):
        return len(self._heap) - len(self._cancelled)

    def schedule(self, due, action, key=None):
        handle = next(self._seq)
        heapq.heappush(self._heap, (due, handle, action, key))
        if key is not None:
            self._by_key.setdefault(key, set()).add(handle)
        return handle

    def cancel(self, handle):
        if any(handle == event[1] for event in self._heap):
            self._cancelled.add(handle)

    def cancel_key(self, key):
        for handle in self._by_key.pop(key, ()):
            self._cancelled.add(handle)

    def _forget(self, handle, key):
        self._cancelled.discard(handle)
        if key is None:
            return
        handles = self._by_key.get(key)
        if handles is not None:
            handles.discard(handle)
            if not handles:
                del self._by_key[key]

    def _discard_cancelled(self):
        while self._heap and self._heap[0][1] in self._cancelled:
            _, handle, _, key = heapq.heappop(self._heap)
            self._forget(handle, key)

    def next_due(self):
        self._discard_cancelled()
        return self._heap[0][0] if self._heap else None

    def pop_due(self, now):
        '''
        yield (due, action, key) for every event due at or before now

        events scheduled while draining are picked up in the same pass
        '''
        while True:
            self._discard_cancelled()
            if not self._heap or self._heap[0][0] > now:
                return
            due, handle, action, key = heapq.heappop(self._heap)
            self._forget(handle, key)
            yield due, action, key

    def clear(self):
        self._heap.clear()
        self._cancelled.clear()
        self._by_key.clear()
