from timeline import Timeline


def test_events_come_out_in_due_order():
    timeline = Timeline()
    timeline.schedule(300, 'c')
    timeline.schedule(100, 'a')
    timeline.schedule(100, 'b')
    assert [action for _, action, _ in timeline.pop_due(250)] == ['a', 'b']
    assert timeline.next_due() == 300
    assert len(timeline) == 1


def test_events_scheduled_while_draining():
    timeline = Timeline()
    timeline.schedule(100, 'tick')
    seen = []
    for due, action, _ in timeline.pop_due(350):
        seen.append(due)
        timeline.schedule(due + 100, 'tick')
    assert seen == [100, 200, 300]
    assert timeline.next_due() == 400


def test_cancel_key_drops_all_events_of_entity():
    timeline = Timeline()
    timeline.schedule(100, 'expire', 1)
    timeline.schedule(400, 'remove', 1)
    timeline.schedule(200, 'expire', 2)
    timeline.cancel_key(1)
    assert len(timeline) == 1
    assert list(timeline.pop_due(1000)) == [(200, 'expire', 2)]
    assert timeline.next_due() is None


def test_cancel_handle():
    timeline = Timeline()
    handle = timeline.schedule(100, 'a')
    timeline.schedule(100, 'b')
    timeline.cancel(handle)
    assert [action for _, action, _ in timeline.pop_due(100)] == ['b']


def test_clear():
    timeline = Timeline()
    timeline.schedule(100, 'a', 'k')
    timeline.clear()
    assert len(timeline) == 0
    assert list(timeline.pop_due(1000)) == []
