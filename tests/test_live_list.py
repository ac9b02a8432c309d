from dashboard.entities import BLOGS, EVENTS, TEAM
from dashboard.realtime import normalize_change
from dashboard.repository import Repository
from dashboard.services.live_list import LiveList, apply_change


def live_list(fake, entity=EVENTS):
    return LiveList(Repository(fake, entity.table, order=entity.order), fake, entity)


def test_mount_fetches_and_subscribes(fake_supabase):
    fake_supabase.seed('events', {'name': 'A'}, {'name': 'B'})

    live = live_list(fake_supabase).mount()

    assert [r['name'] for r in live.records] == ['A', 'B']
    channel, = fake_supabase.channels
    assert channel.name.startswith('public:events:')
    assert channel.subscribed
    assert channel.bindings[0][0] == '*'
    assert channel.bindings[0][2:] == ('events', 'public')


def test_mount_uses_entity_ordering(fake_supabase):
    fake_supabase.seed('team_members', {'name': 'Late', 'order_index': 5}, {'name': 'Early', 'order_index': 1})

    live = live_list(fake_supabase, TEAM).mount()

    assert [r['name'] for r in live.records] == ['Early', 'Late']


def test_fetch_failure_leaves_empty_list(fake_supabase):
    fake_supabase.fail('events', 'select')

    live = live_list(fake_supabase).mount()

    assert live.records == []
    assert live.channel is not None


def test_insert_update_delete_patch_local_records(fake_supabase):
    a, b = fake_supabase.seed('events', {'name': 'A'}, {'name': 'B'})
    live = live_list(fake_supabase).mount()
    selects = len(fake_supabase.calls_for('events', 'select'))

    fake_supabase.push('events', 'INSERT', new={'id': 10, 'name': 'C'})
    fake_supabase.push('events', 'UPDATE', new={'id': a['id'], 'name': 'A2'})
    fake_supabase.push('events', 'DELETE', old={'id': b['id']})

    assert [r['name'] for r in live.records] == ['A2', 'C']
    # patched in place, never re-fetched
    assert len(fake_supabase.calls_for('events', 'select')) == selects


def test_same_update_twice_equals_once(fake_supabase):
    row, = fake_supabase.seed('news', {'name': 'Old'})
    records = [dict(row)]
    new = {'id': row['id'], 'name': 'New'}

    once = apply_change(records, 'UPDATE', new, {})
    twice = apply_change(once, 'UPDATE', new, {})

    assert once == twice == [new]


def test_same_insert_twice_is_idempotent():
    new = {'id': 3, 'name': 'C'}
    once = apply_change([], 'INSERT', new, {})
    assert apply_change(once, 'INSERT', new, {}) == once


def test_delete_of_unknown_row_is_a_no_op():
    records = [{'id': 1}]
    assert apply_change(records, 'DELETE', {}, {'id': 2}) == records


def test_nested_payload_shape_is_accepted():
    payload = {'data': {'type': 'UPDATE', 'record': {'id': 1, 'name': 'x'}, 'old_record': {'id': 1}}}
    assert normalize_change(payload) == ('UPDATE', {'id': 1, 'name': 'x'}, {'id': 1})


def test_unknown_event_types_are_ignored(fake_supabase):
    live = live_list(fake_supabase).mount()
    seen = []
    live.subscribe(lambda event_type, records: seen.append(event_type))

    live.apply({'eventType': 'TRUNCATE', 'new': {}, 'old': {}})

    assert seen == []
    assert live.records == []


def test_listeners_receive_patched_records(fake_supabase):
    live = live_list(fake_supabase).mount()
    seen = []
    live.subscribe(lambda event_type, records: seen.append((event_type, records)))

    fake_supabase.push('events', 'INSERT', new={'id': 7, 'name': 'Pushed'})

    assert seen == [('INSERT', [{'id': 7, 'name': 'Pushed'}])]


def test_unmount_removes_channel_once(fake_supabase):
    live = live_list(fake_supabase).mount()
    channel = live.channel

    live.unmount()
    live.unmount()

    assert fake_supabase.removed_channels == [channel]
    fake_supabase.push('events', 'INSERT', new={'id': 1, 'name': 'late'})
    assert live.records == []


def test_two_viewers_of_one_table_both_receive_changes(fake_supabase):
    first = live_list(fake_supabase).mount()
    second = live_list(fake_supabase).mount()

    assert first.channel.name != second.channel.name

    fake_supabase.push('events', 'INSERT', new={'id': 1, 'name': 'A'})
    assert first.records == second.records == [{'id': 1, 'name': 'A'}]

    second.unmount()
    fake_supabase.push('events', 'INSERT', new={'id': 2, 'name': 'B'})

    assert [r['name'] for r in first.records] == ['A', 'B']
    assert [r['name'] for r in second.records] == ['A']


def test_remove_local_notifies_listeners(fake_supabase):
    a, _ = fake_supabase.seed('blogs', {'title': 'x'}, {'title': 'y'})
    live = live_list(fake_supabase, BLOGS).mount()
    seen = []
    live.subscribe(lambda event_type, records: seen.append((event_type, [r['title'] for r in records])))

    live.remove_local(str(a['id']))
    live.remove_local(str(a['id']))

    assert [r['title'] for r in live.records] == ['y']
    assert seen == [('DELETE', ['y'])]
    # the later realtime DELETE for the same row changes nothing
    fake_supabase.push('blogs', 'DELETE', old={'id': a['id']})
    assert [r['title'] for r in live.records] == ['y']
