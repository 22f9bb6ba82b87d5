from conn_reaper.models import ObservedConn

def obs(inode, remote="10.0.0.2:1"):
    return ObservedConn(inode=inode, local="10.0.0.1:50090", remote=remote)

def test_upsert_creates_then_refreshes(table):
    assert table.upsert_seen(obs("1"), 100.0) is True
    assert table.upsert_seen(obs("1"), 200.0) is False
    e = table.get("1")
    assert (e.first_seen, e.last_seen, e.active) == (100.0, 200.0, True)
    assert len(table) == 1

def test_mark_all_inactive(table):
    table.upsert_seen(obs("1"), 0.0)
    table.upsert_seen(obs("2"), 0.0)
    table.mark_all_inactive()
    assert not any(e.active for e in table)

def test_refresh_reactivates(table):
    table.upsert_seen(obs("1"), 0.0)
    table.mark_all_inactive()
    table.upsert_seen(obs("1"), 10.0)
    assert table.get("1").active

def test_evict_is_unconditional_and_idempotent(table):
    table.upsert_seen(obs("1"), 0.0)
    assert table.evict("1").inode == "1"
    assert table.evict("1") is None
    assert "1" not in table

def test_iterate_snapshot_tolerates_eviction(table):
    for i in range(5):
        table.upsert_seen(obs(str(i)), 0.0)
    for e in table.iterate_snapshot():
        table.evict(e.inode)
    assert len(table) == 0

def test_backwards_clock_step_keeps_times_ordered(table):
    table.upsert_seen(obs("1"), 500.0)
    table.upsert_seen(obs("1"), 400.0)
    e = table.get("1")
    assert e.first_seen <= e.last_seen
    assert e.last_seen == 500.0
    assert e.active
