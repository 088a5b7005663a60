import threading
from datetime import datetime

from tunnelclient.diagnostic_history import (
    DiagnosticHistory,
    add_diagnostic_info,
    add_diagnostic_info_json,
    get_diagnostic_history,
)


def test_add_records_message_and_data():
    history = DiagnosticHistory()
    history.add("ServerEntry", {"region": "CA", "count": 3})
    entries = history.snapshot()
    assert len(entries) == 1
    assert entries[0]["msg"] == "ServerEntry"
    assert entries[0]["data"] == {"region": "CA", "count": 3}


def test_entry_has_parseable_utc_timestamp():
    history = DiagnosticHistory()
    entry = history.add("m", 1)
    stamp = entry["timestamp!!timestamp"]
    assert stamp.endswith("Z")
    parsed = datetime.strptime(stamp, "%Y-%m-%dT%H:%M:%S.%fZ")
    assert parsed.year >= 2000


def test_entries_keep_insertion_order():
    history = DiagnosticHistory()
    for index in range(4):
        history.add(f"msg{index}", index)
    assert [e["msg"] for e in history.snapshot()] == ["msg0", "msg1", "msg2", "msg3"]
    assert [e["data"] for e in history.snapshot()] == [0, 1, 2, 3]


def test_add_json_parses_string():
    history = DiagnosticHistory()
    entry = history.add_json("Status", '{"a": [1, 2], "b": null}')
    assert entry["data"] == {"a": [1, 2], "b": None}
    assert history.snapshot()[0]["data"] == {"a": [1, 2], "b": None}


def test_add_json_invalid_is_ignored():
    history = DiagnosticHistory()
    assert history.add_json("Broken", "{not json") is None
    assert history.snapshot() == []


def test_add_json_none_records_null():
    history = DiagnosticHistory()
    history.add_json("Empty", None)
    entries = history.snapshot()
    assert len(entries) == 1
    assert entries[0]["msg"] == "Empty"
    assert entries[0]["data"] is None


def test_snapshot_is_independent_copy():
    history = DiagnosticHistory()
    data = {"list": [1]}
    history.add("m", data)
    data["list"].append(2)
    first = history.snapshot()
    first[0]["data"]["list"].append(99)
    first.append({"msg": "extra"})
    second = history.snapshot()
    assert len(second) == 1
    assert second[0]["data"] == {"list": [1]}


def test_concurrent_adds_are_all_recorded():
    history = DiagnosticHistory()

    def worker(tag):
        for index in range(50):
            history.add(tag, index)

    threads = [threading.Thread(target=worker, args=(f"t{n}",)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    entries = history.snapshot()
    assert len(entries) == 200
    for tag in ("t0", "t1", "t2", "t3"):
        assert [e["data"] for e in entries if e["msg"] == tag] == list(range(50))


def test_module_level_history():
    before = len(get_diagnostic_history())
    add_diagnostic_info("ModuleLevel", {"x": 1})
    add_diagnostic_info_json("ModuleLevelJson", "[true, false]")
    add_diagnostic_info_json("ModuleLevelBad", "][")
    after = get_diagnostic_history()
    assert len(after) == before + 2
    assert after[-2]["msg"] == "ModuleLevel"
    assert after[-2]["data"] == {"x": 1}
    assert after[-1]["msg"] == "ModuleLevelJson"
    assert after[-1]["data"] == [True, False]