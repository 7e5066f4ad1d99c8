"""
Unit tests for the in-process data update hub.
"""

import threading

from docuscan.hub import DOCUMENT_CREATED, DataUpdateHub


def test_send_all_reaches_every_listener():
    hub = DataUpdateHub()
    received = []
    hub.connect(lambda event, payload: received.append(("a", event, payload)))
    hub.connect(lambda event, payload: received.append(("b", event, payload)))

    assert hub.send_all(DOCUMENT_CREATED, {"id": 1}) == 2
    assert sorted(received) == [("a", "DocumentCreated", {"id": 1}), ("b", "DocumentCreated", {"id": 1})]


def test_disconnect_stops_delivery():
    hub = DataUpdateHub()
    received = []
    conn = hub.connect(lambda event, payload: received.append(event))
    hub.disconnect(conn)
    hub.disconnect(conn)
    assert hub.connection_count == 0
    assert hub.send_all("DocumentDeleted", 3) == 0
    assert received == []


def test_failing_listener_does_not_block_others(capsys):
    hub = DataUpdateHub()
    received = []

    def broken(event, payload):
        raise RuntimeError("socket closed")

    hub.connect(broken)
    hub.connect(lambda event, payload: received.append(payload))

    assert hub.send_all("DocumentUpdated", 7) == 1
    assert received == [7]
    assert "socket closed" in capsys.readouterr().err


def test_concurrent_connects():
    hub = DataUpdateHub()
    threads = [threading.Thread(target=hub.connect, args=(lambda e, p: None,)) for _ in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert hub.connection_count == 20
