import pytest
from dockdesk.state import ResourceStore
from dockdesk.model import ContainerRecord, ImageRecord, RuntimeState


def container(id, name="web", state=RuntimeState.RUNNING):
    return ContainerRecord(id=id, name=name, image="nginx:latest", status_text="Up",
                           port_mappings="--", runtime_state=state)

def test_initial_state():
    store = ResourceStore(daemon_host="unix:///var/run/docker.sock")
    snap = store.get_snapshot()

    assert snap.daemon_host == "unix:///var/run/docker.sock"
    assert snap.containers == []
    assert snap.images == []
    assert snap.volumes == []
    assert snap.last_action is None
    assert snap.error_message is None
    assert snap.is_loading is False

def test_state_versioning():
    store = ResourceStore()
    initial_version = store.get_version()

    store.set_containers([])
    assert store.get_version() == initial_version + 1

    store.set_error("boom")
    assert store.get_version() == initial_version + 2

    store.clear_error()
    assert store.get_version() == initial_version + 3

def test_lists_keep_daemon_order():
    store = ResourceStore()
    records = [container("b", "zeta"), container("a", "alpha")]
    store.set_containers(records)

    assert [c.name for c in store.containers] == ["zeta", "alpha"]

def test_snapshot_is_a_copy():
    store = ResourceStore()
    store.set_containers([container("c1")])

    snap = store.get_snapshot()
    snap.containers.append(container("c2"))

    assert len(store.containers) == 1

def test_subscribers_notified_per_field():
    store = ResourceStore()
    seen = []
    store.subscribe(lambda field, value: seen.append((field, value)))

    store.set_loading(True)
    store.record_action("Started container c1")
    store.set_loading(False)

    assert seen == [
        ("is_loading", True),
        ("last_action", "Started container c1"),
        ("is_loading", False),
    ]

def test_subscribe_to_selected_fields():
    store = ResourceStore()
    errors = []
    store.subscribe(lambda field, value: errors.append(value), fields=["error_message"])

    store.set_images([ImageRecord(id="i1", repository="nginx", tag="latest", size_label="1.0MB")])
    store.set_error("Failed to list volumes: boom")
    store.clear_error()

    assert errors == ["Failed to list volumes: boom", None]

def test_subscribe_rejects_unknown_field():
    store = ResourceStore()
    with pytest.raises(ValueError):
        store.subscribe(lambda field, value: None, fields=["networks"])

def test_unsubscribe():
    store = ResourceStore()
    seen = []
    unsubscribe = store.subscribe(lambda field, value: seen.append(field))

    store.set_loading(True)
    unsubscribe()
    store.set_loading(False)

    assert seen == ["is_loading"]

def test_failing_subscriber_does_not_block_others():
    store = ResourceStore()
    seen = []

    def broken(field, value):
        raise RuntimeError("render failed")

    store.subscribe(broken)
    store.subscribe(lambda field, value: seen.append(field))

    store.set_error("boom")

    assert seen == ["error_message"]
    assert store.error_message == "boom"

def test_record_action_overwrites():
    store = ResourceStore()
    store.record_action("Started container a")
    store.record_action("Stopped container b")
    assert store.last_action == "Stopped container b"
