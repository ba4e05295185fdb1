import pytest
from unittest.mock import MagicMock
from dockdesk.actions import MutationController
from dockdesk.backend import DaemonClient, MutationError
from dockdesk.model import ContainerRecord, RuntimeState
from dockdesk.refresh import RefreshOrchestrator, SERVICE_UNAVAILABLE
from dockdesk.state import ResourceStore
from dockdesk.tasks import TaskRunner


def container(id, state):
    return ContainerRecord(id=id, name="web", image="nginx", status_text="Up",
                           port_mappings="80:80", runtime_state=state)

@pytest.fixture
def client():
    c = MagicMock(spec=DaemonClient)
    c.list_containers.return_value = []
    return c

@pytest.fixture
def store():
    return ResourceStore()

@pytest.fixture
def runner():
    return TaskRunner()

@pytest.fixture
def controller(store, client, runner):
    refresher = RefreshOrchestrator(store, client, runner)
    return MutationController(store, client, runner, refresher)

def test_start_success_records_action_and_refreshes(controller, store, client, runner):
    store.set_error("Failed to list images: boom")
    client.list_containers.return_value = [container("abc123", RuntimeState.RUNNING)]

    runner.run_to_completion(lambda: controller.set_container_state("abc123", RuntimeState.RUNNING))

    client.start_container.assert_called_once_with("abc123")
    client.stop_container.assert_not_called()
    assert store.last_action == "Started container abc123"
    assert store.error_message is None
    client.list_containers.assert_called_once()
    assert store.containers == [container("abc123", RuntimeState.RUNNING)]

def test_stop_success(controller, store, client, runner):
    runner.run_to_completion(lambda: controller.set_container_state("abc123", RuntimeState.STOPPED))

    client.stop_container.assert_called_once_with("abc123")
    assert store.last_action == "Stopped container abc123"
    client.list_containers.assert_called_once()

def test_refresh_happens_after_mutation(controller, store, client, runner):
    order = []
    client.start_container.side_effect = lambda cid: order.append("start")
    client.list_containers.side_effect = lambda: order.append("list") or []

    runner.run_to_completion(lambda: controller.start_container("abc123"))

    assert order == ["start", "list"]

def test_start_failure_keeps_last_action(controller, store, client, runner):
    store.record_action("Stopped container other")
    store.set_containers([container("abc123", RuntimeState.STOPPED)])
    client.start_container.side_effect = MutationError("start container", "No such container: abc123")

    runner.run_to_completion(lambda: controller.set_container_state("abc123", RuntimeState.RUNNING))

    assert store.last_action == "Stopped container other"
    assert store.error_message == "Failed to start container: No such container: abc123"
    client.list_containers.assert_not_called()
    assert store.containers == [container("abc123", RuntimeState.STOPPED)]

def test_stop_failure_message(controller, store, client, runner):
    client.stop_container.side_effect = MutationError("stop container", "permission denied")

    runner.run_to_completion(lambda: controller.stop_container("abc123"))

    assert store.error_message == "Failed to stop container: permission denied"
    assert store.last_action is None

def test_start_already_running_passes_through(controller, store, client, runner):
    store.set_containers([container("abc123", RuntimeState.RUNNING)])

    runner.run_to_completion(lambda: controller.start_container("abc123"))

    client.start_container.assert_called_once_with("abc123")

def test_toggle_targets_opposite_state(controller, client, runner):
    runner.run_to_completion(lambda: controller.toggle_container(container("abc123", RuntimeState.RUNNING)))
    client.stop_container.assert_called_once_with("abc123")

    runner.run_to_completion(lambda: controller.toggle_container(container("def456", RuntimeState.STOPPED)))
    client.start_container.assert_called_once_with("def456")

def test_record_action(controller, store):
    controller.record_action("Opened settings")
    assert store.last_action == "Opened settings"

@pytest.mark.parametrize("target", [RuntimeState.RUNNING, RuntimeState.STOPPED])
def test_no_daemon_reports_service_not_available(store, runner, target):
    refresher = RefreshOrchestrator(store, None, runner)
    controller = MutationController(store, None, runner, refresher)
    store.record_action("Started container abc123")

    assert controller.set_container_state("abc123", target) is None

    assert store.error_message == SERVICE_UNAVAILABLE
    assert store.last_action == "Started container abc123"
    assert runner.pending == 0
