from typing import get_args, get_type_hints

import pytest
from conftest import DummyTransport, ForbiddenTransport, fault, process_struct, reply

from supervisord_client import (
    AuthenticationError,
    AuthorizationError,
    FaultError,
    NotFoundError,
    ParseError,
    ProcessInfo,
    ProtocolError,
    ServerError,
    SupervisorClient,
    TransportError,
    ValidationError,
)
from supervisord_client.transport.http import HttpTransport
from supervisord_client.transport.unix import UnixTransport
from supervisord_client.types import STATE_CHANGES, StateChange


def make_client(transport, **kwargs) -> SupervisorClient:
    return SupervisorClient("http://localhost:9001", transport=transport, **kwargs)


def test_start_process_round_trip(sent_call) -> None:
    transport = DummyTransport(reply(True))
    client = make_client(transport)
    assert client.start_process("webapp") is True
    params, method = sent_call(transport.requests[0])
    assert method == "supervisor.startProcess"
    assert params == ("webapp",)
    assert transport.responses[0].closed


def test_get_version_sends_empty_params(sent_call) -> None:
    transport = DummyTransport(reply("4.2.5"))
    client = make_client(transport)
    assert client.get_version() == "4.2.5"
    params, method = sent_call(transport.requests[0])
    assert (params, method) == ((), "supervisor.getVersion")
    assert b"<params>" in transport.requests[0].content
    assert transport.requests[0].headers["Content-Type"] == "text/xml"
    assert transport.requests[0].url == "http://localhost:9001/RPC2"


def test_get_all_process_info_decodes_structs() -> None:
    transport = DummyTransport(reply([process_struct("webapp"), process_struct("worker", pid=7)]))
    client = make_client(transport)
    infos = client.get_all_process_info()
    assert [info.name for info in infos] == ["webapp", "worker"]
    assert infos[1].pid == 7
    assert isinstance(infos[0], ProcessInfo)
    assert infos[0].statename == "RUNNING"


def test_process_info_ignores_unknown_members() -> None:
    transport = DummyTransport(reply([process_struct("webapp", extra="ignored")]))
    client = make_client(transport)
    assert client.get_all_process_info()[0].name == "webapp"


def test_process_info_without_name_is_a_parse_error() -> None:
    struct = process_struct("webapp")
    del struct["name"]
    transport = DummyTransport(reply([struct]))
    client = make_client(transport)
    with pytest.raises(ParseError):
        client.get_all_process_info()


@pytest.mark.parametrize("change", ["restart", "START", "", "stopp"])
def test_invalid_state_change_is_rejected_without_io(change: str) -> None:
    client = make_client(ForbiddenTransport())
    with pytest.raises(ValidationError):
        client.change_process_state(change, "webapp")
    with pytest.raises(ValidationError):
        client.change_all_process_state(change)


def test_empty_process_name_is_rejected_without_io() -> None:
    client = make_client(ForbiddenTransport())
    with pytest.raises(ValidationError):
        client.stop_process("")
    with pytest.raises(ValidationError):
        client.signal_process("HUP", "")
    with pytest.raises(ValidationError):
        client.signal_all_processes("")


def test_change_all_process_state_waits(sent_call) -> None:
    transport = DummyTransport(reply([process_struct("webapp")]))
    client = make_client(transport)
    infos = client.stop_all_processes()
    assert infos[0].name == "webapp"
    params, method = sent_call(transport.requests[0])
    assert method == "supervisor.stopAllProcesses"
    assert params == (True,)


def test_signal_process_sends_name_then_signal(sent_call) -> None:
    transport = DummyTransport(reply(True))
    client = make_client(transport)
    assert client.signal_process("HUP", "webapp") is True
    params, method = sent_call(transport.requests[0])
    assert method == "supervisor.signalProcess"
    assert params == ("webapp", "HUP")


def test_signal_all_processes(sent_call) -> None:
    transport = DummyTransport(reply([process_struct("webapp")]))
    client = make_client(transport)
    client.signal_all_processes("USR1")
    params, method = sent_call(transport.requests[0])
    assert (params, method) == (("USR1",), "supervisor.signalAllProcesses")


def test_shutdown_returns_boolean() -> None:
    transport = DummyTransport(reply(True))
    client = make_client(transport)
    assert client.shutdown() is True


def test_reload_config_groups_by_position(sent_call) -> None:
    transport = DummyTransport(reply([["a", "b"], [], ["c"]]))
    client = make_client(transport)
    result = client.reload_config()
    assert result.added == ["a", "b"]
    assert result.changed == []
    assert result.removed == ["c"]
    assert sent_call(transport.requests[0]) == ((), "supervisor.reloadConfig")
    assert transport.responses[0].closed


def test_reload_config_fault_is_raised() -> None:
    transport = DummyTransport(fault(6, "SHUTDOWN_STATE"))
    client = make_client(transport)
    with pytest.raises(FaultError) as excinfo:
        client.reload_config()
    assert excinfo.value.code == 6
    assert excinfo.value.string == "SHUTDOWN_STATE"
    assert transport.responses[0].closed


def test_fault_reply_is_raised() -> None:
    transport = DummyTransport(fault(10, "BAD_NAME: nope"))
    client = make_client(transport)
    with pytest.raises(FaultError) as excinfo:
        client.start_process("nope")
    assert excinfo.value.code == 10


def test_unexpected_reply_shape_is_a_parse_error() -> None:
    transport = DummyTransport(reply("yes"))
    client = make_client(transport)
    with pytest.raises(ParseError):
        client.start_process("webapp")
    assert transport.responses[0].closed


def test_malformed_reply_is_a_parse_error() -> None:
    transport = DummyTransport(b"<methodResponse><params>")
    client = make_client(transport)
    with pytest.raises(ParseError):
        client.get_version()
    assert transport.responses[0].closed


@pytest.mark.parametrize(
    ("status", "exc"),
    [
        (400, ProtocolError),
        (401, AuthenticationError),
        (403, AuthorizationError),
        (404, NotFoundError),
        (500, ServerError),
        (503, ServerError),
        (302, ProtocolError),
    ],
)
def test_non_success_status_maps_to_protocol_errors(status: int, exc: type[Exception]) -> None:
    transport = DummyTransport(b"boom", status=status, reason="Nope")
    client = make_client(transport)
    with pytest.raises(exc) as excinfo:
        client.get_version()
    assert isinstance(excinfo.value, ProtocolError)
    assert excinfo.value.status == status
    assert str(excinfo.value) == f"{status} Nope"
    assert transport.responses[0].closed


def test_basic_auth_requires_both_credentials() -> None:
    transport = DummyTransport(reply(True))
    client = make_client(transport, username="user")
    client.shutdown()
    assert "Authorization" not in transport.requests[0].headers

    client.set_password("secret")
    client.shutdown()
    assert transport.requests[1].headers["Authorization"] == "Basic dXNlcjpzZWNyZXQ="


def test_setters_replace_configuration() -> None:
    transport = DummyTransport(reply(True))
    client = make_client(transport, timeout=2.0)
    before = client.config
    client.set_timeout(0.5)
    client.set_user("admin")
    assert before.timeout == 2.0
    assert client.config.timeout == 0.5
    assert client.config.username == "admin"
    client.shutdown()
    assert transport.timeouts == [0.5]


def test_rpc_url_appends_endpoint() -> None:
    client = SupervisorClient("http://localhost:9001/", transport=DummyTransport())
    assert client.rpc_url == "http://localhost:9001/RPC2"


def test_transport_selection_based_on_scheme() -> None:
    http_client = SupervisorClient("http://example.com:9001")
    assert isinstance(http_client._transport, HttpTransport)
    https_client = SupervisorClient("https://example.com")
    assert isinstance(https_client._transport, HttpTransport)
    unix_client = SupervisorClient("unix:///var/run/supervisor.sock")
    assert isinstance(unix_client._transport, UnixTransport)
    assert unix_client._transport.path == "/var/run/supervisor.sock"
    for client in (http_client, https_client, unix_client):
        client.close()


@pytest.mark.parametrize("url", ["ftp://example.com", "localhost", "http://host:notaport", "unix://"])
def test_unusable_urls_are_transport_errors(url: str) -> None:
    with pytest.raises(TransportError):
        SupervisorClient(url)


def test_from_env_reads_supervisor_variables() -> None:
    transport = DummyTransport(reply(True))
    client = SupervisorClient.from_env(
        {
            "SUPERVISOR_SERVER_URL": "unix:///tmp/supervisor.sock",
            "SUPERVISOR_USERNAME": "user",
            "SUPERVISOR_PASSWORD": "secret",
            "SUPERVISOR_TIMEOUT": "3",
        },
        transport=transport,
    )
    assert client.server_url == "unix:///tmp/supervisor.sock"
    client.shutdown()
    assert transport.timeouts == [3.0]
    assert transport.requests[0].headers["Authorization"].startswith("Basic ")


def test_state_change_verbs_follow_the_annotation() -> None:
    assert STATE_CHANGES == frozenset(get_args(StateChange)) == {"start", "stop"}
    hints = get_type_hints(SupervisorClient.change_process_state)
    assert hints["change"] == StateChange
