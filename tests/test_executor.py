"""Tests for the Get, Set and Subscribe executors."""
import asyncio
import io
import logging

import pytest

from gnmi_cli.errors import ProtocolError, TransportError, ValidationError
from gnmi_cli.messages import (
    Error,
    GetResponse,
    Notification,
    Path,
    PathElem,
    SetResponse,
    SubscribeResponse,
    TypedValue,
    Update,
    ValueKind,
)
from gnmi_cli.operations import (
    CommandExecutor,
    Operation,
    OpType,
    SessionState,
    SubscriptionSession,
    build_request,
    new_get_request,
    new_set_request,
    new_subscribe_request,
    parse_operations,
)

from conftest import FakeClient, FakeStream


def _update(elements, kind, value):
    return Update(
        path=Path(element=elements, elem=[PathElem(name=e) for e in elements]),
        val=TypedValue(kind, value),
    )


def _notification(*updates):
    return SubscribeResponse(update=Notification(update=list(updates)))


class TestGetExecutor:
    """Tests for CommandExecutor.get."""

    @pytest.mark.asyncio
    async def test_get_prints_path_and_value(self):
        """Each update prints 'path:' then the value."""
        client = FakeClient(get_response=GetResponse(notification=[
            Notification(update=[_update(["a", "b"], ValueKind.STRING, "x")])
        ]))
        out = io.StringIO()

        await CommandExecutor(client, out).run(parse_operations(["get", "/a/b"]))

        assert out.getvalue() == "a/b:\nx\n"
        req = client.requests[0]
        assert [p.element for p in req.path] == [["a", "b"]]

    @pytest.mark.asyncio
    async def test_get_multiple_notifications(self):
        """All updates in all notifications are printed in order."""
        client = FakeClient(get_response=GetResponse(notification=[
            Notification(update=[
                _update(["a"], ValueKind.INT, -1),
                _update(["b"], ValueKind.BOOL, True),
            ]),
            Notification(update=[_update(["c"], ValueKind.JSON_IETF, b'{"k": 1}')]),
        ]))
        out = io.StringIO()

        req = new_get_request([["a"], ["b"], ["c"]])
        await CommandExecutor(client, out).get(req)

        assert out.getvalue().splitlines() == [
            "a:", "-1", "b:", "true", "c:", '{"k": 1}',
        ]

    @pytest.mark.asyncio
    async def test_get_transport_error_propagates(self):
        """Transport errors surface unchanged."""
        error = TransportError("Get failed: UNAVAILABLE", status="UNAVAILABLE")
        client = FakeClient(error=error)

        with pytest.raises(TransportError) as exc_info:
            await CommandExecutor(client, io.StringIO()).get(new_get_request([["a"]]))
        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_get_bad_path_sends_nothing(self):
        """Path validation happens before the RPC."""
        client = FakeClient()

        with pytest.raises(ValidationError):
            await CommandExecutor(client, io.StringIO()).run(
                parse_operations(["get", "/a[k"])
            )
        assert client.requests == []

    @pytest.mark.asyncio
    async def test_get_defaults_to_stdout(self, capsys):
        """Without an explicit stream output goes to stdout."""
        client = FakeClient(get_response=GetResponse(notification=[
            Notification(update=[_update(["a"], ValueKind.UINT, 7)])
        ]))

        await CommandExecutor(client).get(new_get_request([["a"]]))

        assert capsys.readouterr().out == "a:\n7\n"


class TestSetExecutor:
    """Tests for CommandExecutor.set."""

    @pytest.mark.asyncio
    async def test_update_ok(self):
        """OK response is silent success and the payload is sent verbatim."""
        client = FakeClient(set_response=SetResponse(message=Error(code=0)))
        out = io.StringIO()

        await CommandExecutor(client, out).run(
            parse_operations(["update", "/a/b", '{"k":1}'])
        )

        req = client.requests[0]
        assert len(req.update) == 1
        assert req.update[0].val.value == b'{"k":1}'
        assert out.getvalue() == ""

    @pytest.mark.asyncio
    async def test_no_message_is_success(self):
        """Response without a status message is success."""
        client = FakeClient(set_response=SetResponse())
        await CommandExecutor(client, io.StringIO()).set(
            new_set_request([Operation(op_type=OpType.DELETE, path=["a"])])
        )
        assert len(client.requests[0].delete) == 1

    @pytest.mark.asyncio
    async def test_non_ok_status(self):
        """Non-OK status raises ProtocolError with the target's message."""
        client = FakeClient(set_response=SetResponse(
            message=Error(code=3, message="invalid value for leaf")
        ))

        with pytest.raises(ProtocolError, match="invalid value for leaf") as exc_info:
            await CommandExecutor(client, io.StringIO()).set(
                new_set_request(
                    [Operation(op_type=OpType.REPLACE, path=["a"], value="1")]
                )
            )
        assert exc_info.value.details["code"] == 3

    @pytest.mark.asyncio
    async def test_execute_built_request_logs_counts(self, caplog):
        """A prebuilt SetRequest is dispatched to Set and its size logged."""
        client = FakeClient(set_response=SetResponse())
        request = build_request(parse_operations(
            ["delete", "/a", "update", "/b", "1", "replace", "/c", "2"]
        ))

        with caplog.at_level(logging.INFO, logger="gnmi_cli.operations.executor"):
            await CommandExecutor(client, io.StringIO()).execute(request)

        assert client.requests == [request]
        assert "Set: 3 operations (1 delete, 1 replace, 1 update)" in caplog.text


class TestSubscriptionSession:
    """Tests for the subscription state machine."""

    @pytest.mark.asyncio
    async def test_states(self):
        """Session moves through syncing and streaming to closed."""
        stream = FakeStream([
            _notification(_update(["a"], ValueKind.STRING, "1")),
            SubscribeResponse(sync_response=True),
            _notification(_update(["a"], ValueKind.STRING, "2")),
        ])
        session = SubscriptionSession(stream)
        assert session.state == SessionState.OPENED

        await session.start(object())
        assert session.state == SessionState.SYNCING

        seen = []
        async for notif in session.notifications():
            seen.append((session.state, notif.update[0].val.value))

        assert seen == [
            (SessionState.SYNCING, "1"),
            (SessionState.STREAMING, "2"),
        ]
        assert session.state == SessionState.CLOSED

    @pytest.mark.asyncio
    async def test_error_response(self):
        """Error response ends the session with its message."""
        stream = FakeStream([SubscribeResponse(error=Error(code=5, message="no such path"))])
        session = SubscriptionSession(stream)

        with pytest.raises(ProtocolError, match="no such path"):
            async for _ in session.notifications():
                pass
        assert session.state == SessionState.CLOSED


class TestSubscribeExecutor:
    """Tests for CommandExecutor.subscribe."""

    @pytest.mark.asyncio
    async def test_streams_updates(self):
        """Every update prints 'path = value' in arrival order."""
        stream = FakeStream([
            _notification(_update(["a", "b"], ValueKind.STRING, "1")),
            SubscribeResponse(sync_response=True),
            _notification(
                _update(["a", "b"], ValueKind.STRING, "2"),
                _update(["c"], ValueKind.UINT, 3),
            ),
        ])
        client = FakeClient(stream=stream)
        out = io.StringIO()

        await CommandExecutor(client, out).run(
            parse_operations(["subscribe", "/a/b", "/c"])
        )

        assert out.getvalue().splitlines() == ["a/b = 1", "a/b = 2", "c = 3"]
        assert len(stream.sent) == 1
        subs = stream.sent[0].subscribe.subscription
        assert [s.path.element for s in subs] == [["a", "b"], ["c"]]
        assert stream.closed

    @pytest.mark.asyncio
    async def test_initial_sync_failed(self):
        """sync_response false fails and closes the stream."""
        stream = FakeStream([SubscribeResponse(sync_response=False)])
        client = FakeClient(stream=stream)

        with pytest.raises(ProtocolError, match="initial sync failed"):
            await CommandExecutor(client, io.StringIO()).subscribe(
                new_subscribe_request([["a"]])
            )
        assert stream.closed

    @pytest.mark.asyncio
    async def test_transport_error_closes_stream(self):
        """Receive error propagates and the stream is still closed."""
        stream = FakeStream([
            SubscribeResponse(sync_response=True),
            TransportError("Subscribe failed: UNAVAILABLE", status="UNAVAILABLE"),
        ])
        client = FakeClient(stream=stream)

        with pytest.raises(TransportError):
            await CommandExecutor(client, io.StringIO()).subscribe(
                new_subscribe_request([["a"]])
            )
        assert stream.closed

    @pytest.mark.asyncio
    async def test_cancellation_closes_stream(self):
        """Cancelling a blocked subscription closes the stream."""
        stream = FakeStream(
            [_notification(_update(["a"], ValueKind.STRING, "1"))],
            block_at_end=True,
        )
        client = FakeClient(stream=stream)
        out = io.StringIO()

        req = new_subscribe_request([["a"]])
        task = asyncio.create_task(CommandExecutor(client, out).subscribe(req))
        while "a = 1" not in out.getvalue():
            await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert stream.closed

    @pytest.mark.asyncio
    async def test_bad_path_never_opens_stream(self):
        """Validation failure happens before the stream is used."""
        stream = FakeStream([])
        client = FakeClient(stream=stream)

        with pytest.raises(ValidationError):
            await CommandExecutor(client, io.StringIO()).run(
                parse_operations(["subscribe"])
            )
        assert stream.sent == []

    @pytest.mark.asyncio
    async def test_iter_subscription_batches(self):
        """iter_subscription yields one decoded batch per notification."""
        stream = FakeStream([
            _notification(
                _update(["x"], ValueKind.BOOL, False),
                _update(["y"], ValueKind.INT, 9),
            ),
            SubscribeResponse(sync_response=True),
        ])
        executor = CommandExecutor(FakeClient(stream=stream), io.StringIO())

        req = new_subscribe_request([["x"], ["y"]])
        batches = [b async for b in executor.iter_subscription(req)]

        assert batches == [[("x", "false"), ("y", "9")]]
        assert stream.closed
