"""Conversion between the dataclass message model and gNMI protobufs."""
import logging

from pygnmi.spec.v080 import gnmi_pb2

from ..messages import (
    Decimal64,
    Error,
    GetRequest,
    GetResponse,
    Notification,
    Path,
    PathElem,
    SetRequest,
    SetResponse,
    SubscribeRequest,
    SubscribeResponse,
    TypedValue,
    Update,
    UpdateResult,
    Value,
    ValueKind,
)

logger = logging.getLogger(__name__)


# --- To protobuf ---

def to_proto_path(path: Path) -> gnmi_pb2.Path:
    return gnmi_pb2.Path(
        element=path.element,
        elem=[gnmi_pb2.PathElem(name=e.name, key=e.key) for e in path.elem],
        origin=path.origin,
        target=path.target,
    )


def to_proto_typed_value(tv: TypedValue) -> gnmi_pb2.TypedValue:
    if tv.kind == ValueKind.UNSET:
        return gnmi_pb2.TypedValue()
    if tv.kind == ValueKind.DECIMAL:
        return gnmi_pb2.TypedValue(decimal_val=gnmi_pb2.Decimal64(
            digits=tv.value.digits, precision=tv.value.precision,
        ))
    return gnmi_pb2.TypedValue(**{tv.kind.value: tv.value})


def to_proto_update(update: Update) -> gnmi_pb2.Update:
    pb = gnmi_pb2.Update()
    if update.path is not None:
        pb.path.CopyFrom(to_proto_path(update.path))
    if update.val is not None:
        pb.val.CopyFrom(to_proto_typed_value(update.val))
    if update.value is not None:
        pb.value.CopyFrom(
            gnmi_pb2.Value(value=update.value.value, type=update.value.type)
        )
    return pb


def to_proto_get_request(req: GetRequest) -> gnmi_pb2.GetRequest:
    pb = gnmi_pb2.GetRequest(path=[to_proto_path(p) for p in req.path])
    if req.prefix is not None:
        pb.prefix.CopyFrom(to_proto_path(req.prefix))
    return pb


def to_proto_set_request(req: SetRequest) -> gnmi_pb2.SetRequest:
    pb = gnmi_pb2.SetRequest(
        delete=[to_proto_path(p) for p in req.delete],
        replace=[to_proto_update(u) for u in req.replace],
        update=[to_proto_update(u) for u in req.update],
    )
    if req.prefix is not None:
        pb.prefix.CopyFrom(to_proto_path(req.prefix))
    return pb


def to_proto_subscribe_request(req: SubscribeRequest) -> gnmi_pb2.SubscribeRequest:
    sub_list = req.subscribe
    subscriptions = [
        gnmi_pb2.Subscription(
            path=to_proto_path(s.path),
            mode=gnmi_pb2.SubscriptionMode.Value(s.mode.name),
            sample_interval=s.sample_interval,
        )
        for s in sub_list.subscription
    ]
    pb = gnmi_pb2.SubscriptionList(
        subscription=subscriptions,
        mode=gnmi_pb2.SubscriptionList.Mode.Value(sub_list.mode.name),
        updates_only=sub_list.updates_only,
    )
    if sub_list.prefix is not None:
        pb.prefix.CopyFrom(to_proto_path(sub_list.prefix))
    return gnmi_pb2.SubscribeRequest(subscribe=pb)


# --- From protobuf ---

def from_proto_path(pb: gnmi_pb2.Path) -> Path:
    return Path(
        element=list(pb.element),
        elem=[PathElem(name=e.name, key=dict(e.key)) for e in pb.elem],
        origin=pb.origin,
        target=pb.target,
    )


def from_proto_typed_value(pb: gnmi_pb2.TypedValue) -> TypedValue:
    which = pb.WhichOneof("value")
    if which is None:
        return TypedValue()
    try:
        kind = ValueKind(which)
    except ValueError:
        logger.debug(f"Unknown TypedValue variant {which!r}")
        return TypedValue(variant=which)
    value = getattr(pb, which)
    if kind == ValueKind.DECIMAL:
        value = Decimal64(digits=value.digits, precision=value.precision)
    return TypedValue(kind=kind, value=value)


def from_proto_update(pb: gnmi_pb2.Update) -> Update:
    update = Update(duplicates=pb.duplicates)
    if pb.HasField("path"):
        update.path = from_proto_path(pb.path)
    if pb.HasField("val"):
        update.val = from_proto_typed_value(pb.val)
    if pb.HasField("value"):
        update.value = Value(value=pb.value.value, type=pb.value.type)
    return update


def from_proto_notification(pb: gnmi_pb2.Notification) -> Notification:
    return Notification(
        timestamp=pb.timestamp,
        prefix=from_proto_path(pb.prefix) if pb.HasField("prefix") else None,
        update=[from_proto_update(u) for u in pb.update],
        delete=[from_proto_path(p) for p in pb.delete],
    )


def from_proto_error(pb: gnmi_pb2.Error) -> Error:
    return Error(code=pb.code, message=pb.message)


def from_proto_get_response(pb: gnmi_pb2.GetResponse) -> GetResponse:
    return GetResponse(
        notification=[from_proto_notification(n) for n in pb.notification]
    )


def from_proto_set_response(pb: gnmi_pb2.SetResponse) -> SetResponse:
    results = [
        UpdateResult(
            path=from_proto_path(r.path) if r.HasField("path") else None,
            op=gnmi_pb2.UpdateResult.Operation.Name(r.op),
            timestamp=r.timestamp,
        )
        for r in pb.response
    ]
    return SetResponse(
        response=results,
        message=from_proto_error(pb.message) if pb.HasField("message") else None,
        timestamp=pb.timestamp,
    )


def from_proto_subscribe_response(pb: gnmi_pb2.SubscribeResponse) -> SubscribeResponse:
    which = pb.WhichOneof("response")
    if which == "update":
        return SubscribeResponse(update=from_proto_notification(pb.update))
    if which == "sync_response":
        return SubscribeResponse(sync_response=pb.sync_response)
    if which == "error":
        return SubscribeResponse(error=from_proto_error(pb.error))
    # Empty response: nothing for the receive loop to act on
    return SubscribeResponse()
