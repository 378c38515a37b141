"""
Parse rules for known gRPC log call sites.

Each rule turns the positional arguments of one specific call site into
structured fields plus a fixed, human-readable message.

The rules match the exact wording of call sites in grpc-go at commit
91c8b79535eb6045d70ec671d302213f88a3ab95. Rules index their arguments
directly; a call site that drifted away from that snapshot faults inside
its rule and the dispatcher degrades it to the generic representation.
Messages are kept as they read in that snapshot, typos included.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Mapping, Sequence

from .exceptions import RuleInvocationError

Fields = dict[str, Any]
Rule = Callable[[Sequence[Any]], tuple[Fields, str]]


# =============================================================================
# Formatted calls (Fatalf / Printf), keyed by the format string
# =============================================================================

PARSEF_RULES: Mapping[str, Rule] = MappingProxyType(
    {
        "%v compleled with error code %d, want %d": lambda a: (
            {"stream": a[0], "grpc.Code(err)": a[1], "codes.Canceled": a[2]},
            "completed with wrong error code",
        ),
        "%v.CloseAndRecv() got error code %d, want %d": lambda a: (
            {"stream": a[0], "want.code": a[1], "got.code": a[2]},
            "stream CloseAndRecv() got wrong error code",
        ),
        "Getting feature for point (%d, %d)": lambda a: (
            {"point.latitude": a[0], "point.longitude": a[1]},
            "Getting feature for point",
        ),
        "Got %d reply, want %d": lambda a: (
            {"want.count": a[0], "got.count": a[1]},
            "got wrong count of replies",
        ),
        "Got message %s at point(%d, %d)": lambda a: (
            {"message": a[0], "point.latitude": a[1], "point.longitude": a[2]},
            "got message at point",
        ),
        "Got reply body of length %d, want %d": lambda a: (
            {"want.length": a[0], "got.length": a[1]},
            "Got reply body of wrong length",
        ),
        "Got the reply of type %d, want %d": lambda a: (
            {"got.type": a[0], "want.type": a[1]},
            "Got the reply of wrong type",
        ),
        "Got the reply with type %d len %d; want %d, %d": lambda a: (
            {"got.type": a[0], "got.len": a[1], "want.type": a[2], "want.len": a[3]},
            "Got the reply with wrong type and length",
        ),
        "Requested a response with invalid length %d": lambda a: (
            {"length": a[0]},
            "Requested a response with invalid length",
        ),
        "Sent a request of size %d, aggregated size %d": lambda a: (
            {"request.size": a[0], "aggregated.size": a[1]},
            "Sent a request of wrong size",
        ),
        "Traversing %d points.": lambda a: ({"count": a[0]}, "traversing points"),
        "Unsupported payload type: %d": lambda a: ({"type": a[0]}, "unsupported payload type"),
        "%v failed to complele the ping pong test: %v": lambda a: (
            {"stream": a[0], "err": a[1]},
            "failed to complele the ping pong test",
        ),
        "%v.CloseAndRecv() got error %v, want %v": lambda a: (
            {"stream": a[0], "err": a[1]},
            "stream CloseAndRecv() got error, expected none",
        ),
        "%v.CloseSend() got %v, want %v": lambda a: (
            {"stream": a[0], "err": a[1]},
            "stream CloseSend() got error, expected none",
        ),
        "%v.CloseAndRecv().GetAggregatePayloadSize() = %v; want %v": lambda a: (
            {"stream": a[0], "reply.GetAggregatedPayloadSize()": a[1], "sum": a[2]},
            "stream CloseAndRecv().GetAggregatePayloadSize() got wrong size",
        ),
        "%v.GetFeatures(_) = _, %v: ": lambda a: ({"client": a[0], "err": a[1]}, "GetFeatures"),
        "%v.ListFeatures(_) = _, %v": lambda a: ({"client": a[0], "err": a[1]}, "ListFeatures"),
        "%v.RecordRoute(_) = _, %v": lambda a: ({"client": a[0], "err": a[1]}, "RecordRoute"),
        "%v.RouteChat(_) = _, %v": lambda a: ({"client": a[0], "err": a[1]}, "RouteChat"),
        "%v.FullDuplexCall(_) = _, %v": lambda a: ({"tc": a[0], "err": a[1]}, "FullDuplexCall"),
        "%v.Recv() = %v": lambda a: ({"stream": a[0], "err": a[1]}, "stream .Recv() got error"),
        "%v.Send(%v) = %v": lambda a: (
            {"stream": a[0], "point": a[1], "err": a[2]},
            "stream .Send() got error",
        ),
        "Got OAuth scope %q which is NOT a substring of %q.": lambda a: (
            {"got.scope": a[0], "want.scope": a[1]},
            "Got OAuth scope which is NOT a substring of expected scope",
        ),
        "Got user name %q which is NOT a substring of %q.": lambda a: (
            {"user": a[0], "json.key": a[1]},
            "Got user name which is NOT a substring json key",
        ),
        "Got user name %q, want %q.": lambda a: (
            {"got.user": a[0], "want.user": a[1]},
            "wrong user name",
        ),
        "grpc: ClientConn.resetTransport failed to create client transport: %v; Reconnecting to %q": lambda a: (
            {"package": "grpc", "err": a[0], "cc.target": a[1]},
            "ClientConn.resetTransport failed to create client transport, reconnecting",
        ),
        "grpc: Server.RegisterService found duplicate service registration for %q": lambda a: (
            {"package": "grpc", "service.name": a[0]},
            "Server.RegisterService found duplicate service registration",
        ),
        "NewClientConn(%q) failed to create a ClientConn %v": lambda a: (
            {"addr": a[0], "err": a[1]},
            "NewClientConn(_) failed to create a ClientConn",
        ),
        "transport: http2Server.HandleStreams received bogus greeting from client: %q": lambda a: (
            {"package": "transport", "preface": a[0]},
            "http2Server.HandleStreams received bogus greeting from client",
        ),
        "%v.SendHeader(%v) = %v, want %v": lambda a: (
            {"stream": a[0], "md": a[1], "err": a[2], "nil": a[3]},
            "SendHeader",
        ),
        "%v.StreamingCall(_) = _, %v": lambda a: ({"tc": a[0], "err": a[1]}, "StreamingCall"),
        "%v.StreamingInputCall(_) = _, %v": lambda a: ({"tc": a[0], "err": a[1]}, "StreamingInputCall"),
        "%v.StreamingOutputCall(_) = _, %v": lambda a: ({"tc": a[0], "err": a[1]}, "StreamingOutputCall"),
        "/TestService/EmptyCall receives %v, want %v": lambda a: (
            {"reply": a[0], "testpb.Empty{}": a[1]},
            "/TestService/EmptyCall receives",
        ),
        # The call site passes (addr, err) but only the first is kept.
        "Dial(%q) = %v": lambda a: ({"addr, err": a[0]}, "Dial"),
        "Fail to dial: %v": lambda a: ({"err": a[0]}, "fail to dial"),
        "fail to dial: %v": lambda a: ({"err": a[0]}, "fail to dial"),
        "Failed to convert %v to *http2Server": lambda a: (
            {"s.ServerTransport()": a[0]},
            "Failed to convert to *http2Server",
        ),
        "Failed to create credentials %v": lambda a: ({"err": a[0]}, "Failed to create credentials"),
        "Failed to create JWT credentials: %v": lambda a: ({"err": a[0]}, "Failed to create JWT credentials"),
        "Failed to create TLS credentials %v": lambda a: ({"err": a[0]}, "Failed to create TLS credentials"),
        "Failed to decode (%q, %q): %v": lambda a: (
            {"f.Name": a[0], "f.Value": a[1], "err": a[2]},
            "Failed to decode",
        ),
        "Failed to dial %s: %v; please retry.": lambda a: ({"target, err": a[0]}, "Failed to dial, please retry"),
        "Failed to finish the server streaming rpc: %v": lambda a: (
            {"err": a[0]},
            "Failed to finish the server streaming rpc",
        ),
        "Failed to generate credentials %v": lambda a: ({"err": a[0]}, "Failed to generate credentials"),
        "Failed to listen: %v": lambda a: ({"err": a[0]}, "failed to listen"),
        "failed to listen: %v": lambda a: ({"err": a[0]}, "failed to listen"),
        "Failed to load default features: %v": lambda a: ({"err": a[0]}, "Failed to load default features"),
        "Failed to parse listener address: %v": lambda a: ({"err": a[0]}, "Failed to parse listener address"),
        "failed to parse listener address: %v": lambda a: ({"err": a[0]}, "Failed to parse listener address"),
        "Failed to read the service account key file: %v": lambda a: (
            {"err": a[0]},
            "Failed to read the service account key file",
        ),
        "Failed to receive a note : %v": lambda a: ({"err": a[0]}, "Failed to receive a note"),
        "Failed to send a note: %v": lambda a: ({"err": a[0]}, "Failed to send a not"),
        "Failed to serve: %v": lambda a: ({"err": a[0]}, "Failed to serve"),
        "grpc.SendHeader(%v, %v) = %v, want %v": lambda a: (
            {"ctx": a[0], "md": a[1], "err": a[2]},
            "grpc.SendHeader",
        ),
        "transport: http2Server.HandleStreams saw invalid preface type %T from client": lambda a: (
            {"package": "transport", "frame": type(a[0]).__name__},
            "http2Server.HandleStreams saw invalid preface type from client",
        ),
        "grpc: ClientConn.transportMonitor exits due to: %v": lambda a: (
            {"package": "grpc", "err": a[0]},
            "ClientConn.transportMonitor exits",
        ),
        "grpc: SendHeader: %v has no ServerTransport to send header metadata.": lambda a: (
            {"package": "grpc", "stream": a[0]},
            "SendHeader: stream has no ServerTransport to send header metadata",
        ),
        "grpc: Server failed to encode response %v": lambda a: (
            {"package": "grpc", "err": a[0]},
            "Server failed to encode response",
        ),
        "grpc: Server.handleStream failed to write status: %v": lambda a: (
            {"package": "grpc", "err": a[0]},
            "Server.handleStream failed to write status",
        ),
        "grpc: Server.processUnaryRPC failed to write status: %v": lambda a: (
            {"package": "grpc", "err": a[0]},
            "Server.processUnaryRPC failed to write status",
        ),
        "grpc: Server.RegisterService found the handler of type %v that does not satisfy %v": lambda a: (
            {"package": "grpc", "found.type": a[0], "expected.type": a[1]},
            "Server.RegisterService found handler of type that does not satisfy expectations",
        ),
        "handleStream got error: %v, want <nil>; result: %v, want %v": lambda a: (
            {"err": a[0], "p": a[1], "req": a[2]},
            "handleStream got error",
        ),
        "Looking for features within %v": lambda a: ({"rect": a[0]}, "Looking for features withi rectangle"),
        "PayloadType UNCOMPRESSABLE is not supported": lambda a: ({}, "PayloadType UNCOMPRESSABLE is not supported"),
        "Route summary: %v": lambda a: ({"reply": a[0]}, "Route summary"),
        "StreamingCall(_).Recv: %v": lambda a: ({"err": a[0]}, "StreamingCall(_).Recv"),
        "StreamingCall(_).Send: %v": lambda a: ({"err": a[0]}, "StreamingCall(_).Send"),
        "TLS is not enabled. TLS is required to execute compute_engine_creds test case.": lambda a: (
            {},
            "TLS is not enabled. TLS is required to execute compute_engine_creds test case",
        ),
        "TLS is not enabled. TLS is required to execute service_account_creds test case.": lambda a: (
            {},
            "TLS is not enabled. TLS is required to execute service_account_creds test case",
        ),
        "transport: http2Client.controller got unexpected item type %v": lambda a: (
            {"package": "transport", "item.type": a[0]},
            "http2Client.controller got unexpected item type",
        ),
        "transport: http2Client.notifyError got notified that the client transport was broken %v.": lambda a: (
            {"package": "transport", "err": a[0]},
            "http2Client.notifyError got notified that the client transport was broken",
        ),
        "transport: http2Client.reader got unhandled frame type %v.": lambda a: (
            {"package": "transport", "frame": a[0]},
            "http2Client.reader got unhandled frame type",
        ),
        "transport: http2Server %v": lambda a: ({"package": "transport", "err": a[0]}, "http2Server error"),
        "transport: http2Server.controller got unexpected item type %v": lambda a: (
            {"package": "transport", "item.type": a[0]},
            "http2Server.controller got unexpected item type",
        ),
        "transport: http2Server.HandleStreams failed to read frame: %v": lambda a: (
            {"package": "transport", "err": a[0]},
            "http2Server.HandleStreams failed to read frame",
        ),
        "transport: http2Server.HandleStreams failed to receive the preface from client: %v": lambda a: (
            {"package": "transport", "err": a[0]},
            "http2Server.HandleStreams failed to receive the preface from client",
        ),
        "transport: http2Server.HandleStreams found unhandled frame type %v.": lambda a: (
            {"package": "transport", "frame": a[0]},
            "http2Server.HandleStreams found unhandled frame type",
        ),
        "transport: http2Server.operateHeader found %v": lambda a: (
            {"package": "transport", "err": a[0]},
            "http2Server.operateHeader found",
        ),
    }
)


# =============================================================================
# Line calls (Fatal / Fatalln / Print / Println), keyed by the first argument
# =============================================================================

PARSELN_RULES: Mapping[str, Rule] = MappingProxyType(
    {
        "/TestService/EmptyCall RPC failed: ": lambda a: ({"err": a[0]}, "/TestService/EmptyCall RPC failed"),
        "/TestService/UnaryCall RPC failed: ": lambda a: ({"err": a[0]}, "/TestService/UnaryCall RPC failed"),
        "CancelAfterBegin done": lambda a: ({}, "CancelAfterBegin done"),
        "CancelAfterFirstResponse done": lambda a: ({}, "CancelAfterFirstResponse done"),
        "Client profiling address: ": lambda a: ({"addr": a[0]}, "Client profiling address"),
        "ClientStreaming done": lambda a: ({}, "ClientStreaming done"),
        "ComputeEngineCreds done": lambda a: ({}, "ComputeEngineCreds done"),
        "EmptyUnaryCall done": lambda a: ({}, "EmptyUnaryCall done"),
        "grpc: Server.Serve failed to complete security handshake.": lambda a: (
            {"package": "grpc"},
            "Server.Serve failed to complete security handshake",
        ),
        "grpc: Server.Serve failed to create ServerTransport: ": lambda a: (
            {"package": "grpc", "err": a[0]},
            "Server.Serve failed to create ServerTransport",
        ),
        "LargeUnaryCall done": lambda a: ({}, "LargeUnaryCall done"),
        "Pingpong done": lambda a: ({}, "Pingpong done"),
        "Server Address: ": lambda a: ({"addr": a[0]}, "Server Address"),
        "Server profiling address: ": lambda a: ({"addr": a[0]}, "Server profiling address"),
        "ServerStreaming done": lambda a: ({}, "ServerStreaming done"),
        "ServiceAccountCreds done": lambda a: ({}, "ServiceAccountCreds done"),
        "transport: http2Client.handleRSTStream found no mapped gRPC status for the received http2 error ": lambda a: (
            {"package": "transport", "err": a[0]},
            "http2Client.handleRSTStream found no mapped gRPC status for the received http2 error",
        ),
        "transport: http2Server.HandleStreams received an illegal stream id: ": lambda a: (
            {"package": "transport", "id": a[0]},
            "http2Server.HandleStreams received an illegal stream id",
        ),
        "Unsupported test case: ": lambda a: ({"test.case": a[0]}, "Unsupported test case"),
    }
)


def invoke_rule(rules: Mapping[str, Rule], key: str, args: Sequence[Any]) -> tuple[Fields, str] | None:
    """Run the rule registered under ``key``.

    Returns ``None`` when no rule matches. Any exception raised by the rule
    is re-raised as :class:`RuleInvocationError`.
    """
    rule = rules.get(key)
    if rule is None:
        return None
    try:
        return rule(args)
    except Exception as exc:
        raise RuleInvocationError(key=key, args=args, cause=exc) from exc
