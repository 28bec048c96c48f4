from flask import current_app, request
from flask_socketio import join_room, leave_room
from banker import socketio
from banker import events
from banker.errors import BankerError
from typing import Callable, Iterable


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _coordinator():
    return current_app.extensions['banker']


def _send(messages: Iterable, sid: str) -> None:
    """Emit coordinator messages: to the requester, or to a whole room."""
    namespace = request.namespace  # type: ignore
    for message in messages:
        if message.room is None:
            socketio.emit(message.event, message.payload, to=sid, namespace=namespace)
        else:
            socketio.emit(
                message.event,
                message.payload,
                to=message.room,
                skip_sid=sid if message.skip_requester else None,
                namespace=namespace,
            )


def _handle(event_name: str, action: Callable) -> None:
    """Run ``action(coordinator, sid)`` and deliver its outcome.

    The coordinator lock is held until the last emit so the next action in
    any room only starts once this one has been broadcast. Errors only ever
    reach the requester.
    """
    sid = _get_sid()
    coordinator = _coordinator()
    with coordinator.lock:
        try:
            outcome = action(coordinator, sid)
        except BankerError as exc:
            current_app.logger.debug(f"[{event_name}] sid={sid} rejected: {exc}")
            _send(exc.messages, sid)
            socketio.emit('room:error', exc.message, to=sid, namespace=request.namespace)  # type: ignore
            return
        if outcome.left_room:
            leave_room(outcome.left_room)
        if outcome.joined_room:
            join_room(outcome.joined_room)
        _send(outcome.messages, sid)


def handle_connect(auth=None):
    current_app.logger.info(f"Client connected: {_get_sid()}")


def handle_disconnect(reason=None):
    current_app.logger.info(f"Client disconnected: {_get_sid()}")
    _handle('disconnect', lambda coordinator, sid: coordinator.leave(sid))


def handle_create_room(data=None):
    def action(coordinator, sid):
        event = events.CreateRoom.from_payload(data)
        return coordinator.create_room(sid, event.room_name, event.player_name, event.initial_balance)
    _handle(events.ROOM_CREATE, action)


def handle_join_room(data=None):
    def action(coordinator, sid):
        event = events.JoinRoom.from_payload(data)
        return coordinator.join_room(sid, event.room_id, event.player_name)
    _handle(events.ROOM_JOIN, action)


def handle_leave_room(data=None):
    _handle(events.ROOM_LEAVE, lambda coordinator, sid: coordinator.leave(sid))


def handle_transfer(data=None):
    def action(coordinator, sid):
        event = events.Transfer.from_payload(data)
        return coordinator.transfer(sid, event.to_player_id, event.amount, event.message)
    _handle(events.TRANSACTION_TRANSFER, action)


def handle_request(data=None):
    def action(coordinator, sid):
        event = events.RequestMoney.from_payload(data)
        return coordinator.request_money(sid, event.from_player_id, event.amount, event.message)
    _handle(events.TRANSACTION_REQUEST, action)


def handle_respond(data=None):
    def action(coordinator, sid):
        event = events.RespondToRequest.from_payload(data)
        return coordinator.respond_to_request(sid, event.transaction_id, event.accept)
    _handle(events.TRANSACTION_RESPOND, action)


def handle_edit_balance(data=None):
    def action(coordinator, sid):
        event = events.EditBalance.from_payload(data)
        return coordinator.edit_balance(sid, event.player_id, event.new_balance)
    _handle(events.BALANCE_EDIT, action)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the configured namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event(events.ROOM_CREATE, handle_create_room, namespace=namespace)
    socketio.on_event(events.ROOM_JOIN, handle_join_room, namespace=namespace)
    socketio.on_event(events.ROOM_LEAVE, handle_leave_room, namespace=namespace)
    socketio.on_event(events.TRANSACTION_TRANSFER, handle_transfer, namespace=namespace)
    socketio.on_event(events.TRANSACTION_REQUEST, handle_request, namespace=namespace)
    socketio.on_event(events.TRANSACTION_RESPOND, handle_respond, namespace=namespace)
    socketio.on_event(events.BALANCE_EDIT, handle_edit_balance, namespace=namespace)
