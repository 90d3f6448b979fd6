from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn

import typer
from servicebus_client import (
    ConfigurationError,
    OperationTimeout,
    QueueMessage,
    ServiceBusClientError,
    TooManyRequestsError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)

from .. import console
from ..config import ENV_BASE_URI, load_config
from ..http import make_client

PROFILE_OPTION = typer.Option(None, "--profile", help="Config profile to use.")
BASE_URI_OPTION = typer.Option(None, "--base-uri", help="Override namespace base URI.")


def _make_client(profile: str | None, base_uri: str | None):
    cfg = load_config()
    try:
        return make_client(cfg, profile=profile, base_uri_override=base_uri)
    except ConfigurationError as exc:
        console.err(f"{exc} Run 'sbq settings init' or set {ENV_BASE_URI}.")
        raise typer.Exit(code=2)


def _fail(exc: ServiceBusClientError) -> NoReturn:
    if isinstance(exc, UnauthorizedError):
        console.err(f"Unauthorized ({exc.status_code}). Check the SAS key and the queue name.")
    elif isinstance(exc, ValidationError):
        console.err(f"Rejected by the service: {exc.errors if exc.errors is not None else exc.details}")
    elif isinstance(exc, TooManyRequestsError):
        console.err("Throttled by the service, try again later.")
    elif isinstance(exc, TransportError):
        console.err(f"Service unavailable: {exc}")
    else:
        console.err(str(exc))
    raise typer.Exit(code=2)


def _print_message(msg: QueueMessage | None, json_out: bool) -> None:
    if json_out:
        console.print_json(msg.to_dict() if msg else None)
        return
    if msg is None:
        console.info("Queue is empty.")
        return
    console.field("message_id", msg.message_id)
    console.field("lock_token", msg.lock_token)
    console.field("location", msg.location)
    console.field("body", msg.body if isinstance(msg.body, str) else json.dumps(msg.body, ensure_ascii=False))


def send(
        queue: str = typer.Argument(..., help="Queue name."),
        body: str | None = typer.Argument(None, help="Message body."),
        file: Path | None = typer.Option(None, "--file", "-f", exists=True, dir_okay=False, help="Read body from file."),
        profile: str | None = PROFILE_OPTION,
        base_uri: str | None = BASE_URI_OPTION,
):
    """Send a message to a queue."""
    if body is None and file is None:
        console.err("Provide a message body or --file.")
        raise typer.Exit(code=2)
    if body is not None and file is not None:
        console.err("Use either a body argument or --file, not both.")
        raise typer.Exit(code=2)
    payload = file.read_text(encoding="utf-8") if file is not None else body

    client = _make_client(profile, base_uri)
    try:
        sent = client.send_message(queue, payload)
    except ServiceBusClientError as exc:
        _fail(exc)
    finally:
        client.close()

    if not sent:
        console.err("Message was not accepted.")
        raise typer.Exit(code=1)
    console.ok(f"Message sent to {queue}.")


def _receive(queue: str, *, destructive: bool, wait: int | None, interval: float, timeout: int | None,
             json_out: bool, profile: str | None, base_uri: str | None) -> None:
    client = _make_client(profile, base_uri)
    if timeout is not None:
        client.set_timeout(timeout)
    receive = client.destructive_read if destructive else client.peek
    try:
        if wait:
            msg = client.retry(wait, lambda: receive(queue), interval_s=interval)
        else:
            msg = receive(queue)
    except OperationTimeout:
        console.err(f"No message arrived within {wait}s.")
        raise typer.Exit(code=1)
    except ServiceBusClientError as exc:
        _fail(exc)
    finally:
        client.close()
    _print_message(msg, json_out)


def peek(
        queue: str = typer.Argument(..., help="Queue name."),
        wait: int | None = typer.Option(None, "--wait", min=1, help="Keep polling up to this many seconds."),
        interval: float = typer.Option(5.0, "--interval", min=0.1, help="Seconds between polls with --wait."),
        timeout: int | None = typer.Option(None, "--timeout", min=0, help="Receive timeout sent to the service."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
        profile: str | None = PROFILE_OPTION,
        base_uri: str | None = BASE_URI_OPTION,
):
    """Peek-lock the head message without removing it."""
    _receive(queue, destructive=False, wait=wait, interval=interval, timeout=timeout,
             json_out=json_out, profile=profile, base_uri=base_uri)


def read(
        queue: str = typer.Argument(..., help="Queue name."),
        wait: int | None = typer.Option(None, "--wait", min=1, help="Keep polling up to this many seconds."),
        interval: float = typer.Option(5.0, "--interval", min=0.1, help="Seconds between polls with --wait."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
        profile: str | None = PROFILE_OPTION,
        base_uri: str | None = BASE_URI_OPTION,
):
    """Receive and delete the head message."""
    _receive(queue, destructive=True, wait=wait, interval=interval, timeout=None,
             json_out=json_out, profile=profile, base_uri=base_uri)


def unlock(
        queue: str = typer.Argument(..., help="Queue name."),
        message_id: str = typer.Argument(..., help="MessageId from peek."),
        lock_token: str = typer.Argument(..., help="LockToken from peek."),
        profile: str | None = PROFILE_OPTION,
        base_uri: str | None = BASE_URI_OPTION,
):
    """Release a peek-lock so other receivers can process the message."""
    client = _make_client(profile, base_uri)
    try:
        done = client.unlock_message(queue, message_id, lock_token)
    except ServiceBusClientError as exc:
        _fail(exc)
    finally:
        client.close()
    if not done:
        console.err("Message was not unlocked.")
        raise typer.Exit(code=1)
    console.ok(f"Message {message_id} unlocked.")


def delete(
        queue: str = typer.Argument(..., help="Queue name."),
        message_id: str = typer.Argument(..., help="MessageId from peek."),
        lock_token: str = typer.Argument(..., help="LockToken from peek."),
        profile: str | None = PROFILE_OPTION,
        base_uri: str | None = BASE_URI_OPTION,
):
    """Delete a peek-locked message."""
    client = _make_client(profile, base_uri)
    try:
        done = client.delete_message(queue, message_id, lock_token)
    except ServiceBusClientError as exc:
        _fail(exc)
    finally:
        client.close()
    if not done:
        console.err("Message was not deleted.")
        raise typer.Exit(code=1)
    console.ok(f"Message {message_id} deleted.")


def token(
        path: str = typer.Argument(..., help="Resource path relative to the base URI, e.g. orders/messages."),
        profile: str | None = PROFILE_OPTION,
        base_uri: str | None = BASE_URI_OPTION,
):
    """Print an Authorization header value for a resource path."""
    client = _make_client(profile, base_uri)
    try:
        console.raw(client.get_auth_header(path))
    finally:
        client.close()
