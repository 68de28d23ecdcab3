# src/smart_connection/cli/commands.py

from __future__ import annotations

import json
import logging
from collections.abc import Callable

from ..core.events import InteractionKind
from ..core.state import BackgroundRuntime, Runtime

CommandHandler = Callable[[BackgroundRuntime, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /stats, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, bg: BackgroundRuntime, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(bg, args)

    def help_text(self) -> str:
        lines = ["Available commands:"]
        for name in sorted(self._help):
            lines.append(f"  /{name} - {self._help[name]}")
        return "\n".join(lines)


registry = CommandRegistry()


def _on_loop(bg: BackgroundRuntime, fn: Callable[[Runtime], str]) -> str:
    return bg.call(lambda: fn(bg.runtime))


def _do(bg: BackgroundRuntime, action: Callable[[Runtime], None], reply: str) -> str:
    def _run(rt: Runtime) -> str:
        action(rt)
        return reply

    return _on_loop(bg, _run)


def _cmd_help(bg: BackgroundRuntime, args: list[str]) -> str:
    return registry.help_text()


def _cmd_stats(bg: BackgroundRuntime, args: list[str]) -> str:
    def _stats(rt: Runtime) -> str:
        if rt.orchestrator is None:
            return "Smart polling is disabled; fixed-interval fallback is running."
        return json.dumps(rt.orchestrator.get_stats().to_dict(), indent=2)

    return _on_loop(bg, _stats)


def _cmd_hide(bg: BackgroundRuntime, args: list[str]) -> str:
    return _do(bg, lambda rt: rt.environment.set_hidden(True), "Page hidden.")


def _cmd_show(bg: BackgroundRuntime, args: list[str]) -> str:
    return _do(bg, lambda rt: rt.environment.set_hidden(False), "Page visible.")


def _cmd_online(bg: BackgroundRuntime, args: list[str]) -> str:
    return _do(bg, lambda rt: rt.environment.set_online(True), "Network online.")


def _cmd_offline(bg: BackgroundRuntime, args: list[str]) -> str:
    return _do(bg, lambda rt: rt.environment.set_online(False), "Network offline.")


def _cmd_connect(bg: BackgroundRuntime, args: list[str]) -> str:
    return _do(bg, lambda rt: rt.transport.mark_connected(), "Push transport connected.")


def _cmd_disconnect(bg: BackgroundRuntime, args: list[str]) -> str:
    return _do(bg, lambda rt: rt.transport.disconnect(), "Push transport disconnected.")


def _cmd_activity(bg: BackgroundRuntime, args: list[str]) -> str:
    kind = args[0] if args else InteractionKind.POINTER_MOVE.value
    try:
        interaction = InteractionKind(kind)
    except ValueError:
        valid = ", ".join(k.value for k in InteractionKind)
        return f"Unknown interaction: {kind}. Use one of: {valid}"
    return _do(bg, lambda rt: rt.environment.interact(interaction), f"Recorded {interaction.value}.")


def _cmd_fail(bg: BackgroundRuntime, args: list[str]) -> str:
    if not args:
        return "Usage: /fail <task-id>"
    task_id = args[0]

    def _fail(rt: Runtime) -> str:
        feed = rt.feeds.get(task_id)
        if feed is None:
            return f"Unknown task: {task_id}"
        feed.fail_next = True
        return f"Next fetch of {task_id} will fail."

    return _on_loop(bg, _fail)


def _toggle(bg: BackgroundRuntime, args: list[str], *, start: bool) -> str:
    if not args:
        return f"Usage: /{'start' if start else 'stop'} <task-id>"
    task_id = args[0]

    def _run(rt: Runtime) -> str:
        if rt.orchestrator is None:
            return "Smart polling is disabled."
        if task_id not in rt.orchestrator:
            return f"Unknown task: {task_id}"
        changed = rt.orchestrator.start(task_id) if start else rt.orchestrator.stop(task_id)
        state = "started" if start else "stopped"
        return f"Task {task_id} {state}." if changed else f"Task {task_id} already {state}."

    return _on_loop(bg, _run)


def _cmd_start(bg: BackgroundRuntime, args: list[str]) -> str:
    return _toggle(bg, args, start=True)


def _cmd_stop(bg: BackgroundRuntime, args: list[str]) -> str:
    return _toggle(bg, args, start=False)


registry.register("help", _cmd_help, "Show this help.", aliases=["h", "?"])
registry.register("stats", _cmd_stats, "Show orchestrator and poller stats.")
registry.register("hide", _cmd_hide, "Simulate the page becoming hidden.")
registry.register("show", _cmd_show, "Simulate the page becoming visible.")
registry.register("online", _cmd_online, "Simulate the network coming back.")
registry.register("offline", _cmd_offline, "Simulate losing the network.")
registry.register("connect", _cmd_connect, "Mark the push transport connected.")
registry.register("disconnect", _cmd_disconnect, "Mark the push transport disconnected.")
registry.register("activity", _cmd_activity, "Record a user interaction: /activity [kind].")
registry.register("fail", _cmd_fail, "Make the next fetch of a task fail: /fail <task-id>.")
registry.register("start", _cmd_start, "Start a task: /start <task-id>.")
registry.register("stop", _cmd_stop, "Stop a task: /stop <task-id>.")
