"""Usage synopsis and help rendering."""

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from argmatch.descriptor import ArgumentDescriptor, UpdateRule

if TYPE_CHECKING:
    from rich.console import RenderableType

    from argmatch.command import Command

_MAX_SYNOPSIS_ENTRIES = 12


def _default_prog() -> str:
    name = Path(sys.argv[0]).name if sys.argv and sys.argv[0] else ""
    return name or "<command>"


def descriptor_synopsis(descriptor: ArgumentDescriptor) -> str:
    """Synopsis of a single descriptor without optional/repeating decoration."""
    if descriptor.is_positional:
        return f"<{descriptor.display_value_name}>"
    assert descriptor.preferred_name is not None
    if descriptor.update is UpdateRule.NULLARY:
        return descriptor.preferred_name.synopsis
    return f"{descriptor.preferred_name.synopsis} <{descriptor.display_value_name}>"


def _decorated_synopsis(descriptor: ArgumentDescriptor) -> str:
    out = descriptor_synopsis(descriptor)
    if descriptor.is_repeating:
        out += " ..."
    if descriptor.is_optional:
        out = f"[{out}]"
    return out


def _resolve(command: "Command", command_path: Sequence[str]) -> "Command":
    for name in command_path:
        command = command[name]
    return command


def format_usage(command: "Command", command_path: Sequence[str] = (), prog: str | None = None) -> str:
    """Render a one-line usage synopsis for the command at ``command_path``.

    Example: ``Usage: tool build [--verbose] --jobs <jobs> <target> [<extra> ...] <subcommand>``

    Hidden descriptors and hidden children are omitted.
    """
    node = _resolve(command, command_path)
    parts = ["Usage:", prog or _default_prog(), *command_path]

    synopsis = [_decorated_synopsis(x) for x in node.arguments if x.show]
    if len(synopsis) > _MAX_SYNOPSIS_ENTRIES:
        parts.append("<options>")
    else:
        parts.extend(synopsis)

    if node.visible_children:
        subcommand = "<subcommand>"
        if node.configuration.default_subcommand is not None:
            subcommand = f"[{subcommand}]"
        parts.append(subcommand)

    return " ".join(parts)


def format_help(command: "Command", command_path: Sequence[str] = (), prog: str | None = None) -> "RenderableType":
    """Usage line, command description, and a table of arguments and subcommands."""
    from rich.console import Group as RichGroup
    from rich.table import Table
    from rich.text import Text

    node = _resolve(command, command_path)
    renderables: list[RenderableType] = [Text(format_usage(command, command_path, prog) + "\n", style="bold")]

    if node.configuration.help:
        renderables.append(Text(node.configuration.help + "\n"))

    arguments = [x for x in node.arguments if x.show]
    if arguments:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan", no_wrap=True)
        table.add_column()
        for descriptor in arguments:
            names = ", ".join(x.synopsis for x in descriptor.names) or f"<{descriptor.display_value_name}>"
            if descriptor.update is UpdateRule.UNARY and descriptor.names:
                names += f" <{descriptor.display_value_name}>"
            description = descriptor.help
            if descriptor.default_description is not None:
                description = f"{description} [default: {descriptor.default_description}]".strip()
            elif not descriptor.is_optional:
                description = f"{description} [required]".strip()
            table.add_row(Text(names), Text(description))
        renderables.append(Text("Arguments:", style="bold"))
        renderables.append(table)

    if node.visible_children:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan", no_wrap=True)
        table.add_column()
        for child in node.visible_children:
            table.add_row(Text(", ".join(child.names)), Text(child.configuration.help))
        renderables.append(Text("\nCommands:", style="bold"))
        renderables.append(table)

    return RichGroup(*renderables)
