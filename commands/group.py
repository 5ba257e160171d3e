"""Click group for the Elgato Light CLI.

Lists commands under coloured section headings and suggests the closest
command names when an unknown command is typed.
"""

import click

from models.utils import find_similar_strings

# Help sections, in display order. Commands not listed go under 'Other'.
COMMAND_SECTIONS = (
    ('Light control', ('on', 'off', 'brightness', 'temperature', 'status')),
    ('Discovery and cache', ('discover', 'clear-cache', 'cache-info')),
)


class ColouredGroup(click.Group):
    """Group with sectioned, coloured command help and typo suggestions."""

    def _visible_commands(self, ctx) -> dict[str, click.Command]:
        commands = {}
        for name in self.list_commands(ctx):
            cmd = self.get_command(ctx, name)
            if cmd is not None and not cmd.hidden:
                commands[name] = cmd
        return commands

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            cmd_name = args[0] if args else ''
            if not cmd_name or self.get_command(ctx, cmd_name) is not None:
                raise
            suggestions = find_similar_strings(cmd_name, list(self._visible_commands(ctx)), limit=3)
            if not suggestions:
                raise
            hint = click.style("Did you mean one of these?", fg='yellow')
            lines = "\n".join(click.style(f"  • {name}", fg='green') for name in suggestions)
            raise click.UsageError(f"No such command '{cmd_name}'.\n\n{hint}\n{lines}", ctx) from e

    def format_commands(self, ctx, formatter):
        commands = self._visible_commands(ctx)
        if not commands:
            return

        sections = []
        for title, names in COMMAND_SECTIONS:
            rows = [(name, commands.pop(name)) for name in names if name in commands]
            if rows:
                sections.append((title, rows))
        if commands:
            sections.append(('Other', list(commands.items())))

        width = formatter.width - 6 - max(len(name) for _, rows in sections for name, _ in rows)
        for title, rows in sections:
            with formatter.section(click.style(title, fg='yellow', bold=True)):
                formatter.write_dl([(name, cmd.get_short_help_str(limit=width)) for name, cmd in rows])
