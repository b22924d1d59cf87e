"""
Plain-text help pages for a normalized command tree.

Layout
    Usage: git remote add <name> <url>

    Adds a remote named <name> for the repository at <url>

    Options:
      -f, --fetch         Fetch the remote branches
          --tags <mode>   Import tags

    Commands:
      prune     Deletes stale references
      show      Gives some information about the remote

    Run 'git remote add COMMAND --help' for more information on a command.

Container nodes (no implementation) show "Usage: <route> COMMAND". Options
are sorted by long flag (short flag when there is none), commands by name.
"""


def _padder(strings, extra=0):
    """
    Return a function padding a string to the longest of `strings` plus `extra`.
    """
    width = max(map(len, strings), default=0) + extra

    def pad(string):
        return string.ljust(width)

    return pad


def _indent(text, width=2):
    return "\n".join(" " * width + line if line else line for line in text.split("\n"))


def describe_command_usage(command, /):
    """
    "Usage: cmd run <arg1> [arg2]", followed by the description if any.
    """
    description = f"\n\n{command.description}" if command.description else ""

    # Not a command, just a container for subcommands.
    if command.command is None:
        return f"Usage: {command.route} COMMAND{description}"

    usage = " ".join((command.route, *(argument.raw for argument in command.args)))
    return f"Usage: {usage}{description}"


def describe_option_usage(option, /):
    """
    "-o, --option <arg>"
    """
    return str(option.usage)


def _sortable_name(option):
    return option.usage.long or option.usage.short


def _short_column(option):
    usage = option.usage
    if usage.short is None:
        return ""
    return f"-{usage.short}, " if usage.long else f"-{usage.short}"


def _long_column(option):
    usage = option.usage
    flag = f"--{usage.long}" if usage.long else ""
    if usage.argument is None:
        return flag
    name = usage.argument.name
    return flag + " " + (f"<{name}>" if usage.argument.required else f"[{name}]")


def describe_options(options, /):
    # -o,    --option1     description
    #        --option2
    # -1337, --option3
    ordered = sorted(options.values(), key=_sortable_name)

    shorts = [_short_column(option) for option in ordered]
    longs = [_long_column(option) for option in ordered]
    pad_short = _padder(shorts)
    pad_long = _padder(longs, 3)

    return "\n".join(
        (pad_short(short) + pad_long(long) + (option.description or "")).rstrip()
        for option, short, long in zip(ordered, shorts, longs)
    )


def describe_subcommands(subcommands, /):
    names = sorted(subcommands)
    pad = _padder(names, 5)

    return "\n".join(
        (pad(name) + (subcommands[name].description or "")).rstrip()
        for name in names
    )


def generate_help_page(command, /):
    """
    Render the full help page of a command node.

    returns
    - str: usage line, description, then "Options:" and "Commands:" sections
      when the node has any, then a hint on how to get help for subcommands.
    """
    options = describe_options(command.options)
    subcommands = describe_subcommands(command.subcommands)

    page = describe_command_usage(command)
    if options:
        page += f"\n\nOptions:\n{_indent(options)}"
    if subcommands:
        page += f"\n\nCommands:\n{_indent(subcommands)}"

    if command.subcommands:
        page += f"\n\nRun '{command.route} COMMAND --help' for more information on a command."
    else:
        page += "\n"

    return page


__all__ = (
    "describe_command_usage",
    "describe_option_usage",
    "describe_options",
    "describe_subcommands",
    "generate_help_page",
)
