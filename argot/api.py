"""
Programmatic API over a command tree.

create_api(tree) exposes every command node as a Python callable, so a CLI
can be driven from code without building argv:

    git = create_api(tree)
    git.commit("README.md", message="initial", amend=True)
    git.remote.add("origin", "https://example.com/repo.git")
    git["cherry-pick"]("a1b2c3")

Keyword arguments are named after the flags the command declares (a long
flag with "-" replaced by "_", or a short flag), never after internal option
names, so callers only rely on the contract the usage strings already state.
Values are passed through as-is; no value parser runs.
"""


def _index_flags(options):
    """
    Map keyword names (flags) to option names.
    """
    index = {}

    for name, option in options.items():
        if option.usage.long:
            index[option.usage.long.replace("-", "_")] = name
        if option.usage.short:
            index[option.usage.short] = name

    return index


class CommandApi:
    """
    Callable proxy for one node of a command tree.

    Calling it runs the node's implementation as command(options, *args);
    subcommands are reachable as attributes or items. Every public attribute
    name is free for subcommands, so a subcommand called "tree" or "route"
    is reached as api.tree just like any other.
    """

    def __init__(self, tree, /):
        self._tree = tree
        self._flags = _index_flags(tree.options)

    def __call__(self, *args, **flags):
        if self._tree.command is None:
            raise TypeError(f"{self._tree.route!r} isn't a command (it only groups subcommands)")

        options = {}
        for flag, value in flags.items():
            try:
                options[self._flags[flag]] = value
            except KeyError:
                raise TypeError(f"{self._tree.route!r} got an unexpected flag {flag!r}") from None

        return self._tree.command(options, *args)

    def __getitem__(self, name, /):
        try:
            return type(self)(self._tree.subcommands[name])
        except KeyError:
            raise KeyError(name) from None

    def __getattr__(self, name, /):
        if name.startswith("_"):
            raise AttributeError(name)

        for subcommand in (name, name.replace("_", "-")):
            if subcommand in self._tree.subcommands:
                return self[subcommand]

        raise AttributeError(f"{self._tree.route!r} has no subcommand {name!r}")

    def __contains__(self, name, /):
        return name in self._tree.subcommands

    def __iter__(self):
        return iter(self._tree.subcommands)

    def __dir__(self):
        return [*super().__dir__(), *(name.replace("-", "_") for name in self._tree.subcommands)]

    def __repr__(self):
        return f"command-api(route={self._tree.route!r})"


def create_api(tree, /):
    """
    Return a CommandApi for the root of a normalized command tree.
    """
    return CommandApi(tree)


__all__ = (
    "CommandApi",
    "create_api",
)
