from rich.pretty import pprint

from argot import *

__prog__ = "git"


def commit(options, *paths):
    return "Committed" if options.get("message") else "Opening editor..."


def diff(options, *paths):
    return f"diffing {', '.join(paths) or 'everything'}"


cli = create_cli("git", cli={
    "description": "Distributed version control system",
    "subcommands": {
        "commit": {
            "description": "Record changes to the repository",
            "command": commit,
            "args": "[paths...]",
            "options": {
                "message": "-m, --message <commit-message>",
            },
        },
        "diff": {
            "description": "Show changes between commits",
            "command": diff,
            "args": "[paths...]",
            "options": {
                "color": {"usage": "--color=[bool]", "parse_value": as_boolean},
            },
        },
    },
}, version="0.0.0", fancy=True)


if __name__ == '__main__':
    pprint(cli.execute().output)
