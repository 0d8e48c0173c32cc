"""
Programmatic Alembic migration runner.

Runs migrations without an alembic.ini by pointing the script location at this
package's migrations directory.

Usage examples:
    python -m member_search.db.run_migrations upgrade head
    python -m member_search.db.run_migrations downgrade -1
    python -m member_search.db.run_migrations current
"""

import sys
from pathlib import Path
from typing import Callable, Dict, List

from alembic import command
from alembic.config import Config

from member_search.db.config import get_settings

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

_DEFAULT_ARGS: Dict[str, List[str]] = {
    "upgrade": ["head"],
    "downgrade": ["-1"],
    "stamp": ["head"],
}

_COMMANDS: Dict[str, Callable[..., object]] = {
    "upgrade": command.upgrade,
    "downgrade": command.downgrade,
    "stamp": command.stamp,
    "history": command.history,
    "current": command.current,
    "heads": command.heads,
    "show": command.show,
}


# PUBLIC_INTERFACE
def build_config() -> Config:
    """Return an Alembic Config bound to this package's migrations and the configured DB."""
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    # Offline mode reads this; env.py builds its own async engine for online mode.
    cfg.set_main_option("sqlalchemy.url", get_settings().sync_database_url)
    return cfg


# PUBLIC_INTERFACE
def main(argv: List[str] | None = None) -> None:
    """Run an Alembic command with programmatic configuration."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("No Alembic arguments provided. Example: upgrade head")
        sys.exit(1)

    cmd, other = args[0], args[1:]
    func = _COMMANDS.get(cmd)
    if func is None:
        print(f"Unsupported Alembic command: {cmd}")
        sys.exit(2)
    if cmd == "show" and not other:
        print("Usage: show <revision>")
        sys.exit(2)

    func(build_config(), *(other or _DEFAULT_ARGS.get(cmd, [])))


if __name__ == "__main__":
    main()
