"""Interactive reset utility for the class-roll database.

Usage:
    python scripts/reset_db.py      (or: classroll-reset)

Asks whether to delete every row or only rows older than 90 days, then
offers a menu of table groups to reset:

    1. Task and User (one transaction, Tasks first)
    2. classRoll
    3. Origin, then POST {"dbUrl": ...} to RESET_URL
    4. Exit

⚠️  Every destructive option asks for confirmation before touching the DB.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable

from sqlalchemy import Engine
from sqlalchemy.exc import ArgumentError

from classroll.config import (
    DATABASE_URL_VAR,
    RESET_URL_VAR,
    SQL_ECHO,
    ConfigError,
    configure_logging,
    require_env,
)
from classroll.db import (
    RETENTION_DAYS,
    Scope,
    build_engine,
    delete_class_roll,
    delete_origins,
    delete_tasks_and_users,
)
from classroll.notify import NotificationError, notify_reset

logger = logging.getLogger(__name__)

SCOPE_CHOICES = {"a": Scope.ALL, "b": Scope.STALE}
SCOPE_EXIT = "c"

MENU_EXIT = "4"


def _error(message: str) -> None:
    print(f"❌ {message}", file=sys.stderr)


class ResetTool:
    """One interactive reset session.

    The chosen scope is passed explicitly from ``choose_scope`` to
    ``run_menu`` and on to each operation; the tool itself holds no
    per-session state beyond its collaborators.
    """

    def __init__(
        self,
        engine: Engine,
        reset_url: str,
        database_url: str,
        *,
        ask: Callable[[str], str] | None = None,
        notifier: Callable[..., object] | None = None,
    ) -> None:
        self.engine = engine
        self.reset_url = reset_url
        self.database_url = database_url
        self._ask = ask or input
        self._notifier = notifier or notify_reset

    # ─────────────────────────────────────────────
    # Prompts
    # ─────────────────────────────────────────────

    def ask(self, question: str) -> str | None:
        """Read one answer. ``None`` means the operator closed stdin or hit Ctrl-C."""
        try:
            return self._ask(question).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return None

    def confirm(self, message: str) -> bool:
        answer = self.ask(f"{message} (y/N): ")
        return answer is not None and answer.lower() in ("y", "yes")

    def choose_scope(self) -> Scope | None:
        """Ask for the deletion scope. Returns ``None`` when the operator exits."""
        while True:
            print("\n Database Reset")
            print("-------------------------")
            print("a. Delete all entries.")
            print(f"b. Delete only entries older than {RETENTION_DAYS} days.")
            print("c. Exit.")
            choice = self.ask("Enter your choice (a,b,c): ")
            if choice is None:
                return None
            choice = choice.lower()
            if choice == SCOPE_EXIT:
                return None
            if choice in SCOPE_CHOICES:
                return SCOPE_CHOICES[choice]
            print("Try again.")

    # ─────────────────────────────────────────────
    # Menu
    # ─────────────────────────────────────────────

    def run(self) -> None:
        scope = self.choose_scope()
        if scope is None:
            print("Exiting.")
            return
        self.run_menu(scope)

    def run_menu(self, scope: Scope) -> None:
        operations: dict[str, Callable[[Scope], bool]] = {
            "1": self.reset_tasks_and_users,
            "2": self.reset_class_roll,
            "3": self.reset_origins,
        }

        while True:
            print("\n🧰 Database Reset Utility")
            print("-------------------------")
            print("1. Delete entries in Task and User tables")
            print("2. Delete entries in classRoll table")
            print("3. Delete entries in Origin table, then POST to RESET_URL")
            print("4. Exit")
            print("-------------------------")

            choice = self.ask("Enter your choice (1–4): ")
            if choice is None or choice == MENU_EXIT:
                print("Exiting.")
                return

            operation = operations.get(choice)
            if operation is None:
                _error("Invalid choice. Please enter a number from 1–4.")
                continue

            try:
                operation(scope)
            except Exception as exc:
                logger.debug("Reset operation %s failed", choice, exc_info=True)
                _error(f"Error: {exc}")

    # ─────────────────────────────────────────────
    # Operations
    # ─────────────────────────────────────────────

    def reset_tasks_and_users(self, scope: Scope) -> bool:
        if not self.confirm(
            f"⚠️  This will DELETE {scope.describe()} from Task and User tables. Proceed?"
        ):
            return False

        with self.engine.connect() as conn:
            trans = conn.begin()
            try:
                delete_tasks_and_users(conn, scope)
                trans.commit()
            except Exception:
                try:
                    trans.rollback()
                except Exception:
                    logger.debug("Rollback failed", exc_info=True)
                raise

        print("✅ Task and User tables cleaned up.")
        return True

    def reset_class_roll(self, scope: Scope) -> bool:
        if not self.confirm(
            f"⚠️  This will DELETE {scope.describe()} from classRoll. Proceed?"
        ):
            return False

        with self.engine.begin() as conn:
            delete_class_roll(conn, scope)

        print("✅ classRoll table cleaned up.")
        return True

    def reset_origins(self, scope: Scope) -> bool:
        if not self.confirm(
            f"⚠️  This will DELETE {scope.describe()} from Origin AND notify the front end. Proceed?"
        ):
            return False

        with self.engine.begin() as conn:
            delete_origins(conn, scope)
        print("✅ Origin table cleaned up.")

        try:
            self._notifier(self.reset_url, self.database_url)
        except NotificationError as exc:
            _error(f"Failed to POST to RESET_URL: {exc}")
        else:
            print(f"✅ Notified front end at {self.reset_url}")
        return True


def main() -> int:
    configure_logging()

    try:
        database_url, reset_url = require_env(DATABASE_URL_VAR, RESET_URL_VAR)
        engine = build_engine(database_url, echo=SQL_ECHO)
    except (ConfigError, ArgumentError) as exc:
        _error(f"Error: {exc}")
        return 1

    try:
        ResetTool(engine, reset_url, database_url).run()
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
