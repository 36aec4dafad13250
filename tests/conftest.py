from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator

import pytest
from sqlalchemy import Engine, event
from sqlmodel import Session, SQLModel, select

from classroll.db import build_engine, create_schema


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'classroll.sqlite3'}"


@pytest.fixture()
def engine(database_url: str) -> Iterator[Engine]:
    engine = build_engine(database_url)
    create_schema(engine)
    yield engine
    engine.dispose()


@dataclass
class ConnectionCounter:
    opened: int = 0
    closed: int = 0


@pytest.fixture()
def connections(engine: Engine) -> ConnectionCounter:
    """Count DBAPI connections opened/closed after the schema was created."""
    counter = ConnectionCounter()

    def _on_connect(*_args) -> None:
        counter.opened += 1

    def _on_close(*_args) -> None:
        counter.closed += 1

    event.listen(engine, "connect", _on_connect)
    event.listen(engine.pool, "close", _on_close)
    return counter


def days_ago(days: int) -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=days)


def seed(engine: Engine, *rows: SQLModel) -> None:
    with Session(engine) as session:
        for row in rows:
            session.add(row)
            session.commit()


def all_rows(engine: Engine, model: type[SQLModel]) -> list:
    with Session(engine) as session:
        return list(session.exec(select(model)).all())


def scripted(*answers: str):
    """Stand-in for ``input``; raises EOFError once the script runs out."""
    remaining = iter(answers)
    prompts: list[str] = []

    def _ask(prompt: str) -> str:
        prompts.append(prompt)
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None

    _ask.prompts = prompts  # type: ignore[attr-defined]
    return _ask
