from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def smart_transaction(session: Session) -> Iterator[Session]:
    """
    Run a block atomically on `session`.

    With no transaction open, a real one is started and committed on a clean
    exit. If the caller already holds a transaction (a test fixture, a larger
    request-level unit), the block gets a SAVEPOINT instead, so a failure
    only unwinds this block's writes. Either way an exception rolls back and
    propagates.

        with smart_transaction(db):
            ... DB work ...
    """
    if session.in_transaction():
        cm = session.begin_nested()
    else:
        cm = session.begin()
    with cm:
        yield session
