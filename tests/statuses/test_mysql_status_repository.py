import pytest

from trackly.statuses.mysql_status_repository import MySQLStatusRepository


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn

    def execute(self, sql, params=()):
        if self._conn.fail_on_statement == len(self._conn.executed):
            raise RuntimeError("lost connection")
        self._conn.executed.append((sql, params))

    def close(self):
        pass


class FakeConnection:
    def __init__(self, fail_on_statement=None):
        self.fail_on_statement = fail_on_statement
        self.executed = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn):
        self.conn = conn
        self.connects = 0

    def connect(self):
        self.connects += 1
        return self.conn


def test_batch_update_runs_in_one_transaction():
    conn = FakeConnection()
    factory = FakeFactory(conn)

    MySQLStatusRepository(factory).batch_update_order([(2, 0), (1, 1)])

    assert factory.connects == 1
    assert [params for _, params in conn.executed] == [(0, 2), (1, 1)]
    assert conn.committed is True
    assert conn.closed is True


def test_batch_update_rolls_back_when_a_statement_fails():
    conn = FakeConnection(fail_on_statement=1)

    with pytest.raises(RuntimeError):
        MySQLStatusRepository(FakeFactory(conn)).batch_update_order([(2, 0), (1, 1)])

    assert conn.committed is False
    assert conn.rolled_back is True
    assert conn.closed is True


def test_empty_batch_does_not_connect():
    factory = FakeFactory(FakeConnection())

    MySQLStatusRepository(factory).batch_update_order([])

    assert factory.connects == 0
