import pytest

from trackly.task_types.mysql_task_type_repository import MySQLTaskTypeRepository


class FakeCursor:
    rowcount = 1

    def __init__(self, conn):
        self._conn = conn

    def execute(self, sql, params=()):
        self._conn.executed.append((" ".join(sql.split()), params))

    def close(self):
        pass


class FakeConnection:
    def __init__(self):
        self.executed = []
        self.committed = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        pass

    def close(self):
        pass


class FakeFactory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return self.conn


def test_soft_delete_writes_active_flag_to_the_task_types_table():
    conn = FakeConnection()

    MySQLTaskTypeRepository(FakeFactory(conn)).update_fields(4, active=False)

    assert conn.executed == [("UPDATE task_types SET active=%s WHERE task_type_id=%s", (0, 4))]
    assert conn.committed is True


def test_unknown_fields_are_refused_before_connecting():
    conn = FakeConnection()

    with pytest.raises(ValueError):
        MySQLTaskTypeRepository(FakeFactory(conn)).update_fields(4, owner="x")
    assert conn.executed == []
