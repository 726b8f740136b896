"""Schema checks for the declarative models."""

import pytest
from sqlalchemy.dialects import mysql, sqlite
from sqlalchemy.schema import CreateTable

from models.project import Project
from models.skill import Skill
from models.user import User


def ddl(table, dialect) -> str:
    return str(CreateTable(table).compile(dialect=dialect))


class TestTimestampPrecision:
    @pytest.mark.parametrize("model", [Project, Skill, User])
    def test_mysql_keeps_microseconds(self, model):
        sql = ddl(model.__table__, mysql.dialect())
        assert "created_at DATETIME(6) NOT NULL" in sql
        assert "updated_at DATETIME(6) NOT NULL" in sql

    def test_sqlite_uses_plain_datetime(self):
        sql = ddl(Project.__table__, sqlite.dialect())
        assert "created_at DATETIME NOT NULL" in sql

