"""Tests for TemporalQuery with a mocked SQL driver."""

import asyncio
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from unittest.mock import AsyncMock

import pytest

from temporal_mcp.errors import InvalidRangeError
from temporal_mcp.errors import UnmappedEntityError
from temporal_mcp.mapping import MappingRegistry
from temporal_mcp.sql import RowResult
from temporal_mcp.temporal import TableNameResolver
from temporal_mcp.temporal import TemporalMode
from temporal_mcp.temporal import TemporalQuery

UTC = timezone.utc
START = datetime(2020, 1, 1, tzinfo=UTC)
END = datetime(2021, 1, 1, tzinfo=UTC)


@pytest.fixture
def driver():
    mock_driver = AsyncMock()
    mock_driver.execute_query.return_value = [
        RowResult(cells={"EmployeeId": 1, "Name": "Ada"}),
        RowResult(cells={"EmployeeId": 2, "Name": "Grace"}),
    ]
    return mock_driver


@pytest.fixture
def query(driver):
    registry = MappingRegistry()
    registry.register("employee", "Employee", "dbo")
    return TemporalQuery(driver, TableNameResolver(registry.lookup))


class TestTemporalQueryModes:
    def test_all(self, query, driver):
        result = asyncio.run(query.all("employee"))

        driver.execute_query.assert_awaited_once_with("SELECT * FROM [dbo].[Employee] FOR SYSTEM_TIME ALL", [], max_rows=None)
        assert result["mode"] == "all"
        assert result["row_count"] == 2
        assert result["rows"][1] == {"EmployeeId": 2, "Name": "Grace"}

    def test_as_of(self, query, driver):
        instant = datetime(2023, 1, 1, 3, 0, tzinfo=timezone(timedelta(hours=3)))
        result = asyncio.run(query.as_of("employee", instant, limit=10))

        driver.execute_query.assert_awaited_once_with(
            "SELECT * FROM [dbo].[Employee] FOR SYSTEM_TIME AS OF ?",
            [datetime(2023, 1, 1, tzinfo=UTC)],
            max_rows=10,
        )
        assert result["table"] == "[dbo].[Employee]"
        assert result["params"] == ["2023-01-01T00:00:00+00:00"]

    def test_from_to(self, query, driver):
        asyncio.run(query.from_to("employee", START, END))
        sql, params = driver.execute_query.await_args.args
        assert sql.endswith("FOR SYSTEM_TIME FROM ? TO ?")
        assert params == [START, END]

    def test_between(self, query, driver):
        asyncio.run(query.between("employee", START, END))
        sql, params = driver.execute_query.await_args.args
        assert sql.endswith("FOR SYSTEM_TIME BETWEEN ? AND ?")
        assert params == [START, END]

    def test_contained_in(self, query, driver):
        result = asyncio.run(query.contained_in("employee", START, END))
        sql, params = driver.execute_query.await_args.args
        assert sql.endswith("FOR SYSTEM_TIME CONTAINED IN (?, ?)")
        assert params == [START, END]
        assert result["mode"] == "contained_in"

    def test_empty_result(self, query, driver):
        driver.execute_query.return_value = []
        result = asyncio.run(query.all("employee"))
        assert result["row_count"] == 0
        assert result["rows"] == []


class TestTemporalQueryErrors:
    def test_inverted_range_never_executes(self, query, driver):
        with pytest.raises(InvalidRangeError):
            asyncio.run(query.between("employee", END, START))
        driver.execute_query.assert_not_awaited()

    def test_unmapped_never_executes(self, query, driver):
        with pytest.raises(UnmappedEntityError):
            asyncio.run(query.all("department"))
        driver.execute_query.assert_not_awaited()

    def test_store_errors_propagate(self, query, driver):
        driver.execute_query.side_effect = RuntimeError("Invalid object name 'dbo.Employee'")
        with pytest.raises(RuntimeError, match="Invalid object name"):
            asyncio.run(query.all("employee"))


class TestPreview:
    def test_preview_does_not_execute(self, query, driver):
        statement = query.preview("employee", TemporalMode.as_of(START))
        assert statement.sql == "SELECT * FROM [dbo].[Employee] FOR SYSTEM_TIME AS OF ?"
        assert statement.params == (START,)
        driver.execute_query.assert_not_called()
