"""Tests for query execution and connection management against SQLite"""

import pandas as pd
import pytest

from qbeview.core.connection_manager import ConnectionManager
from qbeview.core.query_builder import QueryBuilder
from qbeview.core.query_executor import QueryExecutor, QueryResult
from qbeview.models.qbe_column import SortOrder
from qbeview.ui.dialogs.query_results_dialog import export_result


@pytest.fixture
def executor(conn_manager):
    return QueryExecutor(conn_manager)


def test_execute_generated_query(executor):
    builder = QueryBuilder()
    user_id = builder.add_column("users", "id")
    builder.update_column(user_id.id, sort=SortOrder.ASC)
    name = builder.add_column("users", "name")
    builder.update_column(name.id, criteria="LIKE '%a%'")

    result = executor.execute_sql(builder.sql)

    assert result.columns == ["id", "name"]
    assert result.rows == [[1, "alice"], [3, "carla"]]
    assert result.record_count == 2
    assert result.sql == builder.sql


def test_nulls_become_none(executor):
    result = executor.execute_sql("SELECT `users`.`email` FROM `users` ORDER BY `users`.`id`")
    assert result.rows[1] == [None]


def test_execution_metadata_is_tracked(executor):
    executor.execute_sql("SELECT * FROM `orders`")
    metadata = executor.get_execution_metadata()

    assert metadata['record_count'] == 2
    assert metadata['sql'] == "SELECT * FROM `orders`"
    assert metadata['execution_time_ms'] >= 0


def test_execute_sql_raises_on_bad_sql(executor):
    with pytest.raises(Exception):
        executor.execute_sql("SELECT * FROM `missing`")


def test_run_sql_reports_error_description(executor):
    outcome = executor.run_sql("SELEKT nothing", database="main")

    assert not outcome.ok
    assert outcome.result is None
    assert outcome.error.startswith("SQL Error:")
    assert outcome.sql == "SELEKT nothing"


def test_run_sql_success(executor):
    outcome = executor.run_sql("SELECT `orders`.`total` FROM `orders` WHERE `orders`.`total` > 50")
    assert outcome.ok
    assert outcome.result.rows == [[99.5]]


def test_result_dataframe_round_trip():
    df = pd.DataFrame({'id': [1, 2], 'name': ['a', None]})
    result = QueryResult.from_dataframe(df, "SELECT 1")

    assert result.rows == [[1, 'a'], [2, None]]
    assert list(result.to_dataframe().columns) == ['id', 'name']


def test_export_result_to_excel_and_csv(tmp_path):
    result = QueryResult(columns=['id', 'name'], rows=[[1, 'alice'], [2, 'bob']])

    xlsx = export_result(result, str(tmp_path / "out"))
    assert xlsx.suffix == ".xlsx"
    assert pd.read_excel(xlsx, engine='openpyxl')['name'].tolist() == ['alice', 'bob']

    csv = export_result(result, str(tmp_path / "out.csv"))
    assert pd.read_csv(csv)['id'].tolist() == [1, 2]


def test_sqlite_ignores_database_argument(conn_manager):
    assert conn_manager.get_engine("shop") is conn_manager.get_engine()


def test_connection_test(conn_manager):
    ok, message = conn_manager.test_connection()
    assert ok
    assert message == "Connection successful!"


def test_missing_url_raises():
    with pytest.raises(ValueError):
        ConnectionManager().get_engine()


def test_dialect_name():
    assert ConnectionManager("postgresql://u:p@localhost/app").dialect_name == "postgresql"
    assert ConnectionManager().dialect_name is None
