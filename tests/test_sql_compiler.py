"""Tests for SQL text assembly from grid columns"""

import logging

from qbeview.core.sql_compiler import (
    build_from, build_projection, column_reference, compile_query, quote_identifier,
    quote_table_ref, tables_in_use
)
from qbeview.models.qbe_column import QBEColumn, SortOrder
from qbeview.utils.constants import IdentifierQuote


def test_quote_identifier_styles():
    assert quote_identifier("users") == "`users`"
    assert quote_identifier("users", IdentifierQuote.ANSI) == '"users"'
    assert quote_identifier("users", IdentifierQuote.BRACKET) == "[users]"


def test_quote_identifier_doubles_closing_quote():
    assert quote_identifier("we`ird") == "`we``ird`"
    assert quote_identifier("a]b", IdentifierQuote.BRACKET) == "[a]]b]"


def test_qualified_table_segments_are_quoted_separately():
    assert quote_table_ref("shop.users") == "`shop`.`users`"
    assert quote_table_ref("users") == "`users`"


def test_column_reference_with_database():
    column = QBEColumn(table="shop.users", field="id")
    assert column_reference(column) == "`shop`.`users`.`id`"


def test_empty_grid_compiles_to_empty_string():
    assert compile_query([]) == ""


def test_scenario_a_single_table_with_filter_and_sort():
    columns = [
        QBEColumn(table="users", field="id", sort=SortOrder.ASC),
        QBEColumn(table="users", field="name", criteria="LIKE '%a%'"),
    ]
    assert compile_query(columns) == (
        "SELECT `users`.`id`, `users`.`name`\n"
        "FROM `users`\n"
        "WHERE `users`.`name` LIKE '%a%'\n"
        "ORDER BY `users`.`id` ASC"
    )


def test_scenario_b_from_follows_first_seen_order():
    forward = [QBEColumn(table="users", field="id"), QBEColumn(table="orders", field="total")]
    backward = [QBEColumn(table="orders", field="total"), QBEColumn(table="users", field="id")]

    assert compile_query(forward).splitlines()[1] == "FROM `users`, `orders`"
    assert compile_query(backward).splitlines()[1] == "FROM `orders`, `users`"


def test_scenario_c_table_disappears_with_its_last_row():
    users_id = QBEColumn(table="users", field="id")
    orders_total = QBEColumn(table="orders", field="total")

    assert "FROM `users`, `orders`" in compile_query([users_id, orders_total])
    assert compile_query([users_id]).splitlines()[1] == "FROM `users`"


def test_scenario_d_hidden_columns_project_star_but_still_filter():
    columns = [QBEColumn(table="users", field="age", show=False, criteria="> 30")]
    assert compile_query(columns) == (
        "SELECT *\n"
        "FROM `users`\n"
        "WHERE `users`.`age` > 30"
    )


def test_projection_keeps_grid_order_and_applies_aliases():
    columns = [
        QBEColumn(table="users", field="name", alias="Customer"),
        QBEColumn(table="users", field="email", show=False),
        QBEColumn(table="users", field="id"),
        QBEColumn(table="users", field="age", alias="   "),
    ]
    assert build_projection(columns) == (
        "`users`.`name` AS `Customer`, `users`.`id`, `users`.`age`"
    )


def test_duplicate_columns_are_kept():
    columns = [
        QBEColumn(table="users", field="name"),
        QBEColumn(table="users", field="name", alias="n2"),
    ]
    assert build_projection(columns) == "`users`.`name`, `users`.`name` AS `n2`"
    assert build_from(columns) == "`users`"


def test_hidden_rows_still_contribute_tables_and_sorting():
    columns = [
        QBEColumn(table="users", field="name"),
        QBEColumn(table="orders", field="total", show=False, sort=SortOrder.DESC),
    ]
    assert compile_query(columns) == (
        "SELECT `users`.`name`\n"
        "FROM `users`, `orders`\n"
        "ORDER BY `orders`.`total` DESC"
    )


def test_where_fragments_are_and_joined_in_grid_order():
    columns = [
        QBEColumn(table="users", field="age", criteria="1", or_criteria="2"),
        QBEColumn(table="users", field="name", criteria="'bob'"),
        QBEColumn(table="users", field="email"),
    ]
    sql = compile_query(columns)
    assert sql.splitlines()[2] == (
        "WHERE (`users`.`age` = 1 OR `users`.`age` = 2) AND `users`.`name` = 'bob'"
    )


def test_order_by_lists_sorted_rows_in_grid_order():
    columns = [
        QBEColumn(table="users", field="name", sort=SortOrder.DESC),
        QBEColumn(table="users", field="id"),
        QBEColumn(table="users", field="age", sort=SortOrder.ASC),
    ]
    assert compile_query(columns).splitlines()[-1] == (
        "ORDER BY `users`.`name` DESC, `users`.`age` ASC"
    )


def test_no_blank_lines_for_missing_clauses():
    sql = compile_query([QBEColumn(table="users", field="id")])
    assert sql == "SELECT `users`.`id`\nFROM `users`"


def test_compile_is_idempotent():
    columns = [
        QBEColumn(table="shop.users", field="id", alias="uid", sort=SortOrder.ASC),
        QBEColumn(table="orders", field="total", criteria="> 10"),
    ]
    assert compile_query(columns) == compile_query(columns)


def test_ansi_quoting_for_whole_query():
    columns = [QBEColumn(table="public.users", field="id", criteria="5")]
    assert compile_query(columns, IdentifierQuote.ANSI) == (
        'SELECT "public"."users"."id"\n'
        'FROM "public"."users"\n'
        'WHERE "public"."users"."id" = 5'
    )


def test_tables_in_use_is_first_seen():
    columns = [
        QBEColumn(table="b", field="x"),
        QBEColumn(table="a", field="y"),
        QBEColumn(table="b", field="z"),
    ]
    assert tables_in_use(columns) == ["b", "a"]


def test_compile_logs_clause_count_at_debug(caplog):
    columns = [QBEColumn(table="users", field="id", criteria="5")]
    with caplog.at_level(logging.DEBUG, logger="qbeview.core.sql_compiler"):
        compile_query(columns)

    assert "Compiled 1 grid column(s) into 3 clause(s)" in caplog.text
