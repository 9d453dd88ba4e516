"""Unit tests for INSERT, UPDATE and DELETE builders."""

import pytest

from querykit import DeleteQuery, InsertQuery, SelectQuery, UpdateQuery, ValidationError


def test_insert_single_record() -> None:
    sql, bindings = InsertQuery("users").values({"name": "Ann", "email": "ann@example.com"}).render()
    assert sql == "INSERT INTO users (name, email) VALUES (?, ?)"
    assert bindings == ("Ann", "ann@example.com")


def test_insert_batch_is_row_major_in_first_row_order() -> None:
    rows = [{"name": "A", "email": "a@x"}, {"email": "b@x", "name": "B"}]
    sql, bindings = InsertQuery().into("users").values(rows).render()
    assert sql == "INSERT INTO users (name, email) VALUES (?, ?), (?, ?)"
    assert bindings == ("A", "a@x", "B", "b@x")


def test_insert_values_calls_extend_batch() -> None:
    query = InsertQuery("users").values({"name": "A"}).values([{"name": "B"}, {"name": "C"}])
    sql, bindings = query.render()
    assert sql == "INSERT INTO users (name) VALUES (?), (?), (?)"
    assert bindings == ("A", "B", "C")
    assert query.columns == ("name",)


def test_insert_row_missing_column_raises_at_render() -> None:
    query = InsertQuery("users").values([{"name": "A", "email": "a@x"}, {"name": "B"}])
    with pytest.raises(ValidationError, match="missing column"):
        query.render()


def test_insert_row_with_extra_column_raises_at_render() -> None:
    query = InsertQuery("users").values([{"name": "A"}, {"name": "B", "age": 3}])
    with pytest.raises(ValidationError, match="unexpected column"):
        query.render()


def test_insert_without_rows_raises() -> None:
    with pytest.raises(ValidationError):
        InsertQuery("users").render()


def test_insert_without_table_raises() -> None:
    with pytest.raises(ValidationError):
        InsertQuery().values({"name": "A"}).render()


@pytest.mark.parametrize("rows", [{}, [{}], ["name"], [{"": 1}]])
def test_insert_rejects_malformed_rows(rows: object) -> None:
    with pytest.raises(ValidationError):
        InsertQuery("users").values(rows)  # type: ignore[arg-type]


def test_update_set_record() -> None:
    sql, bindings = UpdateQuery("users").set({"status": "inactive", "age": 40}).where("id", 7).render()
    assert sql == "UPDATE users SET status = ?, age = ? WHERE id = ?"
    assert bindings == ("inactive", 40, 7)


def test_update_set_keyword_form() -> None:
    sql, bindings = UpdateQuery().table("users").set(status="x").render()
    assert sql == "UPDATE users SET status = ?"
    assert bindings == ("x",)


def test_update_set_calls_merge_in_place() -> None:
    query = UpdateQuery("users").set({"status": "a", "age": 1}).set({"country": "US"}).set(status="b")
    sql, bindings = query.render()
    assert sql == "UPDATE users SET status = ?, age = ?, country = ?"
    assert bindings == ("b", 1, "US")
    assert query.assignments == {"status": "b", "age": 1, "country": "US"}


def test_update_without_where_is_unconditional() -> None:
    sql, bindings = UpdateQuery("users").set({"status": "active"}).render()
    assert sql == "UPDATE users SET status = ?"
    assert "WHERE" not in sql
    assert bindings == ("active",)


def test_update_where_helpers() -> None:
    query = (
        UpdateQuery("users")
        .set({"status": "archived"})
        .where("last_login", "<", "2020-01-01")
        .where_in("country", ["US", "CA"])
        .or_where_raw("age > ?", 99)
    )
    sql, bindings = query.render()
    assert sql == "UPDATE users SET status = ? WHERE last_login < ? AND country IN (?, ?) OR age > ?"
    assert bindings == ("archived", "2020-01-01", "US", "CA", 99)


def test_update_set_value_may_be_subquery() -> None:
    newest = SelectQuery("posts").max("id").where("user_id", 3)
    sql, bindings = UpdateQuery("users").set({"last_post_id": newest}).where("id", 3).render()
    assert " ".join(sql.split()) == (
        "UPDATE users SET last_post_id = (SELECT MAX(id) FROM posts WHERE user_id = ?) WHERE id = ?"
    )
    assert bindings == (3, 3)


def test_update_without_set_raises() -> None:
    with pytest.raises(ValidationError):
        UpdateQuery("users").where("id", 1).render()


def test_update_empty_set_call_raises() -> None:
    with pytest.raises(ValidationError):
        UpdateQuery("users").set({})


def test_update_without_table_raises() -> None:
    with pytest.raises(ValidationError):
        UpdateQuery().set({"a": 1}).render()


def test_delete_with_where() -> None:
    sql, bindings = DeleteQuery().from_("users").where("status", "deleted").render()
    assert sql == "DELETE FROM users WHERE status = ?"
    assert bindings == ("deleted",)


def test_delete_without_where_is_unconditional() -> None:
    sql, bindings = DeleteQuery("users").render()
    assert sql == "DELETE FROM users"
    assert bindings == ()


def test_delete_with_between_and_null() -> None:
    sql, bindings = DeleteQuery("users").where_between("age", 1, 5).where_null("email").render()
    assert sql == "DELETE FROM users WHERE age BETWEEN ? AND ? AND email IS NULL"
    assert bindings == (1, 5)


def test_delete_without_table_raises() -> None:
    with pytest.raises(ValidationError, match="DELETE requires a table"):
        DeleteQuery().render()


@pytest.mark.parametrize("rows", [None, 42, "name", b"name"])
def test_insert_values_rejects_non_iterables_and_strings(rows: object) -> None:
    with pytest.raises(ValidationError):
        InsertQuery("users").values(rows)  # type: ignore[arg-type]


def test_insert_value_may_be_subquery() -> None:
    owner = SelectQuery("users").select("id").where("email", "ann@example.com")
    sql, bindings = InsertQuery("posts").values({"user_id": owner, "title": "Hello"}).render()
    assert sql.startswith("INSERT INTO posts (user_id, title) VALUES (")
    assert "(SELECT id FROM users WHERE email = ?)" in sql
    assert sql.count("?") == 2
    assert bindings == ("ann@example.com", "Hello")
