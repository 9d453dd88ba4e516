"""Integration tests running rendered statements against in-memory sqlite3."""

from dataclasses import dataclass
from typing import Optional

import pytest

from querykit import Connection

pytestmark = pytest.mark.integration


@dataclass
class User:
    id: int
    name: str
    email: str
    age: Optional[int] = None
    country: Optional[str] = None
    status: Optional[str] = None
    deleted_at: Optional[str] = None


@pytest.fixture
def seeded(db: Connection) -> Connection:
    db.execute_insert(
        db.insert("users").values(
            [
                {"name": "Ann", "email": "ann@example.com", "age": 17, "country": "US"},
                {"name": "Bob", "email": "bob@example.com", "age": 34, "country": "US"},
                {"name": "Cid", "email": "cid@example.com", "age": 70, "country": "CA"},
                {"name": "Dee", "email": "dee@example.com", "age": 45, "country": "MX"},
            ]
        )
    )
    db.execute_insert(
        db.insert("posts").values(
            [
                {"user_id": 2, "title": "Hello", "views": 150},
                {"user_id": 2, "title": "Again", "views": 20},
                {"user_id": 3, "title": "Hi", "views": 5},
            ]
        )
    )
    return db


def test_insert_returns_last_insert_id(db: Connection) -> None:
    first_id = db.execute_insert(db.insert("users").values({"name": "Eve", "email": "eve@example.com"}))
    second_id = db.execute_insert(db.insert("users").values({"name": "Fay", "email": "fay@example.com"}))
    assert second_id == first_id + 1


def test_select_with_where_and_order(seeded: Connection) -> None:
    rows = seeded.get(seeded.query("users").select("name").where("age", ">", 18).order_by("name"))
    assert [row["name"] for row in rows] == ["Bob", "Cid", "Dee"]


def test_where_in_and_not_in(seeded: Connection) -> None:
    us_or_ca = seeded.get(seeded.query("users").select("name").where_in("country", ["US", "CA"]).order_by("name"))
    assert [row["name"] for row in us_or_ca] == ["Ann", "Bob", "Cid"]
    others = seeded.get(seeded.query("users").select("name").where_not_in("country", ["US", "CA"]))
    assert [row["name"] for row in others] == ["Dee"]


def test_where_between_and_null(seeded: Connection) -> None:
    rows = seeded.get(seeded.query("users").select("name").where_between("age", 30, 50).where_null("deleted_at"))
    assert sorted(row["name"] for row in rows) == ["Bob", "Dee"]
    assert seeded.get(seeded.query("users").where_not_null("deleted_at")) == []


def test_join_and_aggregate(seeded: Connection) -> None:
    query = (
        seeded.query("users u")
        .select("u.name")
        .sum("p.views", alias="total_views")
        .join("posts p", "u.id", "=", "p.user_id")
        .group_by("u.name")
        .having("SUM(p.views)", ">", 100)
    )
    assert seeded.get(query) == [{"name": "Bob", "total_views": 170}]


def test_left_join_keeps_unmatched_rows(seeded: Connection) -> None:
    query = (
        seeded.query("users")
        .select("users.name", "posts.title")
        .left_join("posts", "users.id", "=", "posts.user_id")
        .where_null("posts.id")
        .order_by("users.name")
    )
    assert [row["name"] for row in seeded.get(query)] == ["Ann", "Dee"]


def test_where_exists_subquery(seeded: Connection) -> None:
    popular = seeded.query("posts").select("id").where_raw("posts.user_id = users.id").where("views", ">", 100)
    rows = seeded.get(seeded.query("users").select("name").where("country", "US").where_exists(popular))
    assert rows == [{"name": "Bob"}]


def test_where_in_subquery(seeded: Connection) -> None:
    authors = seeded.query("posts").select("user_id").where("views", "<", 10)
    assert seeded.get(seeded.query("users").select("name").where_in("id", authors)) == [{"name": "Cid"}]


def test_union_all(seeded: Connection) -> None:
    minors = seeded.query("users").select("name").where("age", "<", 18)
    seniors = seeded.query("users").select("name").where("age", ">", 65)
    rows = seeded.get(minors.union_all(seniors))
    assert sorted(row["name"] for row in rows) == ["Ann", "Cid"]


def test_case_expression(seeded: Connection) -> None:
    age_group = (
        seeded.expression("case")
        .when("age", "<", 18)
        .then("Minor")
        .when("age", "<", 65)
        .then("Adult")
        .else_("Senior")
        .as_("age_group")
    )
    rows = seeded.get(seeded.query("users").select("name", age_group).order_by("name"))
    assert [(row["name"], row["age_group"]) for row in rows] == [
        ("Ann", "Minor"),
        ("Bob", "Adult"),
        ("Cid", "Senior"),
        ("Dee", "Adult"),
    ]


def test_pagination(seeded: Connection) -> None:
    page = seeded.get(seeded.query("users").select("name").order_by("id").page(2, 2))
    assert [row["name"] for row in page] == ["Cid", "Dee"]


def test_first_and_scalar(seeded: Connection) -> None:
    query = seeded.query("users").where("country", "US").order_by("age", "DESC")
    user = seeded.first(query, schema_type=User)
    assert isinstance(user, User)
    assert user.name == "Bob"
    assert query.to_sql().endswith("ORDER BY age DESC")
    assert seeded.execute_scalar(seeded.query("users").count(alias="n")) == 4
    assert seeded.execute_scalar(seeded.query("users").avg("age").where("country", "US")) == pytest.approx(25.5)


def test_update_and_delete_affected_rows(seeded: Connection) -> None:
    updated = seeded.execute_update(seeded.update("users").set({"status": "adult"}).where("age", ">=", 18))
    assert updated == 3
    assert seeded.execute_scalar(seeded.query("users").count().where("status", "adult")) == 3
    deleted = seeded.execute_delete(seeded.delete("posts").where("views", "<", 50))
    assert deleted == 2


def test_unconditional_update_touches_every_row(seeded: Connection) -> None:
    assert seeded.execute_update(seeded.update("users").set(status="reset")) == 4


def test_transaction_commit(db: Connection) -> None:
    with db.transaction():
        db.execute_insert(db.insert("users").values({"name": "Tx", "email": "tx@example.com"}))
    assert db.execute_scalar(db.query("users").count()) == 1


def test_transaction_rollback(db: Connection) -> None:
    class Abort(Exception):
        pass

    with pytest.raises(Abort), db.transaction():
        db.execute_insert(db.insert("users").values({"name": "Tx", "email": "tx@example.com"}))
        raise Abort
    assert db.execute_scalar(db.query("users").count()) == 0


def test_raw_statements(db: Connection) -> None:
    db.raw("INSERT INTO users (name, email, age) VALUES (?, ?, ?)", ["Raw", "raw@example.com", 50])
    rows = db.raw("SELECT name, age FROM users WHERE age = ?", 50)
    assert rows == [{"name": "Raw", "age": 50}]


def test_union_with_ordered_limited_last_branch(seeded: Connection) -> None:
    canada = seeded.query("users").select("name").where("country", "CA")
    us = seeded.query("users").select("name").where("country", "US").order_by("name").limit(2)
    rows = seeded.get(canada.union(us))
    assert [row["name"] for row in rows] == ["Ann", "Bob"]


def test_first_and_scalar_on_union(seeded: Connection) -> None:
    mexico = seeded.query("users").select("name").where("country", "MX")
    nobody = seeded.query("users").select("name").where("name", "Zed")
    assert seeded.first(mexico.union(nobody)) == {"name": "Dee"}
    assert seeded.execute_scalar(mexico) == "Dee"
    assert seeded.first(nobody.union_all(seeded.query("users").select("name").where("id", 0))) is None


def test_insert_with_subquery_value(seeded: Connection) -> None:
    owner = seeded.query("users").select("id").where("email", "dee@example.com")
    post_id = seeded.execute_insert(seeded.insert("posts").values({"user_id": owner, "title": "Hola", "views": 1}))
    assert seeded.first(seeded.query("posts").select("user_id").where("id", post_id)) == {"user_id": 4}
