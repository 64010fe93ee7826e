"""Unit tests for SELECT statements built with Builder."""

from __future__ import annotations

import pytest

from normsql import Builder, RenderedSQL, norm
from normsql.errors import HavingWithoutGroupByError, UnnamedSubqueryError


def test_empty_builder_is_trivially_true():
    r = norm().render()
    assert r.sql == "select 1 from dual"
    assert r.binds == []


def test_str_uses_sql():
    assert str(norm()) == "select 1 from dual"


def test_norm_returns_builder():
    assert isinstance(norm(), Builder)


def test_render_unpacks_like_a_pair():
    sql, binds = norm().where(["a = ?", 1]).render()
    assert sql == "select 1 from dual where a = ?"
    assert binds == [1]


# ---------------------------------------------------------------------------
# SELECT
# ---------------------------------------------------------------------------


class TestSelect:
    def test_one_field(self):
        assert norm().select("foo").sql() == "select foo from dual"

    def test_multiple_fields(self):
        assert norm().select("foo", "bar", "baz").sql() == "select foo, bar, baz from dual"

    def test_multiple_calls_accumulate(self):
        q = norm().select("foo", "bar").select("baz")
        assert q.sql() == "select foo, bar, baz from dual"

    def test_function_reference(self):
        q = norm().select("foo", "bar", lambda: "baz")
        assert q.sql() == "select foo, bar, baz from dual"

    def test_builder_fragment(self):
        q = norm().select("foo", "bar", norm())
        assert q.sql() == "select foo, bar, (select 1 from dual) from dual"

    def test_builder_in_template(self):
        q = norm().select("foo", "bar", ["(?) tmp", norm()])
        assert q.sql() == "select foo, bar, (select 1 from dual) tmp from dual"

    def test_remembers_binds(self):
        q = norm().select("foo", "bar", ["?", "so happy"])
        assert q.binds() == ["so happy"]

    def test_binds_are_idempotent(self):
        q = norm().select("foo", "bar", ["?", "so happy"])
        assert q.binds() == ["so happy"]
        assert q.binds() == ["so happy"]

    def test_binds_in_order(self):
        q = norm().select("foo", ["?", "bar"], ["?", "so happy"])
        assert q.binds() == ["bar", "so happy"]

    def test_no_arguments_is_noop(self):
        q = norm().select()
        assert q.sql() == "select 1 from dual"

    def test_select_many(self):
        assert norm().select_many(["a", "b"]).sql() == norm().select("a", "b").sql()


# ---------------------------------------------------------------------------
# FROM
# ---------------------------------------------------------------------------


class TestFrom:
    def test_table(self):
        assert norm().from_("rawr").sql() == "select 1 from rawr"

    def test_multiple_tables_in_one_string(self):
        assert norm().from_("rawr, omg").sql() == "select 1 from rawr, omg"

    def test_multiple_calls(self):
        assert norm().from_("rawr, omg").from_("wow").sql() == "select 1 from rawr, omg, wow"

    def test_unnamed_subquery_raises(self):
        with pytest.raises(UnnamedSubqueryError) as exc_info:
            norm().from_("foo", "bar", norm())
        assert "select 1 from dual" in str(exc_info.value)
        assert exc_info.value.clause == "from"

    def test_aliased_subquery(self):
        sub = norm().select("id").from_("users").where(["id > ?", 3])
        q = norm().select("u.id").from_(["(?) u", sub])
        assert q.sql() == "select u.id from (select id from users where id > ?) u"
        assert q.binds() == [3]

    def test_binds_in_order(self):
        q = norm().from_("foo", ["?", "bar"], ["?", "so happy"])
        assert q.binds() == ["bar", "so happy"]


# ---------------------------------------------------------------------------
# WHERE
# ---------------------------------------------------------------------------


class TestWhere:
    def test_single_clause(self):
        assert norm().where("a.id = b.id").sql() == "select 1 from dual where a.id = b.id"

    def test_clauses_joined_with_and(self):
        q = norm().where("a.id = 0", "a.id = b.id")
        assert q.sql() == "select 1 from dual where a.id = 0 and a.id = b.id"

    def test_multiple_calls(self):
        q = norm().where("a.id = 0", "a.id = b.id").where("exists (select 1 from dual)")
        assert q.sql() == (
            "select 1 from dual where a.id = 0 and a.id = b.id and exists (select 1 from dual)"
        )

    def test_function_arguments(self):
        q = norm().where("foo", "bar", lambda: "baz")
        assert q.sql() == "select 1 from dual where foo and bar and baz"

    def test_builder_bind(self):
        q = norm().where(["t.id < (?)", norm()])
        assert q.sql() == "select 1 from dual where t.id < (select 1 from dual)"

    def test_binds_in_order_across_calls(self):
        q = norm().where(["t.id < ?", 5], ["t.id > ?", 1]).where(["b.time > ?", "2015-03-01"])
        assert q.binds() == [5, 1, "2015-03-01"]

    def test_nested_binds_in_order(self):
        inner = norm().where(["t.id < ?", 5], ["t.id > ?", 1]).where(["b.time > ?", "2015-03-01"])
        outer = norm().where(
            ["a.omg = ?", 7],
            ["a.zomg = ?", 8],
            ["a.id < (?)", inner],
            ["a.type = ?", "lion"],
            ["a.kingdom = ?", "animalia"],
        )
        assert outer.binds() == [7, 8, 5, 1, "2015-03-01", "lion", "animalia"]
        assert outer.sql() == (
            "select 1 from dual where a.omg = ? and a.zomg = ? and a.id < "
            "(select 1 from dual where t.id < ? and t.id > ? and b.time > ?) "
            "and a.type = ? and a.kingdom = ?"
        )

    def test_array_values_then_scalars(self):
        q = norm().where(["id in (?)", [1, 2, 3]], ["name = ?", "x"])
        assert q.sql() == "select 1 from dual where id in (?,?,?) and name = ?"
        assert q.binds() == [1, 2, 3, "x"]

    def test_callable_contributes_binds_in_position(self):
        def flagged(binds):
            binds.append(9)
            return "flag = ?"

        q = norm().where(["a = ?", 1], flagged, ["b = ?", 2])
        assert q.binds() == [1, 9, 2]

    def test_bind_count_matches_placeholders(self):
        sub = norm().select("id").from_("t").where(["k in (?)", ("x", "y")])
        q = norm().where(["a in (?)", [1, 2]], ["b = (?)", sub], ["c = ?", 3])
        sql, binds = q.render()
        assert sql.count("?") == len(binds) == 5
        assert binds == [1, 2, "x", "y", 3]


# ---------------------------------------------------------------------------
# GROUP BY / HAVING / ORDER BY / LIMIT
# ---------------------------------------------------------------------------


class TestGroupBy:
    def test_single(self):
        assert norm().group_by("time").sql() == "select 1 from dual group by time"

    def test_multiple_parameters(self):
        assert norm().group_by("omg", "zomg").sql() == "select 1 from dual group by omg, zomg"

    def test_multiple_calls(self):
        q = norm().group_by("omg").group_by("zomg")
        assert q.sql() == "select 1 from dual group by omg, zomg"


class TestHaving:
    def test_having_without_group_by_raises(self):
        q = norm().select("a", "count(*)").from_("t").having(["count(*) > ?", 1])
        with pytest.raises(HavingWithoutGroupByError) as exc_info:
            q.render()
        assert exc_info.value.sql == "select a, count(*) from t having count(*) > ?"
        assert "having count(*) > ?" in str(exc_info.value)

    def test_having_after_group_by(self):
        q = (
            norm()
            .select("a", "count(*)")
            .from_("t")
            .group_by("a")
            .having(["count(*) > ?", 1], "a is not null")
        )
        assert q.sql() == (
            "select a, count(*) from t group by a having count(*) > ? and a is not null"
        )
        assert q.binds() == [1]


class TestOrderBy:
    def test_single(self):
        assert norm().order_by("omg asc").sql() == "select 1 from dual order by omg asc"

    def test_multiple_parameters(self):
        q = norm().order_by("omg asc", "zomg desc")
        assert q.sql() == "select 1 from dual order by omg asc, zomg desc"

    def test_multiple_calls(self):
        q = norm().order_by("omg asc").order_by("zomg desc")
        assert q.sql() == "select 1 from dual order by omg asc, zomg desc"


class TestLimit:
    def test_maximum(self):
        assert norm().limit(5).sql() == "select 1 from dual limit 5"

    def test_offset_and_count(self):
        assert norm().limit(5, 20).sql() == "select 1 from dual limit 5, 20"

    def test_zero_is_a_limit(self):
        assert norm().limit(0).sql() == "select 1 from dual limit 0"

    def test_none_is_noop(self):
        assert norm().limit(None).sql() == "select 1 from dual"

    def test_later_call_replaces(self):
        assert norm().limit(5).limit(10).sql() == "select 1 from dual limit 10"


class TestDistinct:
    def test_distinct(self):
        assert norm().distinct().sql() == "select distinct 1 from dual"

    def test_cancelable(self):
        assert norm().distinct().distinct(False).sql() == "select 1 from dual"

    def test_idempotent(self):
        assert norm().distinct().distinct().sql() == "select distinct 1 from dual"

    def test_column_starting_with_distinct(self):
        q = norm().select("distinct_users").from_("t").distinct()
        assert q.sql() == "select distinct distinct_users from t"

    def test_column_starting_with_distinct_is_not_doubled(self):
        q = norm().select("distinct_users").from_("t").distinct().distinct()
        assert q.sql() == "select distinct distinct_users from t"

    def test_distinct_already_in_select_is_kept_once(self):
        q = norm().select("distinct region").from_("t").distinct()
        assert q.sql() == "select distinct region from t"

    def test_unset_restores_exact_sql(self, users_query):
        before = users_query.sql()
        users_query.distinct()
        assert users_query.sql() == before.replace("select", "select distinct", 1)
        users_query.distinct(False)
        assert users_query.sql() == before


# ---------------------------------------------------------------------------
# Putting it all together
# ---------------------------------------------------------------------------


class TestFullQueries:
    def test_users_query(self, users_query):
        q = users_query.order_by("users.id desc").limit(10).distinct()
        assert q.sql() == (
            "select distinct users.id, users.name from users "
            "where users.id > ? and users.deleted is null "
            "order by users.id desc limit 10"
        )
        assert q.binds() == [1]

    def test_scoring_query(self):
        q = (
            norm()
            .select("scores.user_id", "IFNULL(sum(scores.points), 0) pts")
            .from_("scores")
            .where(["scores.created > ?", "2014-01-01"])
            .order_by("pts desc")
            .group_by("scores.user_id")
        )
        assert q.sql() == (
            "select scores.user_id, IFNULL(sum(scores.points), 0) pts from scores "
            "where scores.created > ? group by scores.user_id order by pts desc"
        )

    def test_render_is_idempotent(self, users_query):
        first = users_query.render()
        second = users_query.render()
        assert first == second
        assert first.binds is not second.binds

    def test_render_returns_rendered_sql(self, users_query):
        r = users_query.render()
        assert isinstance(r, RenderedSQL)
        assert r.dialect == "mysql"


# ---------------------------------------------------------------------------
# clone / reset
# ---------------------------------------------------------------------------


class TestClone:
    def test_clone_renders_same_sql(self):
        q = norm().select("a.id").from_("a").where("a.id = 5")
        assert q.clone().sql() == "select a.id from a where a.id = 5"

    def test_clone_diverges(self):
        q = norm().select("a.id").from_("a").where("a.id = 5")
        forked = q.clone().where(["a.kind = ?", "x"])
        assert q.sql() == "select a.id from a where a.id = 5"
        assert q.binds() == []
        assert forked.sql() == "select a.id from a where a.id = 5 and a.kind = ?"
        assert forked.binds() == ["x"]

    def test_original_changes_do_not_leak_into_clone(self):
        q = norm().select("a.id").from_("a")
        forked = q.clone()
        q.where("a.id = 5").distinct().limit(3)
        assert forked.sql() == "select a.id from a"

    def test_clone_keeps_dialect(self, pg):
        assert pg.where(["a = ?", 1]).clone().sql() == "select 1 from dual where a = $1"

    def test_reset(self, users_query):
        users_query.distinct().limit(4).reset()
        assert users_query.sql() == "select 1 from dual"
