#!/usr/bin/env python3
"""Tests for the per-instance logger: levels, formats, derived loggers."""

import json

import pytest

from focuslog import Level, field, new_logger
from focuslog.config import LOGGER_TYPE_CONSOLE, LOGGER_TYPE_JSON, LOGGER_TYPE_PRETTY
from focuslog.for_logger.color_console import ColorConsoleHandler
from focuslog.for_logger.focus_filter import FocusFilterHandler, NamedHandler
from focuslog.for_logger.handlers import JSONHandler, TextHandler


def emit_all(log):
    log.trace("t")
    log.debug("d")
    log.info("i")
    log.success("s")
    log.warn("w")
    log.error("e")
    log.log("fatal", "f")


class TestLevelFiltering:
    """Minimum level handling."""

    def test_warn_logger_drops_lower_ranks(self, make_root, read_records):
        """A warn logger emits warn, error and fatal-rank records only."""
        emit_all(make_root(level="warn"))
        assert [r["msg"] for r in read_records()] == ["w", "e", "f"]

    def test_trace_logger_emits_everything(self, root, read_records):
        """A trace logger emits every rank with its label."""
        emit_all(root)
        assert [r["level"] for r in read_records()] == ["trace", "debug", "info", "success", "warn", "error", "fatal"]

    def test_unknown_level_behaves_like_info(self, make_root, stream, read_records):
        """A logger built with a bogus level filters exactly like an info logger."""
        bogus = make_root(level="BOGUS")
        emit_all(bogus)
        bogus_messages = [r["msg"] for r in read_records()]

        stream.seek(0)
        stream.truncate()
        emit_all(make_root(level="INFO"))

        assert bogus.level == Level.INFO
        assert bogus_messages == [r["msg"] for r in read_records()] == ["i", "s", "w", "e", "f"]

    def test_enabled_query(self, make_root):
        """enabled() accepts level names and ranks."""
        log = make_root(level="error")
        assert not log.enabled("warn")
        assert log.enabled(Level.ERROR)
        assert log.enabled("fatal")


class TestLocality:
    """Level and format changes are local, focus changes are global."""

    def test_child_level_change_does_not_affect_others(self, root, read_records):
        """Raising a child's level leaves its sibling and the root untouched."""
        a, b = root.get_logger("a"), root.get_logger("b")
        a.with_level("error")

        a.info("a info")
        b.info("b info")
        root.info("root info")

        assert [r["msg"] for r in read_records()] == ["b info", "root info"]
        assert b.level == root.level == Level.TRACE

    def test_parent_change_does_not_reach_existing_children(self, root, read_records):
        """Children copy settings at creation only."""
        child = root.get_logger("child")
        root.with_level("error").with_logger_type(LOGGER_TYPE_CONSOLE)

        child.debug("still json")

        (record,) = read_records()
        assert record["msg"] == "still json"
        assert child.logger_type == LOGGER_TYPE_JSON

    def test_children_inherit_from_the_caller(self, root):
        """A logger created via a child copies that child's settings."""
        parent = root.get_logger("parent").with_level("warn").with_logger_type(LOGGER_TYPE_PRETTY)
        grandchild = parent.get_logger("grandchild")

        assert grandchild.level == Level.WARN
        assert grandchild.logger_type == LOGGER_TYPE_PRETTY
        assert root.level == Level.TRACE

    def test_focus_affects_every_logger(self, root, read_records):
        """In contrast to levels, focus applies to all registered loggers."""
        a, b = root.get_logger("a"), root.get_logger("b")
        a.with_level("debug")
        root.focus("a")

        a.info("a")
        b.info("b")

        assert [r["msg"] for r in read_records()] == ["a"]


class TestChainConstruction:
    """Decorator chains per logger."""

    def test_named_logger_chain(self, root):
        """Named loggers are wrapped by focus filter then name attribution."""
        chain = root.get_logger("db").handler
        assert isinstance(chain, FocusFilterHandler)
        assert isinstance(chain.handler, NamedHandler)

    def test_root_chain_has_no_name_layer(self, root):
        """The unnamed root has no name attribution."""
        chain = root.handler
        assert isinstance(chain, FocusFilterHandler)
        assert isinstance(chain.handler, JSONHandler)

    @pytest.mark.parametrize(
        ("logger_type", "expected"),
        [("json", JSONHandler), ("console", TextHandler), ("pretty", ColorConsoleHandler), ("nonsense", JSONHandler)],
    )
    def test_logger_type_selects_sink(self, make_root, logger_type, expected):
        """The format selector picks the sink; unknown selectors fall back to JSON."""
        assert isinstance(make_root(logger_type=logger_type).handler.handler, expected)

    def test_with_level_rebuilds_chain(self, root):
        """Changing the level builds a new chain for the receiver."""
        before = root.handler
        root.with_level("warn")
        assert root.handler is not before


class TestEmitArguments:
    """Fields passed to emit operations."""

    def test_pairs_keywords_and_prebuilt_fields(self, root, read_records):
        """Positional pairs, Field objects and keywords all become fields."""
        root.info("request", "path", "/", field("status", 200), elapsed=0.5)
        (record,) = read_records()
        assert record["path"] == "/"
        assert record["status"] == 200
        assert record["elapsed"] == 0.5

    def test_keyword_named_like_message(self, root, read_records):
        """Keyword fields never replace the message argument."""
        root.info("hello", msg_id=3, level_hint="x")
        (record,) = read_records()
        assert record["msg"] == "hello"
        assert record["msg_id"] == 3

    def test_bad_key_for_unpaired_values(self, root, read_records):
        """Unpaired values are kept under !BADKEY."""
        root.warn("odd", "key")
        assert read_records()[0]["!BADKEY"] == "key"

    def test_several_unpaired_values_are_all_kept(self, root, read_records):
        """Each unpaired value survives under its own key."""
        root.info("odd", 111, 222)
        (record,) = read_records()
        assert record["!BADKEY"] == 111
        assert record["!BADKEY.1"] == 222

    def test_field_named_msg_keeps_the_message(self, root, read_records):
        """A caller field named msg is written next to the message, not over it."""
        root.info("hello", "msg", "clobber")
        (record,) = read_records()
        assert record["msg"] == "hello"
        assert record["msg.1"] == "clobber"

    def test_named_logger_attribute(self, root, read_records):
        """Named loggers add logger=<name>."""
        root.get_logger("db").info("q")
        assert read_records()[0]["logger"] == "db"

    def test_source_location(self, make_root, read_records):
        """With add_source the record points at the calling test."""
        make_root(add_source=True).info("here")
        source = read_records()[0]["source"]
        assert source["file"] == "test_logger.py"
        assert source["function"] == "test_source_location"
        assert source["line"] > 0


class TestDerivedLoggers:
    """bind(), with_group() and with_context()."""

    def test_bind_does_not_mutate_receiver(self, root, read_records):
        """bind() returns a new logger and leaves the original alone."""
        bound = root.bind("request_id", "r1")
        root.info("plain")
        bound.info("bound")

        plain, with_id = read_records()
        assert "request_id" not in plain
        assert with_id["request_id"] == "r1"
        assert bound.name == root.name
        assert bound.registry is root.registry

    def test_bind_preserves_logger_name_first(self, root, read_records):
        """The logger attribute renders before bound fields."""
        root.get_logger("db").bind(table="users").info("q", rows=1)
        (record,) = read_records()
        assert list(record)[3:] == ["logger", "table", "rows"]

    def test_group_nests_later_fields(self, root, read_records):
        """with_group() nests fields added afterwards."""
        root.bind(app="x").with_group("req").bind(id=7).info("q", path="/")
        (record,) = read_records()
        assert record["app"] == "x"
        assert record["req"] == {"id": 7, "path": "/"}

    def test_derived_logger_survives_level_change_on_parent(self, root, read_records):
        """A bound logger keeps the settings it was derived with."""
        bound = root.bind(k=1)
        root.with_level("error")
        bound.debug("still emitted")
        assert read_records()[0]["msg"] == "still emitted"

    def test_with_context_is_passed_to_sink(self, root):
        """The context mapping travels with the derived logger."""
        scoped = root.with_context({"request": "r1"})
        assert dict(scoped.context) == {"request": "r1"}
        assert dict(root.context) == {}

    def test_empty_bind_returns_self(self, root):
        """Binding nothing returns the receiver."""
        assert root.bind() is root
        assert root.with_group("") is root


class TestPrettyOutput:
    """The pretty format through a logger."""

    def test_pretty_logger_writes_text_lines(self, make_root, stream):
        """Pretty loggers do not write JSON."""
        make_root(logger_type="pretty").get_logger("ui").info("drawn", widgets=3)
        line = stream.getvalue()
        assert "drawn" in line
        assert "widgets=3" in line
        with pytest.raises(json.JSONDecodeError):
            json.loads(line)


def test_new_logger_keyword_overrides(stream):
    """Explicit keyword arguments win over the defaults."""
    log = new_logger("svc", level="debug", logger_type="console", add_source=False, stream=stream)
    log.debug("hi")
    assert log.name == "svc"
    assert "logger=svc" in stream.getvalue()
    assert "msg=hi" in stream.getvalue()
