"""Tests for QueryHandler failure redirection and logging."""

from __future__ import annotations

import logging

import pytest

from validate_query.errors import ValidationFailure
from validate_query.handler import QueryHandler
from validate_query.params import ParameterStore
from validate_query.rules import ParamType
from validate_query.settings import DEFAULT_ERROR_TARGET


class TestValidateQuerySuccess:
    """Tests for validate_query when the request is accepted."""
    def test_returns_written_values(self):
        """Test that validated values are returned and defaults written back."""
        handler = QueryHandler(ParameterStore([("pet_id", "7")]))
        values = handler.validate_query(pet_id=ParamType.SCALAR, direction={"default": "up"})

        assert values == {"pet_id": "7", "direction": "up"}
        assert handler.params.get("direction") == "up"
        assert handler.error_target is None

    def test_mapping_and_keyword_rules_merge(self):
        """Test that positional and keyword rules combine into one rule set."""
        handler = QueryHandler(ParameterStore([("a", "1"), ("b", "2")]))
        handler.validate_query({"a": ParamType.SCALAR}, b=ParamType.SCALAR)
        assert handler.error_target is None

    def test_empty_rules_noop(self, params):
        """Test that calling with no rules changes nothing."""
        handler = QueryHandler(params)
        before = params.get_all()
        assert handler.validate_query() == {}
        assert handler.validate_query({}) == {}
        assert params.get_all() == before
        assert handler.error_target is None


class TestValidateQueryFailure:
    """Tests for validate_query when the request is rejected."""
    def test_activates_configured_error_target(self):
        """Test that failure sets the configured error target and raises."""
        handler = QueryHandler(ParameterStore([("a", "1"), ("b", "2")]))
        handler.validate_query_config(error_target="customHandler")

        with pytest.raises(ValidationFailure) as exc_info:
            handler.validate_query(a=ParamType.SCALAR)

        assert handler.error_target == "customHandler"
        assert exc_info.value.target == "customHandler"
        assert "b" in exc_info.value.detail
        assert str(exc_info.value).startswith("Query Validation Failed: ")

    def test_default_error_target(self):
        """Test that the built-in error target is used when none is configured."""
        handler = QueryHandler()
        with pytest.raises(ValidationFailure):
            handler.validate_query(pet_id=ParamType.SCALAR)
        assert handler.error_target == DEFAULT_ERROR_TARGET

    def test_code_after_failed_validation_does_not_run(self):
        """Test that a failure stops the calling code."""
        handler = QueryHandler()
        reached = []

        def run_mode() -> None:
            handler.validate_query(pet_id=ParamType.SCALAR)
            reached.append(True)

        with pytest.raises(ValidationFailure):
            run_mode()
        assert reached == []

    def test_params_unchanged(self):
        """Test that a failed call leaves the parameters as submitted."""
        store = ParameterStore([("b", "2")])
        handler = QueryHandler(store)
        with pytest.raises(ValidationFailure):
            handler.validate_query(a=ParamType.SCALAR, c={"default": "x"})
        assert store.get_all() == {"b": "2"}


class TestFailureLogging:
    """Tests for logging rejected requests through the log sink."""
    def test_configured_level_logs_once(self, sink):
        """Test that one message is sent at the configured level."""
        handler = QueryHandler(ParameterStore([("a", "1"), ("b", "2")]), logger=sink)
        handler.validate_query_config(log_level="warning")

        with pytest.raises(ValidationFailure) as exc_info:
            handler.validate_query(a=ParamType.SCALAR)

        assert len(sink.calls) == 1
        level, message = sink.calls[0]
        assert level == "warning"
        assert exc_info.value.detail in message
        assert message.startswith("Query Validation Failed: ")

    def test_no_level_no_logging(self, sink):
        """Test that nothing is logged without a log level."""
        handler = QueryHandler(logger=sink)
        with pytest.raises(ValidationFailure):
            handler.validate_query(a=ParamType.SCALAR)
        assert sink.calls == []

    def test_per_call_level_overrides_config(self, sink):
        """Test that a per-call log_level replaces the configured one."""
        handler = QueryHandler(logger=sink)
        handler.validate_query_config(log_level="warning")

        with pytest.raises(ValidationFailure):
            handler.validate_query(a=ParamType.SCALAR, log_level="critical")

        assert [level for level, _ in sink.calls] == ["critical"]

    def test_per_call_level_without_config(self, sink):
        """Test that logLevel works when nothing is configured."""
        handler = QueryHandler(logger=sink)
        with pytest.raises(ValidationFailure):
            handler.validate_query({"a": ParamType.SCALAR, "logLevel": "notice"})
        assert [level for level, _ in sink.calls] == ["info"]

    def test_success_does_not_log(self, sink):
        """Test that accepted requests are never logged."""
        handler = QueryHandler(ParameterStore([("a", "1")]), logger=sink)
        handler.validate_query_config(log_level="error")
        handler.validate_query(a=ParamType.SCALAR)
        assert sink.calls == []

    def test_per_call_level_without_sink_warns(self, caplog):
        """Test that a level without a sink warns but still redirects."""
        handler = QueryHandler()
        with caplog.at_level(logging.WARNING, logger="validate_query.handler"):
            with pytest.raises(ValidationFailure):
                handler.validate_query(a=ParamType.SCALAR, log_level="error")
        assert "no log sink" in caplog.text
        assert handler.error_target == DEFAULT_ERROR_TARGET

    def test_stdlib_logger_as_sink(self, caplog):
        """Test that a stdlib Logger works as the log sink."""
        sink = logging.getLogger("test.validate_query.sink")
        handler = QueryHandler(logger=sink)
        handler.validate_query_config(log_level="error")

        with caplog.at_level(logging.ERROR, logger="test.validate_query.sink"):
            with pytest.raises(ValidationFailure):
                handler.validate_query(pet_id=ParamType.SCALAR)

        records = [r for r in caplog.records if r.name == "test.validate_query.sink"]
        assert len(records) == 1
        assert records[0].levelno == logging.ERROR
        assert "pet_id" in records[0].getMessage()
