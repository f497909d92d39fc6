from __future__ import annotations

import logging

from tmdb_provider.core.context import ExecutionContext, ExecutionOptions
from tmdb_provider.core.diagnostics import AttributePath, Diagnostics, Severity
from tmdb_provider.core.logging import StructuredLogFormatter, bind_fields, bind_tags, configure_logging, get_logger, mask_secret
from tmdb_provider.core.values import UNKNOWN, UnknownValue, is_unknown


def _record(message: str = "Configuring TMDB client") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=42,
        msg=message,
        args=(),
        exc_info=None,
    )


def test_structured_formatter_appends_extras():
    record = _record()
    record.phase = "configure"
    record.status = "done"
    record.tags = ("tmdb_movie",)

    formatted = StructuredLogFormatter(use_color=False).format(record)

    assert "Configuring TMDB client" in formatted
    assert "phase=configure" in formatted
    assert "status=done" in formatted
    assert "tags=[tmdb_movie]" in formatted


def test_structured_formatter_masks_sensitive_fields():
    record = _record()
    record.tmdb_apikey = "super-secret"
    record.params = {"api_key": "super-secret", "query": "dune"}

    formatted = StructuredLogFormatter().format(record)

    assert "super-secret" not in formatted
    assert "tmdb_apikey=***" in formatted
    assert '"query": "dune"' in formatted


def test_configure_logging_installs_structured_formatter():
    root = logging.getLogger()
    existing_handlers = list(root.handlers)
    try:
        configure_logging(force=True)
        assert root.handlers, "expected at least one handler configured"
        assert isinstance(root.handlers[0].formatter, StructuredLogFormatter)
    finally:
        root.handlers = existing_handlers


def test_bind_helpers_do_not_mutate_parent():
    logger = get_logger("tmdb.test", tags=["base"])
    tagged = bind_tags(logger, ["child", "base"])
    scoped = bind_fields(tagged, step="fetch", ignored=None)

    assert logger.extra == {"tags": ("base",)}
    assert tagged.extra["tags"] == ("base", "child")
    assert scoped.extra == {"tags": ("base", "child"), "step": "fetch"}


def test_mask_secret():
    assert mask_secret("abc") == "***"
    assert mask_secret("") == ""
    assert mask_secret(None) == ""


def test_attribute_path_rendering():
    assert str(AttributePath.root("key")) == "key"
    assert str(AttributePath.root("movies").index(0).attr("title")) == "movies[0].title"


def test_diagnostics_accumulate_in_order():
    diagnostics = Diagnostics()
    diagnostics.add_warning("first")
    diagnostics.add_attribute_error(AttributePath.root("id"), "second", "detail")
    diagnostics.add_error("third")

    assert [d.summary for d in diagnostics] == ["first", "second", "third"]
    assert diagnostics.has_error()
    assert [d.severity for d in diagnostics.warnings()] == [Severity.WARNING]
    assert diagnostics.to_list()[1] == {"severity": "error", "summary": "second", "detail": "detail", "attribute": "id"}


def test_warnings_alone_are_not_errors():
    diagnostics = Diagnostics()
    diagnostics.add_warning("heads up")

    assert not diagnostics.has_error()
    assert len(diagnostics) == 1


def test_unknown_is_a_singleton_distinct_from_null():
    assert UnknownValue() is UNKNOWN
    assert is_unknown(UNKNOWN)
    assert not is_unknown(None)
    assert repr(UNKNOWN) == "UNKNOWN"


def test_execution_context_uses_explicit_environment(tmp_path):
    context = ExecutionContext.build_default(environ={"TMDB_KEY": "env-key"}, options=ExecutionOptions(max_workers=8))

    assert context.credential_fallback == "env-key"
    assert context.options.max_workers == 8
    assert context.environ == {"TMDB_KEY": "env-key"}
