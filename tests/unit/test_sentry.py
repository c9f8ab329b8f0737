"""Unit tests for core/sentry.py."""

from unittest.mock import patch

from core.sentry import add_catalog_breadcrumb, capture_exception, init_sentry


class TestInitSentry:
    @patch("core.sentry.sentry_sdk")
    def test_none_dsn_skips_init(self, mock_sdk):
        init_sentry(dsn=None)
        mock_sdk.init.assert_not_called()

    @patch("core.sentry.sentry_sdk")
    def test_empty_dsn_skips_init(self, mock_sdk):
        init_sentry(dsn="")
        mock_sdk.init.assert_not_called()

    @patch("core.sentry.sentry_sdk")
    def test_valid_dsn_calls_init(self, mock_sdk):
        init_sentry(dsn="https://examplePublicKey@o0.ingest.sentry.io/0")
        mock_sdk.init.assert_called_once()
        call_kwargs = mock_sdk.init.call_args[1]
        assert call_kwargs["dsn"] == "https://examplePublicKey@o0.ingest.sentry.io/0"
        assert call_kwargs["send_default_pii"] is False

    @patch("core.sentry.sentry_sdk")
    def test_environment_and_release_passed(self, mock_sdk):
        init_sentry(dsn="https://key@sentry.io/0", environment="staging", release="1.0.0")
        call_kwargs = mock_sdk.init.call_args[1]
        assert call_kwargs["environment"] == "staging"
        assert call_kwargs["release"] == "1.0.0"


class TestAddCatalogBreadcrumb:
    @patch("core.sentry.sentry_sdk")
    def test_adds_breadcrumb(self, mock_sdk):
        add_catalog_breadcrumb("search", {"term": "Test"})
        mock_sdk.add_breadcrumb.assert_called_once_with(
            category="catalog",
            message="search",
            data={"term": "Test"},
            level="info",
        )

    @patch("core.sentry.sentry_sdk")
    def test_default_data_is_empty(self, mock_sdk):
        add_catalog_breadcrumb("operation")
        assert mock_sdk.add_breadcrumb.call_args[1]["data"] == {}

    @patch("core.sentry.sentry_sdk")
    def test_custom_level(self, mock_sdk):
        add_catalog_breadcrumb("op", level="warning")
        assert mock_sdk.add_breadcrumb.call_args[1]["level"] == "warning"


class TestCaptureException:
    @patch("core.sentry.sentry_sdk")
    def test_captures_without_context(self, mock_sdk):
        err = ValueError("test")
        capture_exception(err)
        mock_sdk.set_context.assert_not_called()
        mock_sdk.capture_exception.assert_called_once_with(err)

    @patch("core.sentry.sentry_sdk")
    def test_captures_with_context(self, mock_sdk):
        err = ValueError("test")
        ctx = {"term": "daft punk"}
        capture_exception(err, context=ctx)
        mock_sdk.set_context.assert_called_once_with("catalog", ctx)
        mock_sdk.capture_exception.assert_called_once_with(err)
