"""Tests for generate_feed.cli entry point."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from generate_feed.cli import main
from generate_feed.config import FeedConfig
from generate_feed.errors import ContentNotFoundError, TransientIOError
from generate_feed.models import FeedItem

ITEM = FeedItem(
    title="标题",
    description="摘要",
    url="https://www.xchuxing.com/article/1",
    guid="xchuxing:1:1",
    published_at=datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc),
)


@pytest.fixture(autouse=True)
def _isolate(monkeypatch):
    monkeypatch.setattr("generate_feed.cli.load_dotenv", lambda: None)


class TestMain:
    @patch("generate_feed.cli.generate_feed")
    @patch("generate_feed.cli.load_config")
    def test_writes_feed(self, mock_load, mock_generate, tmp_path) -> None:
        output = tmp_path / "feed.xml"
        mock_load.return_value = FeedConfig(output_path=str(output))
        mock_generate.return_value = [ITEM]

        main([])

        assert "xchuxing:1:1" in output.read_text(encoding="utf-8")

    @patch("generate_feed.cli.generate_feed")
    @patch("generate_feed.cli.load_config")
    def test_cli_overrides(self, mock_load, mock_generate, tmp_path) -> None:
        output = tmp_path / "custom.xml"
        mock_load.return_value = FeedConfig()
        mock_generate.return_value = []

        main(["--output", str(output), "--max-items", "5"])

        config = mock_generate.call_args[0][0]
        assert config.output_path == str(output)
        assert config.max_items == 5
        assert output.exists()

    @patch("generate_feed.cli.write_feed")
    @patch("generate_feed.cli.generate_feed")
    @patch("generate_feed.cli.load_config")
    def test_dry_run_does_not_write(self, mock_load, mock_generate, mock_write) -> None:
        mock_load.return_value = FeedConfig()
        mock_generate.return_value = [ITEM]

        main(["--dry-run"])

        mock_write.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [
            TransientIOError("retries exhausted", url="https://www.xchuxing.com/official"),
            ContentNotFoundError("no list"),
        ],
    )
    @patch("generate_feed.cli.generate_feed")
    @patch("generate_feed.cli.load_config")
    def test_failure_exits_nonzero_and_keeps_existing_feed(
        self, mock_load, mock_generate, error, tmp_path, caplog
    ) -> None:
        output = tmp_path / "feed.xml"
        output.write_text("previous", encoding="utf-8")
        mock_load.return_value = FeedConfig(output_path=str(output))
        mock_generate.side_effect = error

        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
        assert output.read_text(encoding="utf-8") == "previous"
        assert error.category in caplog.text
        assert "Keeping existing RSS file" in caplog.text

    @patch("generate_feed.cli.generate_feed")
    def test_missing_config_file_exits_nonzero(self, mock_generate, tmp_path, caplog) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(tmp_path / "missing.yaml")])

        assert exc_info.value.code == 1
        assert "FileNotFoundError: Config file not found" in caplog.text
        mock_generate.assert_not_called()

    @patch("generate_feed.cli.generate_feed")
    def test_invalid_config_value_exits_nonzero(
        self, mock_generate, tmp_path, monkeypatch, caplog
    ) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("short_news_policy: sometimes\n", encoding="utf-8")
        monkeypatch.delenv("SHORT_NEWS_POLICY", raising=False)

        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(path)])

        assert exc_info.value.code == 1
        assert "ValueError" in caplog.text
        mock_generate.assert_not_called()
