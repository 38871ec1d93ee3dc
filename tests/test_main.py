import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from slack_history_archive import __main__ as cli
from slack_history_archive.errors import ArchiveError
from slack_history_archive.history_streamer import ArchiveSummary

_ENV = {"SLACK_API_TOKEN": "xoxb-token", "SLACK_CHANNEL": "C123"}


@patch("slack_history_archive.__main__.load_dotenv")
class MainTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.output_path = Path(self._tmp.name) / "out.json"
        self.json_config = {"OutputPath": str(self.output_path), "RetryCeiling": 1}

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _main(self, run_archive: AsyncMock) -> int:
        with patch("slack_history_archive.__main__.load_json_config", return_value=self.json_config), \
                patch("slack_history_archive.__main__.run_archive", run_archive):
            return cli.main()

    @patch.dict(os.environ, _ENV, clear=True)
    def test_success_exits_zero(self, _dotenv) -> None:
        run_archive = AsyncMock(return_value=ArchiveSummary(pages=1, messages=0))

        self.assertEqual(cli.EXIT_OK, self._main(run_archive))

        config = run_archive.await_args.args[0]
        self.assertEqual("xoxb-token", config.credential)
        self.assertEqual("C123", config.channel_id)
        self.assertEqual(1, config.retry_ceiling)

    @patch.dict(os.environ, _ENV, clear=True)
    def test_archive_error_exits_non_zero(self, _dotenv) -> None:
        run_archive = AsyncMock(side_effect=ArchiveError("invalid_auth"))

        self.assertEqual(cli.EXIT_ARCHIVE_FAILED, self._main(run_archive))

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_credentials_exit_without_fetching(self, _dotenv) -> None:
        run_archive = AsyncMock()

        self.assertEqual(cli.EXIT_BAD_CONFIG, self._main(run_archive))
        run_archive.assert_not_called()

    @patch.dict(os.environ, _ENV, clear=True)
    def test_invalid_config_value(self, _dotenv) -> None:
        self.json_config["RetryCeiling"] = "lots"
        run_archive = AsyncMock()

        self.assertEqual(cli.EXIT_BAD_CONFIG, self._main(run_archive))
        run_archive.assert_not_called()


    @patch.dict(os.environ, _ENV, clear=True)
    def test_log_file_colliding_with_archive(self, _dotenv) -> None:
        self.json_config["LogFile"] = str(self.output_path)
        run_archive = AsyncMock()

        self.assertEqual(cli.EXIT_BAD_CONFIG, self._main(run_archive))
        run_archive.assert_not_called()
    @patch.dict(os.environ, _ENV, clear=True)
    def test_interrupt(self, _dotenv) -> None:
        run_archive = AsyncMock(side_effect=KeyboardInterrupt())

        self.assertEqual(cli.EXIT_INTERRUPTED, self._main(run_archive))


if __name__ == "__main__":
    unittest.main()
