import io
import os
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from cline_cli.__main__ import build_parser, main
from cline_cli.state import StateStore
from tests.state.base import StateStoreTestCase


class ParserTests(unittest.TestCase):
    def test_task_options(self) -> None:
        args = build_parser().parse_args(
            ["task", "write tests", "-d", "/tmp/ws", "-c", "cfg.json", "--provider", "ollama", "--model", "phi3"]
        )
        self.assertEqual("task", args.command)
        self.assertEqual("write tests", args.description)
        self.assertEqual("/tmp/ws", args.directory)
        self.assertEqual("cfg.json", args.config_path)
        self.assertEqual("ollama", args.provider)
        self.assertEqual("phi3", args.model)
        self.assertIsNone(args.api_key)

    def test_chat_defaults_to_cwd(self) -> None:
        args = build_parser().parse_args(["chat"])
        self.assertEqual(os.getcwd(), args.directory)


class MainTests(StateStoreTestCase):
    def setUp(self) -> None:
        super().setUp()
        home = self._tmp_dir / "home"
        env = patch.dict(os.environ, {"CLINE_HOME": str(home)}, clear=True)
        env.start()
        self.addCleanup(env.stop)
        logging = patch("cline_cli.__main__.setup_logging")
        logging.start()
        self.addCleanup(logging.stop)

    def _main(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_no_command_prints_help(self) -> None:
        code, out, _ = self._main()
        self.assertEqual(0, code)
        self.assertIn("usage: cline", out)

    def test_task_runs_and_records_history(self) -> None:
        code, out, _ = self._main("task", "say hello", "--provider", "mock", "-d", str(self._workspace))
        self.assertEqual(0, code)
        self.assertIn('Your request: "say hello"', out)
        self.assertIn("Task completed successfully!", out)

        history = StateStore(self._workspace).read_history()
        self.assertEqual(["say hello"], [r.task for r in history])

    def test_task_without_configuration_runs_setup(self) -> None:
        with patch("cline_cli.__main__.configure_settings") as configure:
            code, out, _ = self._main("task", "anything", "-d", str(self._workspace))
        self.assertEqual(0, code)
        self.assertIn("No API configuration found", out)
        configure.assert_called_once()

    def test_failure_returns_exit_code(self) -> None:
        with patch("cline_cli.__main__.bootstrap_runtime", side_effect=RuntimeError("bad state")):
            code, _, err = self._main("task", "anything", "-d", str(self._workspace))
        self.assertEqual(1, code)
        self.assertIn("Error: bad state", err)


if __name__ == "__main__":
    unittest.main()
