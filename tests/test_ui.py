import io
import unittest
from unittest.mock import patch

from rich.console import Console

from cli_translator import ui


def recording_console():
    return Console(file=io.StringIO(), width=200, color_system=None)


class TestConfirmation(unittest.TestCase):

    def test_is_affirmative(self):
        for answer in ("y", "Y", "yes", "YES", "Yes", " y \n"):
            with self.subTest(answer=answer):
                self.assertTrue(ui.is_affirmative(answer))
        for answer in ("", "n", "no", "yep", "ye", "yess", "sure", None):
            with self.subTest(answer=answer):
                self.assertFalse(ui.is_affirmative(answer))

    @patch("builtins.input", return_value="y")
    def test_confirm_command_shows_command_and_choices(self, mock_input):
        console = recording_console()
        with patch.object(ui, "console", console):
            self.assertTrue(ui.confirm_command("echo [bold]hi[/bold]"))

        self.assertIn("run echo [bold]hi[/bold] [y/n]? ", console.file.getvalue())

    @patch.object(ui.console, "input", side_effect=EOFError)
    def test_eof_declines(self, mock_input):
        self.assertFalse(ui.confirm_command("ls"))

    @patch("builtins.input", return_value="n")
    def test_confirm_backup(self, mock_input):
        console = recording_console()
        with patch.object(ui, "console", console):
            self.assertFalse(ui.confirm_backup("rm -rf build"))

        output = console.file.getvalue()
        self.assertIn("WARNING: This will delete files/directories:", output)
        self.assertIn("rm -rf build", output)
        self.assertIn("Backup targets before deletion? [y/N]: ", output)


if __name__ == "__main__":
    unittest.main()
