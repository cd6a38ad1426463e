from __future__ import annotations

import html
import logging
import re
import sys
from collections.abc import Callable

"""Terminal implementation of the UserInteraction port."""

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_BLANK_LINES_RE = re.compile(r"\n\s*\n+")


def html_to_text(content: str) -> str:
    """Crude HTML -> text for the info panel: list items become bullets, tags are dropped."""
    text = re.sub(r"<li>", "  - ", content)
    text = _TAG_RE.sub("", text)
    text = html.unescape(text)
    lines = [line.rstrip() for line in text.splitlines()]
    return _BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()


class ConsoleInteraction:
    """Alerts go to the application logger, confirmations read stdin.

    With ``assume_yes`` every confirmation is answered yes without prompting.
    Without a TTY and without ``assume_yes`` confirmations are answered no.
    """

    def __init__(
        self,
        *,
        assume_yes: bool = False,
        interactive: bool | None = None,
        input_func: Callable[[str], str] = input,
    ) -> None:
        self.assume_yes = assume_yes
        self.interactive = interactive  # None = ask sys.stdin
        self._input = input_func

    def alert(self, title: str, message: str) -> None:
        logger.info(f"{title} {message}")

    def confirm(self, title: str, message: str) -> bool:
        if self.assume_yes:
            logger.info(f"{title}: {message} -> yes (--yes)")
            return True
        interactive = sys.stdin.isatty() if self.interactive is None else self.interactive
        if not interactive:
            logger.warning(f"{title}: no terminal to confirm on; pass --yes to proceed")
            return False
        try:
            answer = self._input(f"{title}: {message} [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")

    def show_info_panel(self, html_content: str) -> None:
        print(html_to_text(html_content))
