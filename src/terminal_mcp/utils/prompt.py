"""Shell prompt detection.

A heuristic for deciding whether a line looks like an interactive shell
prompt. Nothing in the request path uses it; tool calls never wait on a
prompt.
"""

from __future__ import annotations

import re

DEFAULT_PROMPT_PATTERNS: tuple[str, ...] = (
    r"^\s*[\$#>]\s*$",  # bare $ # >
    r"^\s*\w+@[\w.-]+[:\s].*[\$#>]\s*$",  # user@host:path$
    r"^\s*\(.*\)\s*[\$#>]\s*$",  # (venv) $
    r"^\s*\[.*\]\s*[\$#>]\s*$",  # [user@host path]$
    r"^\s*➜\s*",  # oh-my-zsh
    r"^\s*❯\s*",  # pure
    r"^\s*λ\s*",
)


class PromptDetector:
    """Match lines against a set of prompt regexes.

    Invalid patterns passed to the constructor are skipped; ``add_pattern``
    raises ``re.error`` instead.
    """

    def __init__(self, patterns: tuple[str, ...] | list[str] = DEFAULT_PROMPT_PATTERNS) -> None:
        self._patterns: list[re.Pattern[str]] = []
        for pattern in patterns:
            try:
                self._patterns.append(re.compile(pattern))
            except re.error:
                continue

    def add_pattern(self, pattern: str) -> None:
        self._patterns.append(re.compile(pattern))

    def is_prompt(self, line: str) -> bool:
        return any(p.search(line) for p in self._patterns)

    def ends_with_prompt(self, output: str) -> bool:
        """True if the last line of ``output`` looks like a prompt."""
        lines = output.splitlines()
        return bool(lines) and self.is_prompt(lines[-1])
