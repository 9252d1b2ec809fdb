"""Substitution of ``%token%`` placeholders in note templates."""

import re
from collections.abc import Callable, Mapping

TokenValue = str | Callable[[], str]


class TemplateEngine:
    """Replace ``%token%`` placeholders with values.

    Values are inserted literally and never re-scanned, so a value that
    itself looks like ``%token%`` is left alone. Callable values are
    evaluated at most once per render, and only if their token occurs.
    Tokens missing from the value mapping are left untouched.
    """

    def render(self, template: str, values: Mapping[str, TokenValue]) -> str:
        """Render ``template`` with ``values``.

        Args:
            template: Template text, possibly empty.
            values: Token names (without ``%``) mapped to strings or to
                zero-argument callables producing strings.

        Returns:
            The rendered text.
        """
        names = [name for name in values if name]
        if not template or not names:
            return template

        pattern = self._token_pattern(names)
        resolved: dict[str, str] = {}

        def substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in resolved:
                value = values[name]
                resolved[name] = value() if callable(value) else value
            return resolved[name]

        return pattern.sub(substitute, template)

    @staticmethod
    def _token_pattern(names: list[str]) -> re.Pattern[str]:
        return re.compile("%(" + "|".join(re.escape(name) for name in names) + ")%")
