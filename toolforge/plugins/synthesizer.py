"""
Turns model output into a new plugin module.

The system prompt asks the model to answer with a module in this shape when
no existing tool fits:

    async def execute(city):
        ...

    details = {
        "type": "function",
        "function": {"name": "weather", ...},
    }

    __all__ = ["execute", "details"]

The span from `async def execute` to the `__all__` export line is written
verbatim to `<plugins dir>/<name>.py`.
"""

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

EXPORT_LINE = '__all__ = ["execute", "details"]'
FALLBACK_NAME = "unknownFunction"

_EXPORT = r"""__all__\s*=\s*\[\s*["']execute["']\s*,\s*["']details["']\s*,?\s*\]"""
EXPORT_RE = re.compile(_EXPORT)
# No backticks inside the span, so a fenced block ends at its fence
MODULE_RE = re.compile(r"async def execute[^`]+" + _EXPORT)
NAME_RE = re.compile(r"""["']name["']\s*:\s*["'](\w+)["']""")
DETAILS_RE = re.compile(r"^details\s*=", re.MULTILINE)


def has_export_marker(text: str) -> bool:
    """Whether the text contains the paired `execute`/`details` export line."""
    return bool(EXPORT_RE.search(text))


def extract_module(text: str) -> str | None:
    """Return the generated module span, or None when the template is incomplete."""
    match = MODULE_RE.search(text)
    return match.group(0) if match else None


def extract_name(code: str) -> str:
    """Tool name from the first `"name": "..."` field of `details`, or the fallback name."""
    details = DETAILS_RE.search(code)
    if details is None:
        return FALLBACK_NAME
    match = NAME_RE.search(code, details.end())
    # Dunder files are skipped by the registry
    if match is None or match.group(1).startswith("__"):
        return FALLBACK_NAME
    return match.group(1)


class ToolSynthesizer:
    """Persists generated tool modules into the plugin directory."""

    def __init__(
        self,
        directory: Path | str,
        enabled: bool = True,
        validate: bool = False,
    ) -> None:
        self.directory = Path(directory)
        self.enabled = enabled
        self.validate = validate

    def persist(self, raw_text: str) -> Path | None:
        """
        Save the tool module found in raw model output.

        Existing files with the same name are overwritten.

        Returns:
            Path of the written plugin, or None when nothing was written
        """
        if not self.enabled:
            logger.warning("Tool synthesis is disabled; generated code was not saved")
            return None

        code = extract_module(raw_text)
        if code is None:
            logger.warning("No valid function detected in model response")
            return None

        name = extract_name(code)
        path = self.directory / f"{name}.py"

        if self.validate:
            try:
                compile(code, str(path), "exec")
            except SyntaxError as e:
                logger.warning(f"Generated function {name} does not compile: {e}")
                return None

        self.directory.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(code)

        logger.info(f"Function saved: {path}")
        return path
