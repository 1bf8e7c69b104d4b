"""ANSI-coloured console logging for the ingestion and query pipeline.

Each stage of the pipeline gets its own colour and icon so that a resource
can be followed from creation to stored vectors in the terminal:

    RESOURCE  green     resource row created
    CHUNK     yellow    content split on periods
    EMBED     magenta   batch / query embedding call
    STORE     blue      vectors written
    SEARCH    cyan      similarity scan
    CLEAR     red       bulk deletion
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, NamedTuple


class _Ansi:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"


class Stage(NamedTuple):
    label: str
    color: str
    icon: str


class PipelineStage:
    """Stages of the retrieval pipeline."""

    RESOURCE = Stage("RESOURCE", _Ansi.GREEN, "📁")
    CHUNK = Stage("CHUNK", _Ansi.YELLOW, "✂️")
    EMBED = Stage("EMBED", _Ansi.MAGENTA, "🧮")
    STORE = Stage("STORE", _Ansi.BLUE, "💾")
    SEARCH = Stage("SEARCH", _Ansi.CYAN, "🔍")
    CLEAR = Stage("CLEAR", _Ansi.RED, "🧹")
    PIPELINE = Stage("PIPELINE", _Ansi.WHITE, "⚙️")
    COMPLETE = Stage("COMPLETE", _Ansi.GREEN, "✅")


def _fields(values: dict[str, Any]) -> str:
    if not values:
        return ""
    joined = " | ".join(f"{key}={value}" for key, value in values.items())
    return f" {_Ansi.GRAY}({joined}){_Ansi.RESET}"


class PipelineLogger:
    """Logger that prefixes every line with the coloured stage tag.

        plog = PipelineLogger("RetrievalPipeline")
        with plog.timed_step(PipelineStage.EMBED, "Embedding 3 chunk(s)"):
            vectors = await provider.generate_embeddings(chunks)
        plog.stats(matches=2)
    """

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    def step_start(self, stage: Stage, message: str, **fields: Any) -> None:
        self._logger.info(
            "%s%s%s [%s]%s %s%s%s%s",
            stage.color, _Ansi.BOLD, stage.icon, stage.label, _Ansi.RESET,
            stage.color, message, _Ansi.RESET, _fields(fields),
        )

    def step_complete(self, stage: Stage, message: str, **fields: Any) -> None:
        self._logger.info(
            "%s%s [%s]%s %s✓ %s%s%s",
            stage.color, stage.icon, stage.label, _Ansi.RESET,
            _Ansi.GREEN, message, _Ansi.RESET, _fields(fields),
        )

    def step_error(self, stage: Stage, message: str, error: Exception | None = None) -> None:
        cause = f" {_Ansi.DIM}→ {type(error).__name__}: {error}{_Ansi.RESET}" if error else ""
        self._logger.error(
            "%s%s❌ [%s]%s %s%s%s%s",
            _Ansi.RED, _Ansi.BOLD, stage.label, _Ansi.RESET,
            _Ansi.RED, message, _Ansi.RESET, cause,
        )

    def stats(self, **fields: Any) -> None:
        """One dimmed line of counters, e.g. matches found or rows deleted."""
        parts = " | ".join(f"{key}: {value}" for key, value in fields.items())
        self._logger.info("   %s📈 %s%s", _Ansi.GRAY, parts, _Ansi.RESET)

    @contextmanager
    def timed_step(self, stage: Stage, message: str, **fields: Any):
        """Log start and end of the wrapped block with its elapsed time."""
        self.step_start(stage, message, **fields)
        started = time.perf_counter()
        try:
            yield
        except Exception as exc:
            self.step_error(
                stage, f"{message} failed after {time.perf_counter() - started:.2f}s", error=exc
            )
            raise
        self.step_complete(stage, f"{message} ({time.perf_counter() - started:.2f}s)", **fields)
