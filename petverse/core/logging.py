"""
Lightweight logger used across the engine.
Events are short CamelCase names followed by key=value pairs; colorama
provides the level colors.
"""
from __future__ import annotations
import sys
from datetime import datetime, timezone
from typing import Literal, Any, Dict, Optional, TextIO

from colorama import Fore, Style, init as colorama_init

Level = Literal["DEBUG","INFO","WARN","ERROR"]

colorama_init()
COLORS = {
    "DEBUG": Fore.BLUE,
    "INFO": Fore.GREEN,
    "WARN": Fore.YELLOW,
    "ERROR": Fore.RED
}
RESET = Style.RESET_ALL

class Logger:
    _order = {"DEBUG":10,"INFO":20,"WARN":30,"ERROR":40}
    def __init__(self, level: Level = "INFO", stream: Optional[TextIO] = None, context: Optional[Dict[str, Any]] = None):
        self.threshold = self._order[level]
        self.stream = stream
        self.context: Dict[str, Any] = dict(context or {})
        self._parent: Optional[Logger] = None

    def set_level(self, level: Level):
        root = self._root()
        root.threshold = self._order.get(level, 20)

    def bind(self, **context: Any) -> "Logger":
        """Return a child logger that stamps ``context`` on every event.

        Children share the root's threshold, so ``set_level`` on either side
        affects both.
        """
        child = Logger(stream=self.stream, context={**self.context, **context})
        child._parent = self._root()
        return child

    def _root(self) -> "Logger":
        return self._parent if self._parent is not None else self

    def is_enabled(self, lvl: Level) -> bool:
        return self._order[lvl] >= self._root().threshold

    def _emit(self, lvl: Level, msg: str, **extra: Any):
        if not self.is_enabled(lvl):
            return
        ts = datetime.now(timezone.utc).isoformat(timespec="seconds")
        fields = {**self.context, **extra}
        extras = ""
        if fields:
            kv = " ".join(f"{k}={v}" for k,v in fields.items())
            extras = " " + kv
        color = COLORS[lvl]
        out = self.stream or self._root().stream or sys.stdout
        out.write(f"{color}{ts} [{lvl}] {msg}{extras}{RESET}\n")

    def debug(self, msg: str, **kw): self._emit("DEBUG", msg, **kw)
    def info(self, msg: str, **kw): self._emit("INFO", msg, **kw)
    def warn(self, msg: str, **kw): self._emit("WARN", msg, **kw)
    def error(self, msg: str, **kw): self._emit("ERROR", msg, **kw)

logger = Logger("INFO")
