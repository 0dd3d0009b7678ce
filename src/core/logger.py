"""
Community Bot - Logger Module
=============================

Tree-style console and file logging with Eastern timestamps.

DESIGN:
    Every log line goes to stdout and to a dated log file. Structured
    details are printed as a small tree under the title so a single event
    (a ticket opened, a sweep finished) reads as one block.

    - Dated folders under logs/ with 7-day retention
    - Separate errors file for quick triage
    - Run ID per process to correlate restarts
    - Optional Discord webhook for error alerts (aiohttp)

Author: حَـــــنَّـــــا
"""

import os
import uuid
import asyncio
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import aiohttp
from zoneinfo import ZoneInfo


# =============================================================================
# Constants
# =============================================================================

LOGS_DIR = Path("logs")
"""Root directory for dated log folders."""

LOG_RETENTION_DAYS = 7
"""Dated folders older than this are removed on startup."""

NY_TZ = ZoneInfo("America/New_York")

Details = Sequence[Tuple[str, str]]


# =============================================================================
# Tree Logger
# =============================================================================

class TreeLogger:
    """
    Logger that renders structured details as a tree.

    Attributes:
        run_id: Short identifier for this process.
        log_file: Main log file for today.
        error_file: Errors-only log file for today.
    """

    def __init__(self, name: str = "Community") -> None:
        self.run_id: str = uuid.uuid4().hex[:8]
        self._name = name
        self._webhook_url: Optional[str] = None

        today = datetime.now(NY_TZ).strftime("%Y-%m-%d")
        self.log_dir = LOGS_DIR / today
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / f"{name}-{today}.log"
        self.error_file = self.log_dir / f"{name}-Errors-{today}.log"

        self._cleanup_old_logs()
        self._write_session_header()

    def set_webhook(self, url: Optional[str]) -> None:
        """Send error details to this Discord webhook from now on."""
        self._webhook_url = url

    # =========================================================================
    # Housekeeping
    # =========================================================================

    def _cleanup_old_logs(self) -> None:
        """Remove dated folders past the retention window."""
        if not LOGS_DIR.exists():
            return

        now = datetime.now()
        removed = 0
        for folder in LOGS_DIR.iterdir():
            if not folder.is_dir():
                continue
            try:
                folder_date = datetime.strptime(folder.name, "%Y-%m-%d")
            except ValueError:
                continue  # errors/, anything not date-named
            if (now - folder_date).days <= LOG_RETENTION_DAYS:
                continue
            for entry in folder.iterdir():
                entry.unlink()
            folder.rmdir()
            removed += 1

        if removed:
            print(f"[LOG CLEANUP] Removed {removed} old log folders")

    def _write_session_header(self) -> None:
        stamp = datetime.now(NY_TZ).strftime("%I:%M:%S %p %Z")
        header = (
            "\n============================================================\n"
            f"NEW SESSION - RUN ID: {self.run_id}\n"
            f"[{stamp}]\n"
            "============================================================\n"
        )
        self._append(self.log_file, header)

    # =========================================================================
    # Output
    # =========================================================================

    @staticmethod
    def _append(path: Path, text: str) -> None:
        with open(path, "a", encoding="utf-8") as f:
            f.write(text)

    def _timestamp(self) -> str:
        return datetime.now(NY_TZ).strftime("[%I:%M:%S %p %Z]")

    def _write(
        self,
        message: str,
        emoji: str = "",
        include_timestamp: bool = True,
        is_error: bool = False,
    ) -> None:
        """Print a line and append it to today's files."""
        line = f"{emoji} {message}" if emoji else message
        if include_timestamp:
            line = f"{self._timestamp()} {line}"

        print(line)
        self._append(self.log_file, f"{line}\n")
        if is_error:
            self._append(self.error_file, f"{line}\n")

    def _write_block(
        self,
        title: str,
        details: Optional[Details],
        emoji: str,
        is_error: bool = False,
    ) -> None:
        """Write a title line followed by its details as tree branches."""
        if not details:
            self._write(title, emoji, is_error=is_error)
            return

        self._append(self.log_file, "\n")
        self._write(title, emoji, is_error=is_error)
        last = len(details) - 1
        for i, (key, value) in enumerate(details):
            branch = "└─" if i == last else "├─"
            self._write(f"  {branch} {key}: {value}", include_timestamp=False, is_error=is_error)
        self._append(self.log_file, "\n")

    # =========================================================================
    # Tree Formatting
    # =========================================================================

    def tree(self, title: str, items: Details, emoji: str = "📦") -> None:
        """
        Log a titled block of key/value pairs.

        Example output:
            [09:00:01 AM EST] 🎂 Birthday Check Complete
              ├─ Guilds: 3
              └─ Announced: 2
        """
        self._write_block(title, list(items), emoji)

    def tree_nested(
        self,
        title: str,
        sections: List[Tuple[str, Details]],
        emoji: str = "📦",
    ) -> None:
        """Log a two-level tree of named sections."""
        self._append(self.log_file, "\n")
        self._write(title, emoji)

        last_section = len(sections) - 1
        for i, (section, items) in enumerate(sections):
            self._write(
                f"  {'└─' if i == last_section else '├─'} {section}",
                include_timestamp=False,
            )
            rail = "   " if i == last_section else "│  "
            last_item = len(items) - 1
            for j, (key, value) in enumerate(items):
                branch = "└─" if j == last_item else "├─"
                self._write(f"  {rail} {branch} {key}: {value}", include_timestamp=False)

        self._append(self.log_file, "\n")

    # =========================================================================
    # Log Levels
    # =========================================================================

    def debug(self, msg: str, details: Optional[Details] = None) -> None:
        """Only written when the DEBUG environment variable is set."""
        if os.getenv("DEBUG"):
            self._write_block(msg, details, "🔍")

    def info(self, msg: str, details: Optional[Details] = None) -> None:
        self._write_block(msg, details, "ℹ️")

    def success(self, msg: str, details: Optional[Details] = None) -> None:
        self._write_block(msg, details, "✅")

    def warning(self, msg: str, details: Optional[Details] = None) -> None:
        self._write_block(msg, details, "⚠️")

    def error(self, msg: str, details: Optional[Details] = None) -> None:
        """
        Log an error to both files.

        When details are given and a webhook is set, the same block is
        posted to Discord in the background.
        """
        self._write_block(msg, details, "❌", is_error=True)
        if details and self._webhook_url:
            try:
                asyncio.get_running_loop().create_task(
                    self._send_webhook_error(msg, list(details))
                )
            except RuntimeError:
                pass  # no loop (startup, tests)

    def critical(self, msg: str, details: Optional[Details] = None) -> None:
        self._write_block(msg, details, "🚨", is_error=True)

    # =========================================================================
    # Webhook
    # =========================================================================

    async def _send_webhook_error(self, title: str, details: List[Tuple[str, str]]) -> None:
        """Post an error embed to the configured webhook."""
        if not self._webhook_url:
            return

        payload = {
            "embeds": [{
                "title": f"❌ {title}"[:256],
                "description": "\n".join(f"**{k}:** {v}" for k, v in details)[:4000],
                "color": 0xDC3545,
                "timestamp": datetime.now(NY_TZ).isoformat(),
                "footer": {"text": f"{self._name} | Run ID: {self.run_id}"},
            }]
        }

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self._webhook_url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=10),
                ) as resp:
                    if resp.status not in (200, 204):
                        print(f"Webhook error: {resp.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            print(f"Failed to send webhook: {e}")


# =============================================================================
# Global Instance
# =============================================================================

logger = TreeLogger()
"""Shared logger used by every module."""


__all__ = ["logger", "TreeLogger", "NY_TZ"]
