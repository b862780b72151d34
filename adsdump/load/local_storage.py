"""
Local Storage - Load Layer

Console rendering and optional JSON persistence of fetched documents.
"""

import json
import logging
import os
import sys
import time
from typing import Optional, TextIO

from ..extract.schemas import AdAccount

logger = logging.getLogger(__name__)

UNSAFE_NAME_CHARS = "/\\:"


def sanitize_name(name: str) -> str:
    """Replace path separators and ':' so an account name is a safe directory"""
    return "".join("_" if ch in UNSAFE_NAME_CHARS else ch for ch in name)


class OutputSink:
    """Renders documents to a stream and saves them under ``output_dir``"""

    def __init__(self, output_dir: Optional[str] = None, stream: Optional[TextIO] = None):
        self.output_dir = output_dir
        self.stream = stream

    def _write(self, name: str, text: str):
        """Console rendering is best effort; persistence must still happen"""
        try:
            print(text, file=self.stream or sys.stdout)
        except (OSError, UnicodeError) as e:
            logger.warning(f"⚠️  Could not display {name} on console: {e}")

    def prepare(self) -> Optional[str]:
        """Create the output root; raises OSError when it cannot be created"""
        if not self.output_dir:
            return None
        os.makedirs(self.output_dir, exist_ok=True)
        return self.output_dir

    def account_dir(self, account: AdAccount) -> Optional[str]:
        """
        Create the directory for one account's documents

        Args:
            account: Discovered account

        Returns:
            str: ``{output_dir}/{account_id}_{sanitized name}``, or None when
            persistence is disabled

        Raises:
            OSError: Directory could not be created
        """
        if not self.output_dir:
            return None
        path = os.path.join(
            self.output_dir, f"{account.account_id}_{sanitize_name(account.name)}"
        )
        os.makedirs(path, exist_ok=True)
        return path

    def emit(self, name: str, body: bytes, directory: Optional[str] = None) -> Optional[str]:
        """
        Pretty-print a document and save it when persistence is enabled

        Args:
            name: Resource label, used as header and filename prefix
            body: Raw JSON document
            directory: Target directory; defaults to the output root

        Returns:
            str: Path of the saved file, or None if nothing was saved
        """
        try:
            document = json.loads(body)
        except ValueError:
            logger.warning(f"Invalid JSON from {name}")
            self._write(name, f"\n=== {name} (RAW) ===\n{body.decode('utf-8', errors='replace')}\n")
            return None

        formatted = json.dumps(document, indent=2, ensure_ascii=False)
        self._write(name, f"\n=== {name} ===\n{formatted}\n")

        directory = directory or self.output_dir
        if not directory:
            return None

        filepath = os.path.join(directory, f"{name}_{int(time.time())}.json")
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                f.write(formatted)
        except OSError as e:
            logger.error(f"❌ Failed writing {filepath}: {e}")
            return None

        logger.info(f"Saved to: {filepath}")
        return filepath
