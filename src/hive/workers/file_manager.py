"""File operations worker."""

import json
import logging
from pathlib import Path
from typing import Optional

import httpx

from hive.agent.base import Worker
from hive.config import settings
from hive.tools import ToolCatalogue
from hive.workers.registry import WorkerRegistry

logger = logging.getLogger(__name__)


class FileManager(Worker):
    """Reads, writes and organises files below a base directory."""

    ROLE = "file_manager"
    DESCRIPTION = (
        "Executes file operations. Operations: list_directory, read_file, write_file, "
        "append_file, insert_at_line, replace_text, delete_file, create_directory"
    )
    SYSTEM_PROMPT = """\
You are a file operation executor. You receive commands and execute them using your tools.

# Base Directory
{DIRECTORY}

# Rules
1. Parse the instruction to identify the operation and path
2. Call the appropriate tool
3. Return ONLY the raw result - no commentary, no analysis, no explanation

# Operations
- "List directory at X" or "List X" -> call list_directory with path X
- "Read file X" or "Read X" -> call read_file with path X
- "Write to X" with content -> call write_file
- "Append to X" -> call append_file
- "Insert at line N of X" -> call insert_at_line
- "Replace A with B in X" -> call replace_text
- "Delete X" -> call delete_file
- "Create directory X" -> call create_directory

# Available Tools
{TOOLS}

# Response Format
Return the tool result directly. Do not add any interpretation or suggestions.

Example:
Instruction: "List directory at '.'"
Action: Call list_directory(path=".")
Response: ["pyproject.toml", "src", ".gitignore"]

That's it. Just the data."""

    def __init__(
        self,
        base_dir: str | Path | None = None,
        *,
        endpoint: str | None = None,
        model: str | None = None,
        max_iterations: int | None = None,
        client: Optional[httpx.Client] = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            endpoint or settings.FILE_MANAGER_URL,
            model or settings.FILE_MANAGER_MODEL,
            max_iterations=(
                settings.worker_max_iterations if max_iterations is None else max_iterations
            ),
            directory=base_dir if base_dir is not None else settings.WORKSPACE_DIR,
            client=client,
            timeout=timeout,
        )

    def build_tools(self) -> ToolCatalogue:
        catalogue = ToolCatalogue()
        catalogue.register(
            "read_file", self.read_file, "Read the contents of a file",
            path="Path to the file to read",
        )
        catalogue.register(
            "write_file", self.write_file, "Write content to a file (creates or overwrites)",
            path="Path to the file to write", content="Content to write to the file",
        )
        catalogue.register(
            "append_file", self.append_file, "Append content to the end of a file",
            path="Path to the file to append to", content="Content to append",
        )
        catalogue.register(
            "insert_at_line", self.insert_at_line,
            "Insert content before a given line of a file (1-based)",
            path="Path to the file to edit",
            line_number="Line number the content is inserted at; one past the end appends",
            content="Content to insert",
        )
        catalogue.register(
            "replace_text", self.replace_text, "Replace every occurrence of a text in a file",
            path="Path to the file to edit", old_text="Exact text to find",
            new_text="Replacement text",
        )
        catalogue.register(
            "list_directory", self.list_directory, "List files and directories in a path",
            path="Path to the directory to list",
        )
        catalogue.register(
            "delete_file", self.delete_file, "Delete a file",
            path="Path to the file to delete",
        )
        catalogue.register(
            "create_directory", self.create_directory,
            "Create a directory (and parent directories if needed)",
            path="Path to the directory to create",
        )
        return catalogue

    def _resolve(self, path: str) -> Path:
        return self.directory / path

    # -----------------------------------------------------------------------
    # Tools
    # -----------------------------------------------------------------------
    def read_file(self, path: str) -> str:
        try:
            return self._resolve(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return f"Error reading file: {exc}"

    def write_file(self, path: str, content: str) -> str:
        try:
            self._resolve(path).write_text(content, encoding="utf-8")
        except OSError as exc:
            return f"Error writing file: {exc}"
        return f"Successfully wrote to {path}"

    def append_file(self, path: str, content: str) -> str:
        try:
            with self._resolve(path).open("a", encoding="utf-8") as f:
                f.write(content)
        except OSError as exc:
            return f"Error appending to file: {exc}"
        return f"Successfully appended to {path}"

    def insert_at_line(self, path: str, line_number: int, content: str) -> str:
        try:
            index = int(line_number) - 1
        except (TypeError, ValueError):
            return f"Error inserting into file: invalid line number {line_number!r}"

        target = self._resolve(path)
        try:
            lines = target.read_text(encoding="utf-8").splitlines(keepends=True)
        except (OSError, UnicodeDecodeError) as exc:
            return f"Error inserting into file: {exc}"

        if index < 0 or index > len(lines):
            return (
                f"Error inserting into file: line {line_number} is out of range "
                f"(file has {len(lines)} lines)"
            )
        if not content.endswith("\n"):
            content += "\n"
        if index == len(lines) and lines and not lines[-1].endswith("\n"):
            lines[-1] += "\n"
        lines.insert(index, content)

        try:
            target.write_text("".join(lines), encoding="utf-8")
        except OSError as exc:
            return f"Error inserting into file: {exc}"
        return f"Successfully inserted content at line {line_number} of {path}"

    def replace_text(self, path: str, old_text: str, new_text: str) -> str:
        if not old_text:
            return "Error replacing text: old_text must not be empty"

        target = self._resolve(path)
        try:
            text = target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return f"Error replacing text: {exc}"

        count = text.count(old_text)
        if count == 0:
            return f"Error replacing text: text not found in {path}"
        try:
            target.write_text(text.replace(old_text, new_text), encoding="utf-8")
        except OSError as exc:
            return f"Error replacing text: {exc}"
        return f"Successfully replaced {count} occurrence(s) in {path}"

    def list_directory(self, path: str = ".") -> str:
        try:
            entries = sorted(entry.name for entry in self._resolve(path).iterdir())
        except OSError as exc:
            return f"Error listing directory: {exc}"
        return json.dumps(entries)

    def delete_file(self, path: str) -> str:
        try:
            self._resolve(path).unlink()
        except OSError as exc:
            return f"Error deleting file: {exc}"
        return f"Successfully deleted {path}"

    def create_directory(self, path: str) -> str:
        try:
            self._resolve(path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            return f"Error creating directory: {exc}"
        return f"Successfully created directory {path}"


def register_file_manager(registry: WorkerRegistry, **kwargs) -> None:
    """Register the file manager worker; *kwargs* go to :class:`FileManager`."""
    registry.register(FileManager.ROLE, lambda: FileManager(**kwargs))
