"""Document content capture over markdown files.

Documents are plain markdown. A section is a ``#``, ``##`` or ``###``
heading together with the text up to the next such heading.
"""

import asyncio
import re
from abc import ABC, abstractmethod
from pathlib import Path

from docflow.conversation.models import DocumentUpdate, UpdateResult, UpdateType
from docflow.observability.logging import get_logger

logger = get_logger(__name__)

HEADING_PATTERN = re.compile(r"^(#{1,3})[ \t]+(.+?)[ \t]*$", re.MULTILINE)

# Quality factors: word count (target 500 words) and filled required sections
QUALITY_TARGET_WORDS = 500
QUALITY_WORD_WEIGHT = 0.5
QUALITY_SECTION_WEIGHT = 0.5
# A section counts as filled when its body exceeds placeholder length
MIN_FILLED_SECTION_CHARS = 20


def headings_match(heading: str, section: str) -> bool:
    """Case-insensitive containment in either direction."""
    h = heading.lower()
    s = section.lower()
    return h in s or s in h


class ContentCapture(ABC):
    """Reads and writes sections of authored documents."""

    @abstractmethod
    async def update_document(
        self, document_path: str, updates: list[DocumentUpdate]
    ) -> UpdateResult:
        """Apply section updates to a document."""
        pass

    @abstractmethod
    async def get_sections(self, document_path: str) -> list[str]:
        """Get the document's section headings in order."""
        pass

    @abstractmethod
    async def quality_score(
        self, document_path: str, required_sections: list[str]
    ) -> float:
        """Score document quality in [0.0, 1.0]."""
        pass


class MarkdownContentCapture(ContentCapture):
    """Markdown-file implementation of ContentCapture.

    Relative paths resolve against ``workspace_root``. A missing file is
    not an error: it has no sections and a quality score of 0.0, and it
    is created on first update.
    """

    def __init__(self, workspace_root: str | Path = ".") -> None:
        self._root = Path(workspace_root)

    def _resolve(self, document_path: str) -> Path:
        path = Path(document_path)
        return path if path.is_absolute() else self._root / path

    async def _read(self, document_path: str) -> str | None:
        path = self._resolve(document_path)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None

    async def _write(self, document_path: str, content: str) -> None:
        path = self._resolve(document_path)

        def write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

        await asyncio.to_thread(write)

    async def get_sections(self, document_path: str) -> list[str]:
        """Get the document's headings, or [] when it does not exist."""
        content = await self._read(document_path)
        if content is None:
            return []
        return [match.group(2) for match in HEADING_PATTERN.finditer(content)]

    async def quality_score(
        self, document_path: str, required_sections: list[str]
    ) -> float:
        """Word-count factor plus filled-required-section factor.

        Each factor contributes up to 0.5. With no required sections the
        section factor is full.
        """
        content = await self._read(document_path)
        if content is None:
            return 0.0

        word_count = len(content.split())
        word_factor = min(word_count / QUALITY_TARGET_WORDS, 1.0) * QUALITY_WORD_WEIGHT

        if not required_sections:
            return round(word_factor + QUALITY_SECTION_WEIGHT, 2)

        bodies = split_sections(content)
        filled = 0
        for section in required_sections:
            for heading, body in bodies:
                if headings_match(heading, section):
                    if len(body.strip()) > MIN_FILLED_SECTION_CHARS:
                        filled += 1
                    break
        section_factor = filled / len(required_sections) * QUALITY_SECTION_WEIGHT
        return round(word_factor + section_factor, 2)

    async def update_document(
        self, document_path: str, updates: list[DocumentUpdate]
    ) -> UpdateResult:
        """Apply updates in order and write the file once.

        Nothing is written if any update fails.
        """
        content = await self._read(document_path) or ""
        updated_sections: list[str] = []
        errors: list[str] = []

        for update in updates:
            try:
                content = apply_update(content, update)
                updated_sections.append(update.section)
            except ValueError as e:
                errors.append(f"Failed to update section {update.section}: {e}")

        if not errors and updated_sections:
            await self._write(document_path, content)

        logger.debug(
            "document_updated",
            document_path=document_path,
            updated_sections=updated_sections,
            error_count=len(errors),
        )

        summary = (
            f"Updated {len(updated_sections)} section(s): {', '.join(updated_sections)}"
            if updated_sections
            else "No changes"
        )
        return UpdateResult(
            success=not errors,
            updated_sections=updated_sections,
            errors=errors,
            changes_summary=summary,
        )


def split_sections(content: str) -> list[tuple[str, str]]:
    """Split markdown into (heading, body) pairs. Preamble text is dropped."""
    matches = list(HEADING_PATTERN.finditer(content))
    sections: list[tuple[str, str]] = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(content)
        sections.append((match.group(2), content[match.end() : end]))
    return sections


def apply_update(content: str, update: DocumentUpdate) -> str:
    """Return content with one section update applied.

    A missing section is appended as a new ``##`` section.
    """
    matches = list(HEADING_PATTERN.finditer(content))
    target = None
    for i, match in enumerate(matches):
        if headings_match(match.group(2), update.section):
            target = i
            break

    new_text = update.content.strip()
    if target is None:
        prefix = content.rstrip()
        separator = "\n\n" if prefix else ""
        return f"{prefix}{separator}## {update.section}\n\n{new_text}\n"

    heading = matches[target]
    body_start = heading.end()
    body_end = matches[target + 1].start() if target + 1 < len(matches) else len(content)
    body = content[body_start:body_end].strip()

    if update.update_type == UpdateType.REPLACE:
        new_body = new_text
    elif update.update_type == UpdateType.PREPEND:
        new_body = f"{new_text}\n\n{body}" if body else new_text
    elif update.update_type == UpdateType.APPEND:
        new_body = f"{body}\n\n{new_text}" if body else new_text
    elif update.update_type == UpdateType.INSERT:
        if update.position is None:
            raise ValueError("insert requires a position")
        lines = body.splitlines()
        if not 0 <= update.position <= len(lines):
            raise ValueError(f"position {update.position} out of range")
        lines.insert(update.position, new_text)
        new_body = "\n".join(lines)
    else:
        raise ValueError(f"unsupported update type {update.update_type}")

    tail = content[body_end:]
    joiner = "\n\n" if tail else "\n"
    return f"{content[:body_start]}\n\n{new_body}{joiner}{tail}"
