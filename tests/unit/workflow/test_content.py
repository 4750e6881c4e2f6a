"""Tests for MarkdownContentCapture."""

from pathlib import Path

import pytest

from docflow.conversation.models import DocumentUpdate, UpdateType
from docflow.workflow.content import MarkdownContentCapture, apply_update, split_sections

DOCUMENT = """# Budget Planner PRD

## Problem Statement

Students lose track of shared expenses across group trips.

## User Personas

"""


@pytest.fixture
def capture(tmp_path: Path) -> MarkdownContentCapture:
    (tmp_path / "prd.md").write_text(DOCUMENT, encoding="utf-8")
    return MarkdownContentCapture(tmp_path)


class TestGetSections:
    @pytest.mark.asyncio
    async def test_headings_in_order(self, capture):
        sections = await capture.get_sections("prd.md")
        assert sections == ["Budget Planner PRD", "Problem Statement", "User Personas"]

    @pytest.mark.asyncio
    async def test_missing_file_has_no_sections(self, capture):
        assert await capture.get_sections("missing.md") == []

    def test_deeper_headings_ignored(self):
        sections = split_sections("## Kept\nbody\n#### Too deep\nmore\n")
        assert [heading for heading, _ in sections] == ["Kept"]


class TestQualityScore:
    @pytest.mark.asyncio
    async def test_missing_file_scores_zero(self, capture):
        assert await capture.quality_score("missing.md", ["Problem Statement"]) == 0.0

    @pytest.mark.asyncio
    async def test_empty_sections_not_counted(self, capture):
        score = await capture.quality_score("prd.md", ["Problem Statement", "User Personas"])

        # 19 words of 500, one of two required sections filled
        assert score == pytest.approx(0.27)

    @pytest.mark.asyncio
    async def test_no_required_sections_gives_full_section_factor(self, capture):
        score = await capture.quality_score("prd.md", [])
        assert score >= 0.5


class TestUpdateDocument:
    """Tests for applying section updates."""

    @pytest.mark.asyncio
    async def test_append_to_existing_section(self, capture, tmp_path):
        result = await capture.update_document(
            "prd.md",
            [DocumentUpdate(section="User Personas", content="Budget-conscious students")],
        )

        assert result.success is True
        assert result.updated_sections == ["User Personas"]
        text = (tmp_path / "prd.md").read_text(encoding="utf-8")
        assert text.endswith("## User Personas\n\nBudget-conscious students\n")

    @pytest.mark.asyncio
    async def test_missing_section_created(self, capture, tmp_path):
        await capture.update_document(
            "prd.md", [DocumentUpdate(section="Success Criteria", content="1000 weekly users")]
        )

        sections = await capture.get_sections("prd.md")
        assert sections[-1] == "Success Criteria"

    @pytest.mark.asyncio
    async def test_new_file_created(self, capture, tmp_path):
        await capture.update_document(
            "docs/new.md", [DocumentUpdate(section="Overview", content="First draft")]
        )

        assert (tmp_path / "docs" / "new.md").read_text(encoding="utf-8") == (
            "## Overview\n\nFirst draft\n"
        )

    @pytest.mark.asyncio
    async def test_failed_update_writes_nothing(self, capture, tmp_path):
        result = await capture.update_document(
            "prd.md",
            [
                DocumentUpdate(
                    section="Problem Statement",
                    content="x",
                    update_type=UpdateType.INSERT,
                )
            ],
        )

        assert result.success is False
        assert "insert requires a position" in result.errors[0]
        assert (tmp_path / "prd.md").read_text(encoding="utf-8") == DOCUMENT


class TestApplyUpdate:
    def test_replace(self):
        content = "## Goals\n\nold goal\n\n## Risks\n\nnone\n"
        update = DocumentUpdate(section="Goals", content="new goal", update_type=UpdateType.REPLACE)

        assert apply_update(content, update) == "## Goals\n\nnew goal\n\n## Risks\n\nnone\n"

    def test_prepend(self):
        content = "## Goals\n\nsecond\n"
        update = DocumentUpdate(section="goals", content="first", update_type=UpdateType.PREPEND)

        assert apply_update(content, update) == "## Goals\n\nfirst\n\nsecond\n"

    def test_insert_at_position(self):
        content = "## Steps\n\none\nthree\n"
        update = DocumentUpdate(
            section="Steps", content="two", update_type=UpdateType.INSERT, position=1
        )

        assert apply_update(content, update) == "## Steps\n\none\ntwo\nthree\n"
