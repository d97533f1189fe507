"""Unit tests for the interactive template picker."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from genry.cli._prompts import (
    TemplateCompleter,
    choice_labels,
    match_template,
    select_template,
)
from genry.core.types import Template


def _t(name: str, description: str | None = None) -> Template:
    return Template(name=name, description=description, generate=lambda context, config: None)


@pytest.fixture
def templates() -> list[Template]:
    return [_t("Component", "React component"), _t("Hook", "Custom hook"), _t("Store")]


class TestTemplateCompleter:
    def _complete(self, templates: list[Template], text: str) -> list[str]:
        completer = TemplateCompleter(templates)
        document = Document(text, cursor_position=len(text))
        return [c.text for c in completer.get_completions(document, CompleteEvent())]

    def test_empty_text_lists_everything(self, templates: list[Template]) -> None:
        assert self._complete(templates, "") == ["Component", "Hook", "Store"]

    def test_filters_by_name_and_description(self, templates: list[Template]) -> None:
        assert self._complete(templates, "custom") == ["Hook"]
        assert self._complete(templates, "o") == ["Component", "Hook", "Store"]

    def test_completion_replaces_typed_text(self, templates: list[Template]) -> None:
        completer = TemplateCompleter(templates)
        (completion,) = completer.get_completions(Document("stor", 4), CompleteEvent())
        assert completion.start_position == -4
        assert completion.text == "Store"

    def test_duplicate_names_get_distinct_texts(self) -> None:
        first, second = _t("Same"), _t("Same")
        assert self._complete([first, second], "") == ["Same", "Same (2)"]


class TestChoiceLabels:
    def test_unique_names_are_unchanged(self, templates: list[Template]) -> None:
        labels = choice_labels(templates)
        assert [labels[id(t)] for t in templates] == ["Component", "Hook", "Store"]

    def test_counter_avoids_existing_names(self) -> None:
        first, second, taken = _t("Page"), _t("Page"), _t("Page (2)")
        labels = choice_labels([first, taken, second])
        assert labels[id(first)] == "Page"
        assert labels[id(taken)] == "Page (2)"
        assert labels[id(second)] == "Page (3)"
        assert len(set(labels.values())) == 3


class TestMatchTemplate:
    def test_exact_name_wins(self) -> None:
        exact, other = _t("Page"), _t("Page layout")
        assert match_template("Page", [other, exact]) is exact

    def test_label_selects_later_duplicate(self) -> None:
        first, second = _t("Same"), _t("Same")
        assert match_template("Same", [first, second]) is first
        assert match_template("Same (2)", [first, second]) is second

    def test_falls_back_to_best_suggestion(self, templates: list[Template]) -> None:
        assert match_template("hoo", templates) is templates[1]

    @pytest.mark.parametrize("text", ["", "  ", "nothing"])
    def test_no_match(self, templates: list[Template], text: str) -> None:
        assert match_template(text, templates) is None


class TestSelectTemplate:
    @patch("genry.cli._prompts.PromptSession")
    def test_returns_selected_template(
        self, mock_session_cls: MagicMock, templates: list[Template]
    ) -> None:
        mock_session_cls.return_value.prompt_async = AsyncMock(return_value="Hook")

        assert asyncio.run(select_template(templates)) is templates[1]

    @patch("genry.cli._prompts.PromptSession")
    def test_reprompts_until_match(
        self, mock_session_cls: MagicMock, templates: list[Template]
    ) -> None:
        prompt = AsyncMock(side_effect=["", "unknown", "store"])
        mock_session_cls.return_value.prompt_async = prompt

        assert asyncio.run(select_template(templates)) is templates[2]
        assert prompt.await_count == 3

    @patch("genry.cli._prompts.PromptSession")
    def test_second_duplicate_is_selectable(self, mock_session_cls: MagicMock) -> None:
        first, second = _t("Same"), _t("Same")
        mock_session_cls.return_value.prompt_async = AsyncMock(return_value="Same (2)")

        assert asyncio.run(select_template([first, second])) is second

    @pytest.mark.parametrize("error", [KeyboardInterrupt, EOFError])
    @patch("genry.cli._prompts.PromptSession")
    def test_cancel_returns_none(
        self, mock_session_cls: MagicMock, error: type[BaseException], templates: list[Template]
    ) -> None:
        mock_session_cls.return_value.prompt_async = AsyncMock(side_effect=error)

        assert asyncio.run(select_template(templates)) is None

    def test_empty_sequence_raises(self) -> None:
        with pytest.raises(ValueError):
            asyncio.run(select_template([]))
