import re
import uuid
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, List, Sequence, Tuple

from draftdesk.core.errors import DraftNotFoundError, DraftValidationError
from draftdesk.domains.drafts.entities import (
    Draft, Revision, RevisionKind, utcnow, HTML_BLOCK_END_RE, HTML_BREAK_RE, HTML_TAG_RE
)

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


class DiffGranularity(str, Enum):
    WORD = "word"
    LINE = "line"


class DiffSegmentType(str, Enum):
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class DiffSegment:
    """Участок сравнения: последовательность токенов с одной пометкой"""
    type: DiffSegmentType
    text: str
    tokens: Tuple[str, ...]


def count_words(content: str) -> int:
    """Количество слов: непустые токены после разбиения по пробельным символам.

    HTML не учитывается: ``<p>Hello world</p>`` дает два слова.
    """
    return len(tokenize_words(content))


def tokenize_words(content: str) -> List[str]:
    return [token for token in _WHITESPACE_RE.split(content) if token]


def tokenize_lines(content: str) -> List[str]:
    """Разбиение HTML на текстовые блоки (абзацы, переносы строк)"""
    text = HTML_BLOCK_END_RE.sub("\n", content)
    text = HTML_BREAK_RE.sub("\n", text)
    text = HTML_TAG_RE.sub("", text)
    return [line.strip() for line in text.split("\n") if line.strip()]


def _lcs_table(base: Sequence[str], target: Sequence[str]) -> List[List[int]]:
    """Таблица длин LCS для суффиксов: table[i][j] = LCS(base[i:], target[j:])"""
    rows = len(base)
    cols = len(target)
    table = [[0] * (cols + 1) for _ in range(rows + 1)]
    for i in range(rows - 1, -1, -1):
        row = table[i]
        below = table[i + 1]
        for j in range(cols - 1, -1, -1):
            if base[i] == target[j]:
                row[j] = below[j + 1] + 1
            else:
                row[j] = max(below[j], row[j + 1])
    return table


class _SegmentBuilder:
    """Склейка токенов в сегменты; внутри разрыва сначала removed, затем added"""

    def __init__(self, joiner: str):
        self.joiner = joiner
        self.segments: List[DiffSegment] = []
        self._unchanged: List[str] = []
        self._removed: List[str] = []
        self._added: List[str] = []

    def _emit(self, segment_type: DiffSegmentType, tokens: List[str]) -> None:
        if tokens:
            self.segments.append(
                DiffSegment(type=segment_type, text=self.joiner.join(tokens), tokens=tuple(tokens))
            )

    def _flush_gap(self) -> None:
        self._emit(DiffSegmentType.REMOVED, self._removed)
        self._emit(DiffSegmentType.ADDED, self._added)
        self._removed = []
        self._added = []

    def _flush_unchanged(self) -> None:
        self._emit(DiffSegmentType.UNCHANGED, self._unchanged)
        self._unchanged = []

    def unchanged(self, tokens: Sequence[str]) -> None:
        if not tokens:
            return
        self._flush_gap()
        self._unchanged.extend(tokens)

    def removed(self, tokens: Sequence[str]) -> None:
        if not tokens:
            return
        self._flush_unchanged()
        self._removed.extend(tokens)

    def added(self, tokens: Sequence[str]) -> None:
        if not tokens:
            return
        self._flush_unchanged()
        self._added.extend(tokens)

    def finish(self) -> List[DiffSegment]:
        self._flush_unchanged()
        self._flush_gap()
        return self.segments


def diff_tokens(
    base: Sequence[str],
    target: Sequence[str],
    joiner: str = " ",
    max_tokens: Optional[int] = None
) -> List[DiffSegment]:
    """Сравнение двух последовательностей токенов через LCS.

    Общие префикс и суффикс отрезаются до построения таблицы. При обходе
    совпадающие токены сопоставляются сразу (самое раннее совпадение),
    при равенстве длин LCS предпочтение отдается удалению из базы.

    Если измененная середина длиннее ``max_tokens`` хотя бы с одной
    стороны, выбрасывается DraftValidationError.
    """
    start = 0
    while start < len(base) and start < len(target) and base[start] == target[start]:
        start += 1

    base_end = len(base)
    target_end = len(target)
    while base_end > start and target_end > start and base[base_end - 1] == target[target_end - 1]:
        base_end -= 1
        target_end -= 1

    builder = _SegmentBuilder(joiner)
    builder.unchanged(base[:start])

    middle_base = base[start:base_end]
    middle_target = target[start:target_end]
    if max_tokens is not None and (len(middle_base) > max_tokens or len(middle_target) > max_tokens):
        raise DraftValidationError(
            f"Revisions differ in more than {max_tokens} tokens; diff is too large to compute"
        )
    table = _lcs_table(middle_base, middle_target)

    i = j = 0
    while i < len(middle_base) and j < len(middle_target):
        if middle_base[i] == middle_target[j]:
            builder.unchanged([middle_base[i]])
            i += 1
            j += 1
        elif table[i + 1][j] >= table[i][j + 1]:
            builder.removed([middle_base[i]])
            i += 1
        else:
            builder.added([middle_target[j]])
            j += 1

    builder.removed(middle_base[i:])
    builder.added(middle_target[j:])
    builder.unchanged(base[base_end:])
    return builder.finish()


def diff_contents(
    base_content: str,
    target_content: str,
    granularity: DiffGranularity = DiffGranularity.WORD,
    max_tokens: Optional[int] = None
) -> List[DiffSegment]:
    if granularity is DiffGranularity.LINE:
        return diff_tokens(
            tokenize_lines(base_content), tokenize_lines(target_content), joiner="\n", max_tokens=max_tokens
        )
    return diff_tokens(
        tokenize_words(base_content), tokenize_words(target_content), joiner=" ", max_tokens=max_tokens
    )


def coerce_granularity(granularity) -> DiffGranularity:
    if isinstance(granularity, DiffGranularity):
        return granularity
    try:
        return DiffGranularity(granularity)
    except ValueError:
        raise DraftValidationError(f"Unsupported diff granularity: {granularity}")


class RevisionLedger:
    """Журнал ревизий черновика: только добавление, порядок по времени добавления"""

    def __init__(self, max_diff_tokens: Optional[int] = None):
        self.max_diff_tokens = max_diff_tokens

    def append(
        self,
        draft: Draft,
        content: str,
        author_id: str,
        is_autosave: bool = False,
        note: Optional[str] = None
    ) -> Revision:
        """Создание новой ревизии и добавление ее в конец истории"""
        revision = Revision(
            id=f"draft-revision-{uuid.uuid4()}",
            draft_id=draft.id,
            author_id=author_id,
            title_snapshot=draft.title,
            content=content,
            word_count=count_words(content),
            kind=RevisionKind.AUTOSAVE if is_autosave else RevisionKind.SAVE,
            created_at=utcnow(),
            note=note
        )
        draft.revisions.append(revision)
        logger.debug(f"Revision {revision.id} appended to draft {draft.id} ({revision.word_count} words)")
        return revision

    def list(self, draft: Draft) -> List[Revision]:
        """Все ревизии, от самой старой к самой новой"""
        return list(draft.revisions)

    def get(self, draft: Draft, revision_id: str) -> Revision:
        for revision in draft.revisions:
            if revision.id == revision_id:
                return revision
        raise DraftNotFoundError(f"Revision {revision_id} not found for draft {draft.id}")

    def diff(
        self,
        draft: Draft,
        base_revision_id: str,
        target_revision_id: str,
        granularity: DiffGranularity = DiffGranularity.WORD
    ) -> List[DiffSegment]:
        """Сравнение двух ревизий одного черновика"""
        granularity = coerce_granularity(granularity)
        base = self.get(draft, base_revision_id)
        target = self.get(draft, target_revision_id)
        return self.diff_revisions(base, target, granularity)

    def diff_revisions(
        self,
        base: Revision,
        target: Revision,
        granularity: DiffGranularity = DiffGranularity.WORD
    ) -> List[DiffSegment]:
        """Сравнение уже найденных ревизий; снимки неизменяемы, блокировка не нужна"""
        return diff_contents(base.content, target.content, granularity, self.max_diff_tokens)
