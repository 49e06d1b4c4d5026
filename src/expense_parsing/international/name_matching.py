"""Match participant names mentioned in free text against a group's members."""
from __future__ import annotations

import re
from typing import Iterable, Sequence

import structlog
from rapidfuzz.distance import Levenshtein

from ..models.expense import Participant, ParticipantMatch
from .currency_patterns import DEFAULT_LOCALE

logger = structlog.get_logger(__name__)

FUZZY_MATCH_THRESHOLD = 0.7
FUZZY_MISSING_THRESHOLD = 0.3

_ALL_PARTICIPANT_WORDS: dict[str, tuple[str, ...]] = {
    "en-US": ("all", "everyone", "everybody", "the group"),
    "es": ("todos", "todo el mundo", "el grupo"),
    "fr-FR": ("tous", "tout le monde", "le groupe"),
    "de-DE": ("alle", "jeder", "die gruppe"),
    "zh-CN": ("所有人", "大家", "全部"),
    "zh-TW": ("所有人", "大家", "全部"),
    "pl-PL": ("wszyscy", "każdy", "grupa"),
    "ru-RU": ("все", "всех", "группа"),
    "it-IT": ("tutti", "ognuno", "il gruppo"),
    "pt-BR": ("todos", "todo mundo", "o grupo"),
    "nl-NL": ("iedereen", "allemaal", "de groep"),
    "fi": ("kaikki", "ryhmä"),
    "tr-TR": ("herkes", "hepsi", "grup"),
    "ro": ("toți", "toată lumea", "grupul"),
    "ua-UA": ("всі", "вся група", "група"),
}

# Chinese text has no spaces, so these words are matched anywhere.
_UNBOUNDED_LOCALES = frozenset({"zh-CN", "zh-TW"})

_COMMON_WORDS: dict[str, frozenset[str]] = {
    "en-US": frozenset({
        "i", "you", "we", "they", "the", "and", "or", "but", "for", "with",
        "paid", "spent", "cost", "bill", "today", "yesterday",
    }),
    "es": frozenset({
        "yo", "tú", "nosotros", "ellos", "el", "la", "y", "o", "pero", "para",
        "con", "pagué", "gasté", "cuesta", "hoy", "ayer",
    }),
    "fr-FR": frozenset({
        "je", "tu", "nous", "ils", "le", "la", "et", "ou", "mais", "pour",
        "avec", "payé", "dépensé", "coûte", "hier",
    }),
}


def _word_pattern(word: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(word)}(?!\w)", re.IGNORECASE)


def extract_names(text: str, participants: Sequence[str]) -> list[str]:
    """Return the participants named in *text*, in the order of *participants*.

    Matching is case-insensitive and whole-word ("Ann" does not match inside
    "Annual"); output uses the canonical spelling and has no duplicates.
    """
    if not text:
        return []

    found: list[str] = []
    for name in participants:
        if not name or not name.strip() or name in found:
            continue
        if _word_pattern(name.strip()).search(text):
            found.append(name)
    return found


def mentions_all_participants(text: str, locale: str = DEFAULT_LOCALE) -> bool:
    words = _ALL_PARTICIPANT_WORDS.get(locale, _ALL_PARTICIPANT_WORDS["en-US"])
    if locale in _UNBOUNDED_LOCALES:
        return any(word in text for word in words)
    return any(_word_pattern(word).search(text) for word in words)


def similarity(left: str, right: str) -> float:
    """Normalised Levenshtein similarity of two names, case-insensitive."""
    return Levenshtein.normalized_similarity(left.casefold(), right.casefold())


def _best_match(word: str, participants: Sequence[Participant]) -> tuple[Participant | None, float]:
    best: Participant | None = None
    best_score = 0.0
    for participant in participants:
        score = similarity(word, participant.name)
        if score > best_score:
            best, best_score = participant, score
    return best, best_score


def _potential_names(text: str, locale: str) -> list[str]:
    """Capitalised words that are not common function words."""
    common = _COMMON_WORDS.get(locale, _COMMON_WORDS["en-US"])
    words = []
    for raw in text.split():
        word = re.sub(r"[^\w]", "", raw)
        if len(word) >= 2 and word[0].isupper() and word.lower() not in common:
            words.append(word)
    return words


def match_participants(
    text: str,
    participants: Sequence[Participant],
    locale: str = DEFAULT_LOCALE,
) -> ParticipantMatch:
    """Resolve which group members *text* refers to.

    "Everyone"-style words select the whole group (0.9). Exact whole-word
    matches score 0.8. Without any exact match, capitalised words are compared
    to member names: close matches are accepted, distant-but-plausible ones are
    reported as missing names (0.4). Nothing at all scores 0.2.
    """
    if participants and mentions_all_participants(text, locale):
        return ParticipantMatch(
            participant_ids=[p.id for p in participants],
            confidence=0.9,
            all_participants=True,
        )

    matched = set(extract_names(text, [p.name for p in participants]))
    found_ids = [p.id for p in participants if p.name in matched]
    missing: list[str] = []

    if not found_ids and participants:
        for word in _potential_names(text, locale):
            participant, score = _best_match(word, participants)
            if participant is not None and score > FUZZY_MATCH_THRESHOLD:
                if participant.id not in found_ids:
                    found_ids.append(participant.id)
            elif score > FUZZY_MISSING_THRESHOLD:
                missing.append(word)

    if found_ids:
        confidence = 0.8
    elif missing:
        confidence = 0.4
    else:
        confidence = 0.2

    logger.debug(
        "participants_matched",
        matched=len(found_ids),
        missing=len(missing),
        confidence=confidence,
    )
    return ParticipantMatch(participant_ids=found_ids, missing_names=missing, confidence=confidence)


def canonicalize_names(
    names: Iterable[str],
    participants: Sequence[Participant],
) -> tuple[list[Participant], list[str]]:
    """Map free-form names (e.g. from a language model) onto group members.

    Returns ``(matched, unknown)``. Matched members keep the group's order
    and appear once; names with no exact or close match are returned as
    unknown.
    """
    matched_ids: set[str] = set()
    unknown: list[str] = []

    for name in names:
        if not isinstance(name, str) or not name.strip():
            continue
        name = name.strip()
        exact = next((p for p in participants if p.name.casefold() == name.casefold()), None)
        if exact is not None:
            matched_ids.add(exact.id)
            continue
        participant, score = _best_match(name, participants)
        if participant is not None and score > FUZZY_MATCH_THRESHOLD:
            matched_ids.add(participant.id)
        elif name not in unknown:
            unknown.append(name)

    return [p for p in participants if p.id in matched_ids], unknown
