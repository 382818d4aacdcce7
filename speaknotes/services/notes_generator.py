"""
Heuristic lecture-notes generator.

Turns a raw transcript into topic, summary, key points, definitions,
keywords, concepts, exam notes and practice questions using plain
pattern matching and word counts.
"""
import re
from typing import Dict, List, Optional, Tuple

import structlog

from speaknotes.models import Definition, KeywordEntry, NotesResult
from speaknotes.services.logging import log_performance

logger = structlog.get_logger()


STOPWORDS = frozenset({
    "the", "is", "are", "a", "an", "of", "and", "or", "to", "in",
    "on", "for", "with", "that", "this", "by", "as", "from", "at", "be",
    "it", "we", "you", "they", "was", "were", "can", "could", "should", "would",
    "have", "has", "had", "not", "no", "yes", "if", "then", "else", "there",
    "their",
})

KEY_POINT_SIGNALS: Tuple[str, ...] = (
    "important", "key point", "main idea", "in summary", "therefore",
    "so we can", "definition", "types of", "steps",
)

EXAM_SIGNALS: Tuple[str, ...] = (
    "exam", "important", "remember", "must know", "frequently asked",
    "often asked", "definition", "difference between", "advantages",
    "disadvantages", "types of",
)

# Alternation order matters: "in" is tried before "in this".
DISCOURSE_MARKERS: Tuple[str, ...] = ("in", "in this", "in an", "in the", "here we", "we")

DEFAULT_TOPIC = "Lecture Topic"
NO_SUMMARY = "No summary could be generated."
BULLET = "• "
GENERIC_QUESTIONS: Tuple[str, ...] = (
    "Q: List any two key points discussed in this lecture.",
    "Q: Write short notes on any one topic from the lecture.",
)

MIN_SENTENCE_WORDS = 4
MIN_CONCEPT_WORDS = 10
MAX_TERM_WORDS = 6
MIN_DEFINITION_CHARS = 6
TOPIC_FALLBACK_WORDS = 6


def _signal_pattern(phrases: Tuple[str, ...]) -> "re.Pattern[str]":
    return re.compile("|".join(re.escape(p) for p in phrases), re.I | re.A)


WHITESPACE_RE = re.compile(r"\s+")
SENT_SPLIT = re.compile(r"(?<=[.!?])\s+")
NON_TOKEN_RE = re.compile(r"[^a-z0-9\s]")
KEY_POINT_RE = _signal_pattern(KEY_POINT_SIGNALS)
EXAM_RE = _signal_pattern(EXAM_SIGNALS)
DEFINITION_PATTERNS = (
    re.compile(r"(.+?)\s+is\s+(.*)", re.I | re.A),
    re.compile(r"(.+?)\s+are\s+(.*)", re.I | re.A),
    re.compile(r"(.+?)\s+refers to\s+(.*)", re.I | re.A),
)
DISCOURSE_PREFIX_RE = re.compile(r"^(" + "|".join(DISCOURSE_MARKERS) + r")\s+", re.I | re.A)
DEFINITION_LEAD_RE = re.compile(r"^[.:,\-\s]+")


def _word_count(sentence: str) -> int:
    # Sentences are whitespace-normalized, so a single-space split is exact.
    return len(sentence.split(" "))


def normalize_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text or "").strip()


# -------------------- SEGMENTATION --------------------

def split_into_sentences(text: str) -> List[str]:
    """Split normalized text after terminal punctuation, dropping short fragments."""
    pieces = (p.strip() for p in SENT_SPLIT.split(text))
    return [p for p in pieces if p and _word_count(p) >= MIN_SENTENCE_WORDS]


# -------------------- KEYWORDS & TOPIC --------------------

def extract_keywords(text: str, max_keywords: int = 10) -> List[KeywordEntry]:
    tokens = NON_TOKEN_RE.sub(" ", text.lower()).split()

    counts: Dict[str, int] = {}
    for token in tokens:
        if len(token) <= 2 or token in STOPWORDS:
            continue
        counts[token] = counts.get(token, 0) + 1

    # sorted() is stable, so ties keep first-seen order even with reverse=True
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [KeywordEntry(word=word, count=count) for word, count in ranked[:max_keywords]]


def detect_topic(text: str, sentences: List[str]) -> str:
    keywords = extract_keywords(text)
    if keywords:
        return keywords[0].word
    if sentences:
        return " ".join(sentences[0].split(" ")[:TOPIC_FALLBACK_WORDS])
    return DEFAULT_TOPIC


# -------------------- SECTIONS --------------------

def build_summary(sentences: List[str], max_lines: int = 6) -> str:
    """Sample sentences at an even stride so the summary spans the whole lecture."""
    if not sentences:
        return NO_SUMMARY

    step = max(1, len(sentences) // max_lines)
    selected: List[str] = []
    for i in range(0, len(sentences), step):
        if len(selected) >= max_lines:
            break
        selected.append(sentences[i])
    return " ".join(selected)


def build_key_points(sentences: List[str], max_points: int = 8) -> List[str]:
    if not sentences:
        return []
    flagged = [s for s in sentences if KEY_POINT_RE.search(s)]
    source = flagged or sentences
    return [BULLET + s for s in source[:max_points]]


def build_concepts(sentences: List[str], max_concepts: int = 6) -> List[str]:
    long_ones = [s for s in sentences if _word_count(s) >= MIN_CONCEPT_WORDS]
    return long_ones[:max_concepts]


def build_exam_notes(sentences: List[str], topic: Optional[str], max_lines: int = 6) -> List[str]:
    flagged = [s for s in sentences if EXAM_RE.search(s)]
    source = flagged or sentences
    selected = [BULLET + s for s in source[:max_lines]]
    if not selected and topic:
        selected.append(f"{BULLET}Understand the basic concept of {topic}.")
    return selected


# -------------------- DEFINITIONS --------------------

def strip_discourse_marker(term: str) -> str:
    return DISCOURSE_PREFIX_RE.sub("", term, count=1).strip()


def _match_definition(sentence: str) -> Optional[Tuple[str, str]]:
    # Only the first pattern that matches is used, regardless of where its
    # connector sits in the sentence. Anchored at 0: the lazy term capture
    # still reaches the leftmost connector, without a retry per start offset.
    for pattern in DEFINITION_PATTERNS:
        match = pattern.match(sentence)
        if match:
            return match.group(1).strip(), match.group(2).strip()
    return None


def extract_definitions(sentences: List[str], max_defs: int = 8) -> List[Definition]:
    """
    Mine "X is Y" / "X are Y" / "X refers to Y" pairs.

    Terms longer than six words or definitions of five characters or fewer
    are rejected; at most ``max_defs`` pairs are kept.
    """
    defs: List[Definition] = []
    for sentence in sentences:
        matched = _match_definition(sentence)
        if not matched:
            continue
        term = strip_discourse_marker(matched[0])
        definition = DEFINITION_LEAD_RE.sub("", matched[1])
        if (
            term
            and _word_count(term) <= MAX_TERM_WORDS
            and len(definition) >= MIN_DEFINITION_CHARS
            and len(defs) < max_defs
        ):
            defs.append(Definition(term=term, definition=definition))
    return defs


# -------------------- QUESTIONS --------------------

def generate_questions(
    definitions: List[Definition],
    topic: Optional[str],
    sentences: List[str],
    max_questions: int = 5,
) -> List[str]:
    questions = [f"Q: What is {d.term}?" for d in definitions[:max_questions]]

    if len(questions) < max_questions and topic:
        questions.append(f"Q: Explain the concept of {topic} in your own words.")
    for generic in GENERIC_QUESTIONS:
        if len(questions) < max_questions:
            questions.append(generic)

    return questions[:max_questions]


# -------------------- PIPELINE --------------------

@log_performance("generate_notes")
def generate_notes(text: str) -> NotesResult:
    cleaned = normalize_whitespace(text)

    sentences = split_into_sentences(cleaned)
    topic = detect_topic(cleaned, sentences)
    definitions = extract_definitions(sentences)

    notes = NotesResult(
        topic=topic,
        summary=build_summary(sentences),
        key_points=build_key_points(sentences),
        definitions=definitions,
        keywords=extract_keywords(cleaned),
        concepts=build_concepts(sentences),
        exam_notes=build_exam_notes(sentences, topic),
        questions=generate_questions(definitions, topic, sentences),
        raw_sentence_count=len(sentences),
    )
    logger.info(
        "notes_generated",
        sentences=notes.raw_sentence_count,
        definitions=len(notes.definitions),
        topic=topic,
    )
    return notes
