from enum import Enum


class JLPTLevelEnum(str, Enum):
    N5 = "N5"
    N4 = "N4"
    N3 = "N3"
    N2 = "N2"
    N1 = "N1"

class SectionTypeEnum(str, Enum):
    VOCABULARY = "vocabulary"
    GRAMMAR_READING = "grammar_reading"
    LISTENING = "listening"

class TestModeEnum(str, Enum):
    FULL_TEST = "full_test"
    SECTION_PRACTICE = "section_practice"

class TestAttemptStatusEnum(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

class ReferenceGradeEnum(str, Enum):
    A = "A"
    B = "B"
    C = "C"

class SelectionPolicyEnum(str, Enum):
    ORDERED = "ordered"
    SHUFFLED = "shuffled"

class FailureKindEnum(str, Enum):
    SECTION = "section"
    TOTAL = "total"

# Exam order; snapshots, scoring inputs and failure reasons follow it.
SECTION_ORDER = [
    SectionTypeEnum.VOCABULARY,
    SectionTypeEnum.GRAMMAR_READING,
    SectionTypeEnum.LISTENING,
]

SECTION_DISPLAY_NAMES = {
    SectionTypeEnum.VOCABULARY: "Vocabulary",
    SectionTypeEnum.GRAMMAR_READING: "Grammar/Reading",
    SectionTypeEnum.LISTENING: "Listening",
}
