"""
Static question catalog for the student wellness assessment.

The catalog is plain data: each category holds an ordered list of question
texts, a fixed set of positively worded texts is reverse-scored, and every
answer option maps to a 0-4 score. ``load_question_bank`` turns it into an
immutable, versioned ``QuestionBank`` once per process.
"""
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from wellness import config

OVERALL = "overall"

# Declaration order matters: "overall" expands categories in this order.
CATEGORY_TAGS: Tuple[str, ...] = ("depression", "stress", "anxiety", "adhd", "wellbeing")

FREQUENCY_OPTIONS: Tuple[str, ...] = ("Always", "Often", "Sometimes", "Rarely", "Never")
YES_NO_OPTIONS: Tuple[str, ...] = ("Yes", "No")

# -------------------------------------------------------
# 1. SCORING MAP
# -------------------------------------------------------
OPTION_SCORES: Mapping[str, int] = MappingProxyType({
    "Never": 0,
    "Rarely": 1,
    "Sometimes": 2,
    "Often": 3,
    "Always": 4,
    "Yes": 4,
    "No": 0,
})

MAX_OPTION_SCORE = 4

# -------------------------------------------------------
# 2. CATEGORY METADATA
# -------------------------------------------------------
CATEGORY_INFO: Mapping[str, Dict[str, str]] = MappingProxyType({
    "depression": {
        "title": "Depression",
        "description": "Assess feelings of sadness, hopelessness, and emotional well-being",
    },
    "stress": {
        "title": "Stress",
        "description": "Evaluate stress levels related to studies, exams, and daily life",
    },
    "adhd": {
        "title": "ADHD",
        "description": "Screen for attention, focus, and hyperactivity symptoms",
    },
    "anxiety": {
        "title": "Anxiety",
        "description": "Assess anxiety levels and social interaction concerns",
    },
    "wellbeing": {
        "title": "Wellbeing",
        "description": "Comprehensive assessment of life satisfaction and social connections",
    },
    OVERALL: {
        "title": "Overall",
        "description": "Complete assessment covering all areas",
    },
})

# -------------------------------------------------------
# 3. QUESTION CATALOG
# -------------------------------------------------------
QUESTION_CATALOG: Dict[str, Tuple[str, ...]] = {
    "depression": (
        "I often feel lonely or sad",
        "I feel like no one understands me",
        "I have felt hopeless or helpless recently",
        "I feel like giving up or hiding away from everyone",
        "I have thoughts that worry me or make me feel unsafe",
        "I find it difficult to share my feelings with others",
        "I feel overwhelmed by my emotions",
        "I enjoy doing things I used to enjoy",
        "I find it hard to smile or feel cheerful",
        "I sleep too much or too little",
        "I feel tired or have low energy most days",
        "I feel that I am not good at anything or that I am a burden",
        "I sometimes have thoughts that make me feel scared or unsafe",
    ),
    "stress": (
        "I feel pressure from family to do well in school",
        "I find it hard to balance school and home responsibilities",
        "I feel like I can’t control important things in my life",
        "I get upset about things I can't control",
        "I find myself eating too much or skipping meals due to stress",
        "I worry about disappointing others",
        "I skip school work intentionally",
        "I feel calm even when things go wrong",
        "I feel supported by my family during difficult times",
        "My parents/caregivers listen when I share feelings",
        "I can ask for help without feeling ashamed",
    ),
    "anxiety": (
        "I feel nervous or anxious without a clear reason",
        "I worry a lot about making mistakes",
        "I hesitate to speak or ask questions in class",
        "I avoid social events or eating in public due to nervousness",
        "I worry too much about how I look",
        "I feel like something bad might happen, even when things seem fine",
        "I have trouble relaxing even during breaks",
        "My body reacts when I feel nervous (sweating, heartbeat, stomach ache)",
        "I compare my looks or body with others often",
        "I feel anxious about food, weight, or eating in public",
    ),
    "adhd": (
        "I find it hard to concentrate in class or while studying",
        "I lose things like notebooks or ID cards often",
        "I get distracted easily, even in quiet places",
        "I start tasks but don’t finish them",
        "I forget instructions or assignments",
        "I talk or move a lot, even when I’m not supposed to",
        "I interrupt or talk over others",
        "I act before thinking about the consequences",
        "I feel restless or find it hard to sit still",
        "I struggle to organize my time and tasks",
    ),
    "wellbeing": (
        "I feel cheerful and in good spirits",
        "I feel calm and relaxed",
        "I feel active and full of energy",
        "I feel that my life has meaning and purpose",
        "I wake up feeling fresh and rested",
        "I am confident in myself",
        "I can adapt when things change",
        "I understand and respect others' feelings",
        "I feel like I belong in school",
        "I feel respected by classmates and teachers",
        "I am satisfied with my academic performance",
        "I get along well with classmates",
        "I believe I can solve difficult tasks with effort",
        "I can manage my time and submit work on time",
        "I feel safe at home",
        "I am happy with my body image",
        "I skip meals on purpose",
        "I overeat when stressed or emotional",
        "I feel guilty after eating",
        "I have tried smoking or alcohol out of curiosity or peer pressure",
        "I have taken part in bullying (online or offline)",
        "I have shared or seen hurtful messages online",
        "I have stayed silent when I saw something wrong",
    ),
}

YES_NO_QUESTIONS = frozenset({
    "I have tried smoking or alcohol out of curiosity or peer pressure",
    "I have taken part in bullying (online or offline)",
    "I have shared or seen hurtful messages online",
    "I have stayed silent when I saw something wrong",
})

# Positively worded: high agreement means good wellbeing.
REVERSE_SCORED_QUESTIONS = frozenset({
    "I enjoy doing things I used to enjoy",
    "I feel calm even when things go wrong",
    "I feel supported by my family during difficult times",
    "My parents/caregivers listen when I share feelings",
    "I can ask for help without feeling ashamed",
    "I feel cheerful and in good spirits",
    "I feel calm and relaxed",
    "I feel active and full of energy",
    "I feel that my life has meaning and purpose",
    "I wake up feeling fresh and rested",
    "I am confident in myself",
    "I can adapt when things change",
    "I understand and respect others' feelings",
    "I feel like I belong in school",
    "I feel respected by classmates and teachers",
    "I am satisfied with my academic performance",
    "I get along well with classmates",
    "I believe I can solve difficult tasks with effort",
    "I can manage my time and submit work on time",
    "I feel safe at home",
    "I am happy with my body image",
})


@dataclass(frozen=True)
class Question:
    text: str
    category: str
    options: Tuple[str, ...] = FREQUENCY_OPTIONS
    is_reverse_scored: bool = False
    input_type: str = "radio"

    def to_dict(self) -> Dict[str, object]:
        return {
            "question": self.text,
            "category": self.category,
            "type": self.input_type,
            "options": list(self.options),
            "reverse_scored": self.is_reverse_scored,
        }


@dataclass(frozen=True)
class QuestionBank:
    """Immutable catalog: category tag -> ordered questions."""

    version: str
    categories: Mapping[str, Tuple[Question, ...]] = field(default_factory=dict)

    def __post_init__(self):
        frozen = MappingProxyType(
            {tag: tuple(questions) for tag, questions in self.categories.items()}
        )
        seen_texts = set()
        for tag, questions in frozen.items():
            if tag not in CATEGORY_TAGS:
                raise ValueError(f"Unknown category in question bank: {tag!r}")
            for question in questions:
                if question.category != tag:
                    raise ValueError(
                        f"Question {question.text!r} filed under {tag!r} "
                        f"but belongs to {question.category!r}"
                    )
                if question.text in seen_texts:
                    raise ValueError(f"Duplicate question text: {question.text!r}")
                for option in question.options:
                    if option not in OPTION_SCORES:
                        raise ValueError(f"Unknown option {option!r} for {question.text!r}")
                seen_texts.add(question.text)
        object.__setattr__(self, "categories", frozen)

    def __contains__(self, tag: object) -> bool:
        return tag in self.categories

    def __iter__(self) -> Iterator[str]:
        # Declaration order, not insertion order of the mapping.
        return (tag for tag in CATEGORY_TAGS if tag in self.categories)

    def questions_for(self, tag: str) -> Tuple[Question, ...]:
        return self.categories.get(tag, ())

    def all_questions(self) -> Tuple[Question, ...]:
        questions: Tuple[Question, ...] = ()
        for tag in self:
            questions += self.categories[tag]
        return questions

    def question_counts(self) -> Dict[str, int]:
        counts = {tag: len(self.categories[tag]) for tag in self}
        counts[OVERALL] = sum(counts.values())
        return counts


def build_question(text: str, category: str) -> Question:
    return Question(
        text=text,
        category=category,
        options=YES_NO_OPTIONS if text in YES_NO_QUESTIONS else FREQUENCY_OPTIONS,
        is_reverse_scored=text in REVERSE_SCORED_QUESTIONS,
    )


def build_question_bank(
    catalog: Mapping[str, Tuple[str, ...]],
    version: str,
) -> QuestionBank:
    """Build a ``QuestionBank`` from a ``category -> question texts`` mapping."""
    return QuestionBank(
        version=version,
        categories={
            category: tuple(build_question(text, category) for text in texts)
            for category, texts in catalog.items()
        },
    )


@lru_cache(maxsize=None)
def load_question_bank(version: Optional[str] = None) -> QuestionBank:
    """Return the process-wide default catalog."""
    return build_question_bank(QUESTION_CATALOG, version or config.QUESTION_BANK_VERSION)


def is_known_tag(tag: str) -> bool:
    return tag == OVERALL or tag in CATEGORY_TAGS
