from __future__ import annotations

from dataclasses import dataclass, field

SUBJECTS = ("maths", "english", "vr", "nvr", "comprehension")
QUIZ_SUBJECTS = ("maths", "english", "vr", "nvr")

GRADES = ("Y3", "Y4", "Y5", "Y6")
EXAM_BOARDS = ("Generic", "GL", "CEM", "Kent", "Bexley", "Sutton", "Essex")
GENERIC_BOARD = "Generic"


@dataclass
class VisualAtom:
    kind: str  # circle | square | triangle | pentagon | hexagon | star | arrow
    fill: str  # black | white | grey | striped
    size: str  # small | medium | large
    rotation: int = 0
    position: tuple[int, int] = (0, 0)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "fill": self.fill,
            "size": self.size,
            "rotation": self.rotation,
            "position": list(self.position),
        }


@dataclass
class Question:
    id: str
    subject: str
    stem: str
    choices: list[str]
    answer_index: int
    explanation: str = ""
    tags: set[str] = field(default_factory=set)
    exam_boards: set[str] = field(default_factory=set)
    visual_choice_sets: list[list[VisualAtom]] | None = None

    def tag_value(self, prefix: str) -> str | None:
        """Return the value of the first ``prefix:value`` tag, if any."""
        marker = prefix + ":"
        for tag in sorted(self.tags):
            if tag.startswith(marker):
                return tag[len(marker):]
        return None

    @property
    def topic(self) -> str | None:
        return self.tag_value("topic")

    @property
    def difficulty(self) -> str | None:
        return self.tag_value("difficulty")

    @property
    def year(self) -> str | None:
        return self.tag_value("year")

    @property
    def correct_choice(self) -> str:
        return self.choices[self.answer_index]

    def to_dict(self, include_answer: bool = True) -> dict:
        d = {
            "id": self.id,
            "subject": self.subject,
            "stem": self.stem,
            "choices": list(self.choices),
            "tags": sorted(self.tags),
            "exam_boards": sorted(self.exam_boards),
            "visual_choice_sets": (
                [[a.to_dict() for a in atoms] for atoms in self.visual_choice_sets]
                if self.visual_choice_sets else None
            ),
        }
        if include_answer:
            d["answer_index"] = self.answer_index
            d["explanation"] = self.explanation
        return d


@dataclass
class Passage:
    id: str
    title: str
    body: str
    questions: list[Question] = field(default_factory=list)


@dataclass
class Profile:
    grade: str = "Y5"
    exam_boards: list[str] = field(default_factory=lambda: [GENERIC_BOARD])
    allow_harder: bool = False

    @property
    def year_tag(self) -> str:
        return f"year:{self.grade.lstrip('Y')}"

    @property
    def level(self) -> int:
        """Generator base level: 0 for Y3 up to 3 for Y6."""
        return GRADES.index(self.grade)

    def to_dict(self) -> dict:
        return {
            "grade": self.grade,
            "exam_boards": list(self.exam_boards),
            "allow_harder": self.allow_harder,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> Profile:
        """Build a profile from loosely-typed data, keeping defaults for bad fields."""
        profile = cls()
        grade = raw.get("grade")
        if grade in GRADES:
            profile.grade = grade
        boards = raw.get("exam_boards")
        if isinstance(boards, list):
            known = [b for b in boards if b in EXAM_BOARDS]
            if known:
                profile.exam_boards = known
        harder = raw.get("allow_harder")
        if isinstance(harder, bool):
            profile.allow_harder = harder
        return profile


@dataclass
class AnswerRecord:
    question_id: str
    choice: int
    correct: bool
    topic: str | None = None


@dataclass
class WritingPrompt:
    id: str
    title: str
    prompt: str
    tips: list[str] = field(default_factory=list)
