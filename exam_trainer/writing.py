"""Writing mode: prompt selection and quick heuristic feedback on a draft."""
from __future__ import annotations

import random
import re
from dataclasses import dataclass, field

from exam_trainer.models import WritingPrompt

DEFAULT_PROMPTS = [
    WritingPrompt(
        id="builtin-door",
        title="The Door",
        prompt="You find a small door at the bottom of your garden that was not there yesterday. Write a story about what happens when you open it.",
        tips=["Use your senses to describe what you see.", "Build suspense before the door opens."],
    ),
    WritingPrompt(
        id="builtin-letter",
        title="A Letter to the Head Teacher",
        prompt="Write a letter to your head teacher persuading them to introduce a new after-school club.",
        tips=["Give at least three reasons.", "End with a polite but confident conclusion."],
    ),
    WritingPrompt(
        id="builtin-storm",
        title="The Storm",
        prompt="Describe a storm arriving over a seaside town, from the first dark clouds to the moment it passes.",
        tips=["Vary your sentence lengths.", "Try a simile or a metaphor."],
    ),
    WritingPrompt(
        id="builtin-day",
        title="The Best Day",
        prompt="Write about the best day you have ever had and explain why it mattered to you.",
        tips=["Organise your writing into paragraphs.", "Show feelings as well as events."],
    ),
]

# Words that usually signal a stretch beyond everyday vocabulary.
AMBITIOUS_WORDS = {
    "suddenly", "however", "although", "meanwhile", "furthermore", "consequently",
    "nevertheless", "desperately", "cautiously", "magnificent", "mysterious",
    "enormous", "glistening", "whispered", "trembling", "eerie", "ancient",
    "determined", "reluctantly", "gleaming", "exhausted", "silhouette",
}

_SENTENCE_END = re.compile(r"[.!?]+")
_WORD = re.compile(r"[A-Za-z']+")


def pick_prompt(prompts: list[WritingPrompt], rng: random.Random | None = None) -> WritingPrompt:
    return (rng or random.Random()).choice(prompts or DEFAULT_PROMPTS)


@dataclass
class WritingFeedback:
    words: int
    sentences: int
    paragraphs: int
    avg_sentence_length: float
    lexical_variety: float
    ambitious_words: list[str]
    punctuation: list[str]
    varied_openers: bool
    score: int
    tips: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "words": self.words,
            "sentences": self.sentences,
            "paragraphs": self.paragraphs,
            "avg_sentence_length": self.avg_sentence_length,
            "lexical_variety": self.lexical_variety,
            "ambitious_words": self.ambitious_words,
            "punctuation": self.punctuation,
            "varied_openers": self.varied_openers,
            "score": self.score,
            "tips": self.tips,
        }


def assess_writing(text: str) -> WritingFeedback:
    """Score a draft out of 10 on length, structure, vocabulary and punctuation."""
    words = _WORD.findall(text)
    lower = [w.lower() for w in words]
    sentences = [s.strip() for s in _SENTENCE_END.split(text) if _WORD.search(s)]
    paragraphs = [p for p in re.split(r"\n\s*\n", text.strip()) if p.strip()]
    avg_len = round(len(words) / len(sentences), 1) if sentences else 0.0
    variety = round(len(set(lower)) / len(lower), 2) if lower else 0.0
    ambitious = sorted(set(lower) & AMBITIOUS_WORDS)
    punctuation = sorted({ch for ch in text if ch in ",;:!?\"'()-"})
    openers = [_WORD.findall(s)[0].lower() for s in sentences if _WORD.findall(s)]
    varied = len(openers) >= 3 and len(set(openers)) >= len(openers) * 0.6

    score = 0
    tips: list[str] = []
    if len(words) >= 250:
        score += 2
    elif len(words) >= 100:
        score += 1
        tips.append("Aim for at least 250 words to develop your ideas fully.")
    else:
        tips.append("Your piece is quite short; add more detail and events.")
    if len(paragraphs) >= 3:
        score += 2
    elif len(paragraphs) == 2:
        score += 1
        tips.append("Use more paragraphs: a new one for each new idea, time or place.")
    else:
        tips.append("Organise your writing into paragraphs.")
    if 8 <= avg_len <= 20:
        score += 1
    elif avg_len > 20:
        tips.append("Some sentences are very long; break them up for clarity.")
    else:
        tips.append("Try combining short sentences with conjunctions such as 'because' or 'although'.")
    if variety >= 0.5:
        score += 1
    else:
        tips.append("Avoid repeating the same words; look for synonyms.")
    if len(ambitious) >= 3:
        score += 2
    elif ambitious:
        score += 1
        tips.append("Include a few more ambitious words or adverbs.")
    else:
        tips.append("Use ambitious vocabulary to make your writing stand out.")
    if len(punctuation) >= 3:
        score += 1
    else:
        tips.append("Show a range of punctuation: commas, question marks, speech marks.")
    if varied:
        score += 1
    elif len(openers) >= 3:
        tips.append("Start your sentences in different ways.")

    return WritingFeedback(
        words=len(words),
        sentences=len(sentences),
        paragraphs=len(paragraphs),
        avg_sentence_length=avg_len,
        lexical_variety=variety,
        ambitious_words=ambitious,
        punctuation=punctuation,
        varied_openers=varied,
        score=min(score, 10),
        tips=tips,
    )
