"""Vocabulary, spelling and grammar items."""
from __future__ import annotations

import random

from exam_trainer.generators.common import build_question, item_level, unique_distractors
from exam_trainer.models import Profile, Question

SUBJECT = "english"

# (word, synonym, minimum level)
SYNONYMS = [
    ("happy", "cheerful", 0), ("angry", "furious", 0), ("small", "tiny", 0),
    ("fast", "quick", 0), ("big", "huge", 0), ("scared", "afraid", 0),
    ("eager", "keen", 1), ("brave", "courageous", 1), ("tired", "weary", 1),
    ("shout", "yell", 1), ("begin", "start", 1), ("clever", "intelligent", 1),
    ("gloomy", "dismal", 2), ("famous", "renowned", 2), ("honest", "truthful", 2),
    ("rare", "scarce", 2), ("calm", "tranquil", 2), ("ancient", "antique", 2),
    ("abundant", "plentiful", 3), ("reluctant", "unwilling", 3), ("feeble", "frail", 3),
    ("cunning", "crafty", 3), ("hostile", "unfriendly", 3), ("vivid", "colourful", 3),
    ("meticulous", "thorough", 4), ("candid", "frank", 4), ("obstinate", "stubborn", 4),
    ("ominous", "menacing", 4), ("frugal", "thrifty", 4), ("lethargic", "sluggish", 4),
]

ANTONYMS = [
    ("hot", "cold", 0), ("full", "empty", 0), ("early", "late", 0),
    ("light", "dark", 0), ("open", "shut", 0), ("win", "lose", 0),
    ("generous", "mean", 1), ("ancient", "modern", 1), ("shallow", "deep", 1),
    ("victory", "defeat", 1), ("arrive", "depart", 1), ("expand", "shrink", 1),
    ("cautious", "reckless", 2), ("scarce", "plentiful", 2), ("humble", "proud", 2),
    ("permanent", "temporary", 2), ("rigid", "flexible", 2), ("include", "exclude", 2),
    ("transparent", "opaque", 3), ("praise", "criticise", 3), ("sincere", "deceitful", 3),
    ("vague", "precise", 3), ("benevolent", "malicious", 3), ("optimistic", "pessimistic", 3),
    ("frivolous", "serious", 4), ("verbose", "concise", 4), ("diligent", "idle", 4),
    ("ephemeral", "enduring", 4), ("lucid", "confusing", 4), ("affluent", "impoverished", 4),
]

# (correct spelling, misspellings, sentence, minimum level)
SPELLINGS = [
    ("friend", ["freind", "frend", "friand"], "My best ___ lives next door.", 0),
    ("because", ["becuase", "becouse", "beacause"], "We stayed inside ___ it was raining.", 0),
    ("library", ["libary", "liberry", "librery"], "We borrowed books from the ___.", 0),
    ("different", ["diffrent", "diferent", "differant"], "Every snowflake is ___.", 0),
    ("beginning", ["begining", "beggining", "begininng"], "The ___ of the film was exciting.", 1),
    ("believe", ["beleive", "belive", "beleave"], "I ___ you are right.", 1),
    ("February", ["Febuary", "Februry", "Febraury"], "My birthday is in ___.", 1),
    ("separate", ["seperate", "separete", "seprate"], "Keep the red and blue pens ___.", 2),
    ("necessary", ["neccessary", "necesary", "neccesary"], "Is it ___ to bring a coat?", 2),
    ("government", ["goverment", "govermant", "governmant"], "The ___ announced a new law.", 2),
    ("definitely", ["definately", "definitly", "defanitely"], "I will ___ be there on time.", 3),
    ("rhythm", ["rythm", "rhythym", "rhytm"], "She clapped along to the ___ of the song.", 3),
    ("embarrass", ["embarass", "embarras", "embaress"], "Please don't ___ me in front of my friends.", 3),
    ("accommodation", ["accomodation", "acommodation", "accommodasion"], "The hotel offered comfortable ___.", 4),
    ("conscience", ["consience", "concience", "conshience"], "His ___ told him to return the wallet.", 4),
]

# (sentence, correct, distractors, minimum level)
GRAMMAR = [
    ("___ going to the park after school.", "They're", ["There", "Their", "Thier"], 0),
    ("The children put on ___ coats.", "their", ["there", "they're", "thier"], 0),
    ("Yesterday we ___ to the beach.", "went", ["go", "going", "gone"], 0),
    ("I would like ___ go too.", "to", ["too", "two", "tow"], 0),
    ("She has ___ her homework already.", "done", ["did", "do", "doing"], 1),
    ("The dog wagged ___ tail.", "its", ["it's", "its'", "it is"], 1),
    ("She ran ___ than her brother.", "faster", ["fastest", "more fast", "most fast"], 1),
    ("This is the ___ cake I have ever tasted.", "best", ["goodest", "better", "most good"], 2),
    ("The team ___ won every match this season.", "has", ["have", "having", "haves"], 2),
    ("Neither of the boys ___ ready.", "was", ["were", "are", "be"], 3),
    ("You ___ have told me earlier!", "should", ["should of", "shoulded", "shall of"], 3),
    ("Between you and ___, the test was easy.", "me", ["I", "myself", "mine"], 4),
    ("If I ___ you, I would apologise.", "were", ["was", "am", "be"], 4),
]


def _upto(entries: list[tuple], level: int) -> list[tuple]:
    return [e for e in entries if e[-1] <= level]


def _synonyms(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    word, answer, _ = rng.choice(_upto(SYNONYMS, level))
    pool = [s for w, s, _ in SYNONYMS if w != word]
    return build_question(
        rng, prefix="ge-syn", subject=SUBJECT, topic="synonyms",
        difficulty=difficulty, profile=profile,
        stem=f"Choose the word closest in meaning to '{word}'.",
        correct=answer, distractors=unique_distractors(rng, answer, pool),
        explanation=f"'{answer}' means nearly the same as '{word}'.",
    )


def _antonyms(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    word, answer, _ = rng.choice(_upto(ANTONYMS, level))
    # Distractors come from other pairs' answers only.
    pool = [a for w, a, _ in ANTONYMS if w != word]
    return build_question(
        rng, prefix="ge-ant", subject=SUBJECT, topic="antonyms",
        difficulty=difficulty, profile=profile,
        stem=f"Choose the word most opposite in meaning to '{word}'.",
        correct=answer, distractors=unique_distractors(rng, answer, pool),
        explanation=f"'{answer}' is the opposite of '{word}'.",
    )


def _spelling(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    answer, wrong, sentence, _ = rng.choice(_upto(SPELLINGS, level))
    return build_question(
        rng, prefix="ge-spell", subject=SUBJECT, topic="spelling",
        difficulty=difficulty, profile=profile,
        stem=f"Choose the correct spelling to complete the sentence: {sentence}",
        correct=answer, distractors=unique_distractors(rng, answer, wrong),
        explanation=f"The correct spelling is '{answer}'.",
    )


def _grammar(rng: random.Random, profile: Profile) -> Question:
    level, difficulty = item_level(rng, profile)
    sentence, answer, wrong, _ = rng.choice(_upto(GRAMMAR, level))
    return build_question(
        rng, prefix="ge-gram", subject=SUBJECT, topic="grammar",
        difficulty=difficulty, profile=profile,
        stem=f"Which word correctly completes the sentence? {sentence}",
        correct=answer, distractors=unique_distractors(rng, answer, wrong),
        explanation=f"'{sentence.replace('___', answer)}' is correct.",
    )


TOPICS = {
    "synonyms": _synonyms,
    "antonyms": _antonyms,
    "spelling": _spelling,
    "grammar": _grammar,
}
