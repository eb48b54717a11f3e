import re
from types import MappingProxyType
from typing import Mapping, Tuple

from app.core.analytics import Mood

# Keyword lists per emotion, checked in this order
DEFAULT_EMOTION_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    Mood.HAPPY.value: ("happy", "joy", "excited", "great", "wonderful", "amazing", "good", "love", "smile", "laugh"),
    Mood.SAD.value: ("sad", "unhappy", "depressed", "down", "miserable", "upset", "cry", "tears", "heartbroken"),
    Mood.ANGRY.value: ("angry", "mad", "furious", "annoyed", "irritated", "frustrated", "rage", "hate"),
    Mood.ANXIOUS.value: ("anxious", "worried", "nervous", "stress", "tense", "fear", "scared", "panic"),
    Mood.CALM.value: ("calm", "peaceful", "relaxed", "serene", "tranquil", "content", "quiet", "still"),
    Mood.EXCITED.value: ("excited", "thrilled", "eager", "enthusiastic", "energetic", "pumped", "psyched"),
})

WORD_PATTERN = re.compile(r"\b(\w+)\b")


def detect_emotion(text: str, keywords: Mapping[str, Tuple[str, ...]] = DEFAULT_EMOTION_KEYWORDS) -> str:
    """Pick the emotion whose keywords occur most often in the text."""
    if not text:
        return Mood.NEUTRAL.value

    words = WORD_PATTERN.findall(text.lower())
    scores = {emotion: 0 for emotion in keywords}
    for word in words:
        for emotion, emotion_words in keywords.items():
            if word in emotion_words:
                scores[emotion] += 1

    best_emotion = Mood.NEUTRAL.value
    best_score = 0
    for emotion, score in scores.items():
        if score > best_score:
            best_emotion, best_score = emotion, score
    return best_emotion
