"""
Emotional forecast: a light-hearted "weather report" for feelings.
"""

import logging
import random
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmotionalCondition:
    """A named emotional weather condition."""
    key: str
    condition: str
    intensity: int
    description: str

    def __str__(self) -> str:
        return f"{self.condition} ({self.intensity}%): {self.description}"


EMOTIONAL_CONDITIONS: Dict[str, EmotionalCondition] = {
    'sunny': EmotionalCondition(
        'sunny', 'Sunny Disposition', 85,
        '99% chance of spontaneous joy, with scattered moments of contentment throughout the day.'
    ),
    'cloudy': EmotionalCondition(
        'cloudy', 'Mild Existential Dread', 65,
        '75% chance of overthinking, clearing up by dinner with possible bursts of motivation.'
    ),
    'rainy': EmotionalCondition(
        'rainy', 'Emotional Drizzle', 45,
        '60% chance of melancholy with intermittent periods of introspection and tea consumption.'
    ),
    'stormy': EmotionalCondition(
        'stormy', 'Anxiety Storm', 30,
        '90% chance of racing thoughts with possible lightning bolts of panic, subsiding by evening.'
    ),
    'windy': EmotionalCondition(
        'windy', 'Restless Winds', 55,
        '80% chance of fidgeting and inability to focus, with gusts of creative energy.'
    ),
    'snowy': EmotionalCondition(
        'snowy', 'Peaceful Snowfall', 70,
        '85% chance of calm reflection with a blanket of serenity covering all worries.'
    ),
}

DEFAULT_CONDITION = 'cloudy'


def generate_forecast(rng: Optional[random.Random] = None) -> EmotionalCondition:
    """Picks one emotional condition uniformly at random."""
    rng = rng or random.Random()
    key = rng.choice(list(EMOTIONAL_CONDITIONS))
    logger.info(f"Emotional forecast: {EMOTIONAL_CONDITIONS[key].condition}")
    return EMOTIONAL_CONDITIONS[key]
