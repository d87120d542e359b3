"""
Climate aggregation over the mood journal.

Signals computed:
- Local climate: average intensity, dominant mood and trend over the 20
  newest reports for the current location
- Insights: journal-wide counters (total, recent average, locations)
- Recent history: the newest few reports
"""

import logging
import math
from collections import Counter
from typing import List, Optional, Sequence

from mood_climate.core.models import ClimateSummary, EmotionalInsights, MoodEntry, Trend

logger = logging.getLogger(__name__)


# ============================================================================
# CONFIGURATION
# ============================================================================

CLIMATE_WINDOW_SIZE = 20
RECENT_WINDOW_SIZE = 7
HISTORY_DISPLAY_LIMIT = 6


def round_half_up(value: float) -> int:
    """Rounds .5 away from zero for positive values (65.5 -> 66, 64.5 -> 65)."""
    return int(math.floor(value + 0.5))


# ============================================================================
# AGGREGATOR
# ============================================================================

class ClimateAggregator:
    """Computes summaries over windows of the mood journal."""

    @staticmethod
    def window(entries: Sequence[MoodEntry],
               current_location: str,
               filter_by_location: bool,
               size: int = CLIMATE_WINDOW_SIZE) -> List[MoodEntry]:
        """Newest-first slice of the (optionally location-filtered) journal."""
        if filter_by_location:
            view = [e for e in entries if e.location == current_location]
        else:
            view = list(entries)
        return view[:size]

    @staticmethod
    def summarize(entries: Sequence[MoodEntry],
                  current_location: str,
                  filter_by_location: bool) -> Optional[ClimateSummary]:
        """
        Summarizes the climate window.

        Args:
            entries: Journal entries, newest first.
            current_location: Display string of the current location.
            filter_by_location: Restrict the view to `current_location`.

        Returns:
            ClimateSummary, or None when there is nothing to summarize.
        """
        if not entries:
            return None

        window = ClimateAggregator.window(entries, current_location, filter_by_location)
        if not window:
            logger.info(f"No reports yet for {current_location}")
            return None

        average = sum(e.intensity for e in window) / len(window)

        return ClimateSummary(
            average_intensity=round_half_up(average),
            dominant_mood=ClimateAggregator.dominant_mood(window),
            total_reports=len(window),
            trend=ClimateAggregator.trend(window),
        )

    @staticmethod
    def dominant_mood(window: Sequence[MoodEntry]) -> str:
        """Most frequent mood; ties go to the mood seen first in the window."""
        # Counter keeps insertion order and most_common() is stable for ties.
        counts = Counter(e.mood for e in window)
        return counts.most_common(1)[0][0]

    @staticmethod
    def trend(window: Sequence[MoodEntry]) -> Trend:
        """
        Compares the two newest reports only.

        Equal intensities are reported as DECLINING.
        """
        if len(window) <= 1:
            return Trend.STABLE
        if window[0].intensity > window[1].intensity:
            return Trend.IMPROVING
        return Trend.DECLINING

    @staticmethod
    def insights(entries: Sequence[MoodEntry],
                 current_location: str,
                 has_location: bool) -> EmotionalInsights:
        """Journal-wide counters."""
        recent = list(entries[:RECENT_WINDOW_SIZE])
        recent_average = round_half_up(sum(e.intensity for e in recent) / len(recent)) if recent else 0

        if has_location:
            locations = {e.location for e in entries if e.location == current_location}
        else:
            locations = {e.location for e in entries}

        return EmotionalInsights(
            total_reports=len(entries),
            recent_average=recent_average,
            recent_reports=len(recent),
            locations=len(locations),
        )

    @staticmethod
    def recent_reports(entries: Sequence[MoodEntry], limit: int = HISTORY_DISPLAY_LIMIT) -> List[MoodEntry]:
        return list(entries[:limit])
