"""Seeded daily challenge generation and answer grading."""

from __future__ import annotations

from .generator import ChallengeQuestion, DailyChallengeGenerator, SeededRandom, daily_seed, grade_answer

__all__ = ["ChallengeQuestion", "DailyChallengeGenerator", "SeededRandom", "daily_seed", "grade_answer"]
