"""Compatibility scoring: profile, preference, horoscope and heuristic AI terms."""
