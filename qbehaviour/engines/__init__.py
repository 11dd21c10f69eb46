"""Engines - certainty marking, response capture and grading dispatch."""
