"""Tutor feature package: context window, LLM gateway and the question/answer exchange."""
