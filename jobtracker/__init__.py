"""Job application tracker with LLM-backed job-description analysis."""

__version__ = "0.1.0"
