"""
LinguaBridge: translate text through hosted LLM providers, with a demo
fallback when none of them answers.
"""

__version__ = "0.1.0"
