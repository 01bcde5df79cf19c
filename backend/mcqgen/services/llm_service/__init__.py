"""LLM service module.

Wraps the Google Gemini chat model used for question generation.

Key modules:
- llm.py: Client construction, token budget and the model call
- response_parser.py: JSON array extraction from raw completions
- llm_schemas.py: Pydantic schema for normalized questions
"""
