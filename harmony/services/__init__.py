"""
Services module - LLM client, AI features, matching and trending topics.
"""
