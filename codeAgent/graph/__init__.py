"""LangGraph state machine driving agent runs."""
