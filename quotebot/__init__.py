"""
Top-level package for the daily dev-quote Discord bot.

This package hosts:
- environment / YAML configuration loading and validation
- quote generation against an OpenAI-compatible chat-completions endpoint
- ClickUp task context and static fallback quotes
- Discord delivery (webhook or bot client) and the cron schedule
"""
