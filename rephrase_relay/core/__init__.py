"""Core rephrasing flow shared by every slash command."""

from rephrase_relay.core.rephrase import Rephraser, Tone, build_prompt

__all__ = ["Rephraser", "Tone", "build_prompt"]
