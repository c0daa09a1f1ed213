"""Rhythm game engine for osu!mania beatmaps: parsing, scoring, replays and terminal rendering."""

__version__ = "0.1.0"