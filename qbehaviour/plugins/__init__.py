"""Plugins - pluggable question behaviours."""
