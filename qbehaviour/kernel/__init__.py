"""Kernel - attempt, step and question models shared by every behaviour."""
