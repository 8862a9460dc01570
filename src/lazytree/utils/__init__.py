"""Utility helpers for lazytree."""
