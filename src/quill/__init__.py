"""Quill - PIN-locked personal journal."""
