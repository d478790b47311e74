"""Huddle social backend package."""
