"""Utility helpers for the webhook redeployer."""
