"""Argument parser builders for each CLI command group."""
