"""Configuration models for the Lambda entry points."""
