"""Configuration - Settings and feature flags."""
