"""Moderation engine: policy, result taxonomy and the stage pipeline.

This package provides:
- Models: matches, violations and the per-message result
- Config: toggles, the strict/moderate/lenient presets and YAML loading
- Engine: ordered detection and redaction over a single message
"""
