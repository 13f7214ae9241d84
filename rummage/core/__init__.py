"""Snapshot model, build-time capture, assembly and emission."""
