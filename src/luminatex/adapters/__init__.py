"""Adapters connecting the core pipeline to typesetting and output backends."""
