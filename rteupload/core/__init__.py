"""Core building blocks: configuration, events, errors and the upload pipeline."""
