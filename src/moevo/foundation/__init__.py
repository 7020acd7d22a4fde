"""Core building blocks with no dependency on the evolutionary loop."""
