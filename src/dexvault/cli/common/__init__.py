"""Shared CLI plumbing: context, options, runtime and error handling."""
