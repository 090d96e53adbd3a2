"""Article analysis flow.

Builds the fact-check prompt, asks the chat model, validates its JSON verdict
and exposes the result over ``POST /api/analyze``.
"""
