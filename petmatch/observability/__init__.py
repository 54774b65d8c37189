"""
Observability package - tracing setup and Flask request instrumentation.
"""
