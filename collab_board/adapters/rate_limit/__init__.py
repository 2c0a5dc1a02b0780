"""Failed-attempt limiting.

The password gate talks to ``AbstractAttemptLimiter``; the in-memory
implementation is enough for a single process and can be replaced by a
shared store without changing the services.
"""
